import pytest
from unittest.mock import patch
from sqlalchemy import delete, update

from stockroom.models import Item, ActivityLog, PickList, PickListItem, PickListStatus, Profile
from stockroom.services import (
    ItemService, FolderService, PickListService, DashboardService, AuthService, ActivityService,
    InvalidTransition, InvalidQuantity, InsufficientStock, NotFound, PickListLocked,
    PickConflict, DuplicateValue, InvalidInput, AuthError
)
from stockroom.services.auth_service import decode_token
from tests.conftest import (
    create_test_item, create_test_folder, create_test_tag, create_test_pick_list, create_test_line
)


def _actions(**filters):
    return [entry.action_type for entry in ActivityLog.query.filter_by(**filters).all()]


class TestPickLine:
    """Atomic picking against stock."""

    def test_pick_decrements_stock(self, db_session, feed):
        item = create_test_item(db_session, quantity=10)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item, quantity_requested=5)

        result = PickListService(feed).pick_line(line.id, 3, actor_id='user-1')

        assert result['ok'] is True
        assert result['delta'] == 3
        assert result['new_item_quantity'] == 7
        assert result['line']['quantity_picked'] == 3
        assert result['line']['picked_by'] == 'user-1'
        assert db_session.get(Item, item.id).quantity == 7

    def test_lowering_pick_returns_stock(self, db_session, feed):
        item = create_test_item(db_session, quantity=10)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item, quantity_requested=5)
        service = PickListService(feed)

        service.pick_line(line.id, 5)
        result = service.pick_line(line.id, 2)

        assert result['delta'] == -3
        assert result['new_item_quantity'] == 8

    def test_repeat_pick_is_idempotent(self, db_session, feed):
        item = create_test_item(db_session, quantity=10)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item, quantity_requested=5)
        service = PickListService(feed)

        service.pick_line(line.id, 4)
        second = service.pick_line(line.id, 4)

        assert second['delta'] == 0
        assert second['new_item_quantity'] == 6
        assert _actions(action_type='item_picked') == ['item_picked']

    def test_insufficient_stock_changes_nothing(self, db_session, feed):
        item = create_test_item(db_session, quantity=2)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item, quantity_requested=5)

        with pytest.raises(InsufficientStock):
            PickListService(feed).pick_line(line.id, 5)

        db_session.expire_all()
        assert db_session.get(Item, item.id).quantity == 2
        assert db_session.get(PickListItem, line.id).quantity_picked == 0
        assert _actions(action_type='item_picked') == []

    def test_exact_stock_can_be_picked_to_zero(self, db_session, feed):
        item = create_test_item(db_session, quantity=5)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item, quantity_requested=5)

        result = PickListService(feed).pick_line(line.id, 5)

        assert result['new_item_quantity'] == 0

    @pytest.mark.parametrize('quantity', [-1, 6, 2.5, '3', None, True])
    def test_invalid_quantity(self, db_session, feed, quantity):
        item = create_test_item(db_session, quantity=10)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item, quantity_requested=5)

        with pytest.raises(InvalidQuantity):
            PickListService(feed).pick_line(line.id, quantity)

        db_session.expire_all()
        assert db_session.get(Item, item.id).quantity == 10

    def test_missing_line(self, db_session, feed):
        with pytest.raises(NotFound):
            PickListService(feed).pick_line('no-such-line', 1)

    def test_complete_list_is_locked(self, db_session, feed):
        item = create_test_item(db_session, quantity=10)
        pick_list = create_test_pick_list(db_session, status=PickListStatus.COMPLETE)
        line = create_test_line(db_session, pick_list, item)

        with pytest.raises(PickListLocked):
            PickListService(feed).pick_line(line.id, 1)

    def test_draft_list_is_locked(self, db_session, feed):
        item = create_test_item(db_session, quantity=10)
        pick_list = create_test_pick_list(db_session, status=PickListStatus.DRAFT)
        line = create_test_line(db_session, pick_list, item, quantity_requested=5)

        with pytest.raises(PickListLocked):
            PickListService(feed).pick_line(line.id, 5)

        db_session.expire_all()
        assert db_session.get(Item, item.id).quantity == 10
        assert db_session.get(PickListItem, line.id).quantity_picked == 0
        assert _actions(action_type='item_picked') == []

    def test_ready_list_can_be_picked(self, db_session, feed):
        item = create_test_item(db_session, quantity=10)
        pick_list = create_test_pick_list(db_session, status=PickListStatus.READY_TO_PICK)
        line = create_test_line(db_session, pick_list, item, quantity_requested=5)

        assert PickListService(feed).pick_line(line.id, 2)['new_item_quantity'] == 8

    def test_locks_list_before_line(self, db_session, feed):
        item = create_test_item(db_session, quantity=10)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item)
        service = PickListService(feed)
        calls = []
        get_list = service.pick_list_repo.get_by_id
        get_line = service.pick_list_repo.get_line

        def record_list(pick_list_id, lock=False):
            calls.append(('list', lock))
            return get_list(pick_list_id, lock=lock)

        def record_line(line_id, lock=False):
            calls.append(('line', lock))
            return get_line(line_id, lock=lock)

        with patch.object(service.pick_list_repo, 'get_by_id', side_effect=record_list), \
                patch.object(service.pick_list_repo, 'get_line', side_effect=record_line):
            service.pick_line(line.id, 1)

        locked = [kind for kind, lock in calls if lock]
        assert locked == ['list', 'line']

    def test_item_removed_during_pick_is_not_found(self, db_session, feed):
        item = create_test_item(db_session, quantity=10)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item)
        service = PickListService(feed)

        def row_gone(item_id, delta):
            db_session.execute(delete(Item).where(Item.id == item_id))
            return False

        with patch.object(service.item_repo, 'decrement_stock', side_effect=row_gone):
            with pytest.raises(NotFound):
                service.pick_line(line.id, 1)

        db_session.expire_all()
        assert db_session.get(Item, item.id).quantity == 10

    def test_lost_race_on_line_rolls_back_stock(self, db_session, feed):
        item = create_test_item(db_session, quantity=10)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item, quantity_requested=5)
        service = PickListService(feed)

        with patch.object(service.pick_list_repo, 'record_pick', return_value=False):
            with pytest.raises(PickConflict):
                service.pick_line(line.id, 3)

        db_session.expire_all()
        assert db_session.get(Item, item.id).quantity == 10
        assert db_session.get(PickListItem, line.id).quantity_picked == 0

    def test_audit_entry_details(self, db_session, feed):
        item = create_test_item(db_session, name='Bolt', quantity=10)
        pick_list = create_test_pick_list(db_session, name='Order 7')
        line = create_test_line(db_session, pick_list, item, quantity_requested=5)

        PickListService(feed).pick_line(line.id, 2, actor_id='user-1')

        entry = ActivityLog.query.filter_by(action_type='item_picked').one()
        assert entry.user_id == 'user-1'
        assert entry.item_id == item.id
        assert entry.pick_list_id == pick_list.id
        assert entry.details == {
            'item_name': 'Bolt',
            'pick_list_name': 'Order 7',
            'quantity': 2,
            'delta': 2,
            'inventory_remaining': 8
        }

    def test_notifies_after_commit(self, db_session, feed):
        item = create_test_item(db_session, quantity=10)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item)
        seen = []
        feed.on_change('pick_list_items', seen.append, {'pick_list_id': pick_list.id})

        PickListService(feed).pick_line(line.id, 1)

        assert len(seen) == 1
        assert seen[0].row['id'] == line.id

    def test_failed_pick_does_not_notify(self, db_session, feed):
        item = create_test_item(db_session, quantity=0)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item)
        seen = []
        feed.on_change('pick_list_items', seen.append)

        with pytest.raises(InsufficientStock):
            PickListService(feed).pick_line(line.id, 1)

        assert seen == []

    def test_two_lines_fully_picked(self, db_session, feed):
        item_a = create_test_item(db_session, quantity=10)
        item_b = create_test_item(db_session, quantity=10)
        pick_list = create_test_pick_list(db_session)
        line_a = create_test_line(db_session, pick_list, item_a, quantity_requested=5, sort_order=1)
        line_b = create_test_line(db_session, pick_list, item_b, quantity_requested=3, sort_order=2)
        service = PickListService(feed)

        service.pick_line(line_a.id, 5)
        service.pick_line(line_b.id, 3)
        detail = service.get_pick_list_detail(pick_list.id)

        assert detail['progress'] == 1.0
        assert detail['picked_count'] == 2
        assert all(line['is_picked'] for line in detail['lines'])
        # Fully picked does not complete the list
        assert detail['status'] == 'in_progress'


class TestTransition:

    def test_draft_cannot_jump_to_in_progress(self, db_session, feed):
        pick_list = create_test_pick_list(db_session, status=PickListStatus.DRAFT)

        with pytest.raises(InvalidTransition):
            PickListService(feed).transition(pick_list.id, 'in_progress')

        db_session.expire_all()
        assert db_session.get(PickList, pick_list.id).status == PickListStatus.DRAFT
        assert _actions(pick_list_id=pick_list.id) == []

    def test_allowed_transition_records_activity(self, db_session, feed):
        pick_list = create_test_pick_list(db_session, status=PickListStatus.DRAFT, name='Morning run')

        result = PickListService(feed).transition(pick_list.id, 'ready_to_pick', actor_id='user-1')

        assert result['status'] == 'ready_to_pick'
        entry = ActivityLog.query.filter_by(pick_list_id=pick_list.id).one()
        assert entry.action_type == 'pick_list_updated'
        assert entry.details == {
            'name': 'Morning run',
            'previous_status': 'draft',
            'status': 'ready_to_pick'
        }

    def test_complete_records_completion(self, db_session, feed):
        pick_list = create_test_pick_list(db_session, status=PickListStatus.IN_PROGRESS)

        PickListService(feed).transition(pick_list.id, PickListStatus.COMPLETE)

        assert sorted(_actions(pick_list_id=pick_list.id)) == ['pick_list_completed', 'pick_list_updated']

    def test_complete_allowed_with_unpicked_lines(self, db_session, feed):
        item = create_test_item(db_session)
        pick_list = create_test_pick_list(db_session, status=PickListStatus.PARTIALLY_COMPLETE)
        create_test_line(db_session, pick_list, item, quantity_picked=0)

        result = PickListService(feed).transition(pick_list.id, 'complete')

        assert result['status'] == 'complete'
        assert result['progress'] == 0.0

    def test_complete_is_terminal(self, db_session, feed):
        pick_list = create_test_pick_list(db_session, status=PickListStatus.COMPLETE)

        with pytest.raises(InvalidTransition):
            PickListService(feed).transition(pick_list.id, 'in_progress')

    def test_unknown_status(self, db_session, feed):
        pick_list = create_test_pick_list(db_session, status=PickListStatus.DRAFT)

        with pytest.raises(InvalidTransition):
            PickListService(feed).transition(pick_list.id, 'shipped')

    def test_missing_list(self, db_session, feed):
        with pytest.raises(NotFound):
            PickListService(feed).transition('missing', 'ready_to_pick')


class TestPickListManagement:

    def test_create_pick_list(self, db_session, feed):
        result = PickListService(feed).create_pick_list('  Restock bay 3  ', actor_id='user-1')

        assert result['name'] == 'Restock bay 3'
        assert result['status'] == 'draft'
        assert result['total_count'] == 0
        assert _actions(pick_list_id=result['id']) == ['pick_list_created']

    def test_create_requires_name(self, db_session, feed):
        with pytest.raises(InvalidInput):
            PickListService(feed).create_pick_list('   ')

    def test_add_lines_continues_sort_order(self, db_session, feed):
        item = create_test_item(db_session, sell_price=4.0, cost_price=1.0)
        other = create_test_item(db_session, cost_price=2.0)
        pick_list = create_test_pick_list(db_session, status=PickListStatus.DRAFT)
        create_test_line(db_session, pick_list, item, sort_order=7)

        lines = PickListService(feed).add_lines(pick_list.id, [
            {'item_id': item.id, 'quantity': 2},
            {'item_id': other.id, 'quantity': 1, 'location_hint': 'B2'}
        ])

        assert [line['sort_order'] for line in lines] == [8, 9]
        assert lines[0]['unit_price'] == 4.0
        assert lines[1]['unit_price'] == 2.0
        assert lines[1]['location_hint'] == 'B2'

    def test_add_lines_rejects_zero_quantity(self, db_session, feed):
        item = create_test_item(db_session)
        pick_list = create_test_pick_list(db_session, status=PickListStatus.DRAFT)

        with pytest.raises(InvalidQuantity):
            PickListService(feed).add_lines(pick_list.id, [{'item_id': item.id, 'quantity': 0}])

    def test_add_lines_rejects_deleted_item(self, db_session, feed):
        from stockroom.models import ItemStatus
        item = create_test_item(db_session, status=ItemStatus.DELETED)
        pick_list = create_test_pick_list(db_session, status=PickListStatus.DRAFT)

        with pytest.raises(NotFound):
            PickListService(feed).add_lines(pick_list.id, [{'item_id': item.id, 'quantity': 1}])
        assert PickListItem.query.count() == 0

    def test_add_lines_to_complete_list(self, db_session, feed):
        item = create_test_item(db_session)
        pick_list = create_test_pick_list(db_session, status=PickListStatus.COMPLETE)

        with pytest.raises(PickListLocked):
            PickListService(feed).add_lines(pick_list.id, [{'item_id': item.id, 'quantity': 1}])

    def test_remove_line(self, db_session, feed):
        item = create_test_item(db_session)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item)

        assert PickListService(feed).remove_line(line.id) is True
        assert PickListItem.query.count() == 0

    def test_remove_line_from_complete_list(self, db_session, feed):
        item = create_test_item(db_session)
        pick_list = create_test_pick_list(db_session, status=PickListStatus.COMPLETE)
        line = create_test_line(db_session, pick_list, item)

        with pytest.raises(PickListLocked):
            PickListService(feed).remove_line(line.id)

    def test_delete_pick_list(self, db_session, feed):
        item = create_test_item(db_session)
        pick_list = create_test_pick_list(db_session)
        create_test_line(db_session, pick_list, item)
        service = PickListService(feed)
        service.add_comment(pick_list.id, 'Use the blue trolley')

        service.delete_pick_list(pick_list.id)

        assert PickList.query.count() == 0
        assert PickListItem.query.count() == 0

    def test_comments_oldest_first(self, db_session, feed):
        pick_list = create_test_pick_list(db_session)
        service = PickListService(feed)
        service.add_comment(pick_list.id, 'first', actor_id='user-1')
        service.add_comment(pick_list.id, 'second')

        detail = service.get_pick_list_detail(pick_list.id)

        assert [c['content'] for c in detail['comments']] == ['first', 'second']

    def test_empty_comment(self, db_session, feed):
        pick_list = create_test_pick_list(db_session)
        with pytest.raises(InvalidInput):
            PickListService(feed).add_comment(pick_list.id, '  ')

    def test_detail_lists_allowed_transitions(self, db_session, feed):
        pick_list = create_test_pick_list(db_session, status=PickListStatus.READY_TO_PICK)

        detail = PickListService(feed).get_pick_list_detail(pick_list.id)

        assert sorted(detail['allowed_transitions']) == ['draft', 'in_progress']
        assert detail['progress'] == 0.0

    def test_list_pick_lists_filters(self, db_session, feed):
        create_test_pick_list(db_session, name='Morning run', status=PickListStatus.DRAFT)
        create_test_pick_list(db_session, name='Evening run', status=PickListStatus.COMPLETE)
        service = PickListService(feed)

        drafts = service.list_pick_lists(status='draft')
        evening = service.list_pick_lists(search='EVENING')

        assert [p['name'] for p in drafts['items']] == ['Morning run']
        assert [p['name'] for p in evening['items']] == ['Evening run']
        assert service.list_pick_lists()['pagination']['total'] == 2

    def test_list_pick_lists_unknown_status(self, db_session, feed):
        with pytest.raises(InvalidInput):
            PickListService(feed).list_pick_lists(status='archived')


class TestItemService:

    def test_create_generates_sku(self, app, db_session, feed):
        item = ItemService(feed).create_item(name='Gasket', quantity=3, actor_id='user-1')

        assert item['sku'].startswith(app.config['SKU_PREFIX'])
        assert len(item['sku']) == len(app.config['SKU_PREFIX']) + 4
        assert _actions(item_id=item['id']) == ['item_created']

    def test_create_with_tags(self, db_session, feed):
        tag = create_test_tag(db_session, name='heavy')

        item = ItemService(feed).create_item(name='Anvil', tag_ids=[tag.id])

        assert [t['name'] for t in item['tags']] == ['heavy']

    def test_create_duplicate_sku(self, db_session, feed):
        create_test_item(db_session, sku='SAME-1')
        with pytest.raises(DuplicateValue):
            ItemService(feed).create_item(name='Copy', sku='SAME-1')

    def test_create_in_missing_folder(self, db_session, feed):
        with pytest.raises(NotFound):
            ItemService(feed).create_item(name='Lost', folder_id='nowhere')

    def test_update_replaces_tags(self, db_session, feed):
        old = create_test_tag(db_session, name='old')
        new = create_test_tag(db_session, name='new')
        item = create_test_item(db_session)
        item.tags = [old]
        db_session.commit()

        result = ItemService(feed).update_item(item.id, name='Renamed', tag_ids=[new.id])

        assert result['name'] == 'Renamed'
        assert [t['name'] for t in result['tags']] == ['new']

    def test_soft_delete_hides_item(self, db_session, feed):
        item = create_test_item(db_session, barcode='123456')
        service = ItemService(feed)

        service.delete_item(item.id)

        assert service.list_items()['pagination']['total'] == 0
        with pytest.raises(NotFound):
            service.lookup_code('123456')
        assert Item.query.count() == 1

    def test_adjust_quantity(self, db_session, feed):
        item = create_test_item(db_session, name='Nut', quantity=5)

        result = ItemService(feed).adjust_quantity(item.id, 3, reason='Delivery')

        assert result['quantity'] == 8
        entry = ActivityLog.query.filter_by(action_type='quantity_adjusted').one()
        assert entry.details == {
            'item_name': 'Nut', 'old_qty': 5, 'new_qty': 8, 'adjustment': 3, 'reason': 'Delivery'
        }

    def test_adjust_quantity_clamps_at_zero(self, db_session, feed):
        item = create_test_item(db_session, quantity=2)

        result = ItemService(feed).adjust_quantity(item.id, -5)

        assert result['quantity'] == 0

    def test_adjust_quantity_keeps_concurrent_pick(self, db_session, feed):
        """A pick landing after the read is not overwritten by the adjustment."""
        item = create_test_item(db_session, quantity=10)
        service = ItemService(feed)
        adjust_stock = service.item_repo.adjust_stock

        def pick_first(item_id, adjustment):
            db_session.execute(update(Item).where(Item.id == item_id).values(quantity=Item.quantity - 5))
            return adjust_stock(item_id, adjustment)

        with patch.object(service.item_repo, 'adjust_stock', side_effect=pick_first):
            result = service.adjust_quantity(item.id, 1)

        assert result['quantity'] == 6
        db_session.expire_all()
        assert db_session.get(Item, item.id).quantity == 6

    def test_adjust_quantity_locks_item(self, db_session, feed):
        item = create_test_item(db_session, quantity=3)
        service = ItemService(feed)

        with patch.object(service.item_repo, 'get_by_id', wraps=service.item_repo.get_by_id) as get_by_id:
            service.adjust_quantity(item.id, 1)

        assert get_by_id.call_args.kwargs['lock'] is True

    def test_move_item(self, db_session, feed):
        folder = create_test_folder(db_session)
        item = create_test_item(db_session)

        result = ItemService(feed).move_item(item.id, folder.id)

        assert result['folder_id'] == folder.id
        assert _actions(action_type='item_moved') == ['item_moved']

    def test_lookup_prefers_barcode(self, db_session, feed):
        by_barcode = create_test_item(db_session, barcode='ABC', sku='X-1')
        create_test_item(db_session, sku='ABC')

        assert ItemService(feed).lookup_code('ABC')['id'] == by_barcode.id

    def test_lookup_falls_back_to_sku(self, db_session, feed):
        item = create_test_item(db_session, sku='SKU-77')
        assert ItemService(feed).lookup_code(' SKU-77 ')['id'] == item.id

    def test_low_stock_filter_scenario(self, db_session, feed):
        low = create_test_item(db_session, name='Low', quantity=3, min_quantity=5)
        create_test_item(db_session, name='Plenty', quantity=10, min_quantity=2)

        result = ItemService(feed).list_items(low_stock=True)

        assert [i['id'] for i in result['items']] == [low.id]

    def test_list_items_search_and_sort(self, db_session, feed):
        create_test_item(db_session, name='bravo', quantity=1)
        create_test_item(db_session, name='Alpha', quantity=9, description='red bracket')
        create_test_item(db_session, name='charlie', quantity=5)
        service = ItemService(feed)

        by_name = service.list_items()
        by_quantity = service.list_items(sort_by='quantity', descending=True)
        searched = service.list_items(search='BRA')

        assert [i['name'] for i in by_name['items']] == ['Alpha', 'bravo', 'charlie']
        assert [i['quantity'] for i in by_quantity['items']] == [9, 5, 1]
        assert {i['name'] for i in searched['items']} == {'Alpha', 'bravo'}

    def test_list_items_pagination(self, db_session, feed):
        for n in range(5):
            create_test_item(db_session, name=f'Item {n}')

        page = ItemService(feed).list_items(page=2, per_page=2)

        assert [i['name'] for i in page['items']] == ['Item 2', 'Item 3']
        assert page['pagination'] == {'page': 2, 'per_page': 2, 'total': 5, 'pages': 3}

    def test_list_items_in_folder(self, db_session, feed):
        folder = create_test_folder(db_session)
        inside = create_test_item(db_session, folder_id=folder.id)
        root = create_test_item(db_session)
        service = ItemService(feed)

        assert [i['id'] for i in service.list_items(folder_id=folder.id, scope_to_folder=True)['items']] == [inside.id]
        assert [i['id'] for i in service.list_items(scope_to_folder=True)['items']] == [root.id]

    def test_stock_levels(self, db_session, feed):
        create_test_item(db_session, name='Empty', quantity=0, min_quantity=1)
        create_test_item(db_session, name='Low', quantity=1, min_quantity=3)
        create_test_item(db_session, name='Fine', quantity=9, min_quantity=3)
        service = ItemService(feed)

        assert [i['name'] for i in service.low_stock_items('all')] == ['Empty', 'Low']
        assert [i['name'] for i in service.low_stock_items('low')] == ['Low']
        assert [i['name'] for i in service.low_stock_items('out')] == ['Empty']
        with pytest.raises(InvalidInput):
            service.low_stock_items('none')

    def test_photo_urls(self, app, db_session, feed):
        item = create_test_item(db_session, photos=['a/b.jpg', 'https://cdn.example.com/c.jpg'])

        detail = ItemService(feed).get_item_detail(item.id)

        base = app.config['PHOTO_BASE_URL'].rstrip('/')
        assert detail['photo_urls'] == [
            f"{base}/{app.config['PHOTO_BUCKET']}/a/b.jpg",
            'https://cdn.example.com/c.jpg'
        ]

    def test_item_detail_includes_activity(self, db_session, feed):
        item = create_test_item(db_session, quantity=1)
        service = ItemService(feed)
        service.adjust_quantity(item.id, 1)

        detail = service.get_item_detail(item.id)

        assert [a['action_type'] for a in detail['activity']] == ['quantity_adjusted']
        assert detail['folder'] is None

    def test_tags_unique(self, db_session, feed):
        service = ItemService(feed)
        service.create_tag('fragile')

        with pytest.raises(DuplicateValue):
            service.create_tag('fragile')
        assert [t['name'] for t in service.list_tags()] == ['fragile']


class TestFolderService:

    def test_aggregates_include_descendants(self, db_session, feed):
        root = create_test_folder(db_session, name='Warehouse')
        child = create_test_folder(db_session, name='Aisle', parent_folder_id=root.id)
        create_test_item(db_session, folder_id=root.id, quantity=2, sell_price=5.0)
        create_test_item(db_session, folder_id=child.id, quantity=3, cost_price=2.0)

        folders = FolderService(feed).list_folders()

        assert len(folders) == 1
        assert folders[0]['subfolder_count'] == 1
        assert folders[0]['unit_count'] == 5
        assert folders[0]['total_value'] == 16.0

    def test_breadcrumbs(self, db_session, feed):
        root = create_test_folder(db_session, name='Warehouse')
        child = create_test_folder(db_session, name='Aisle', parent_folder_id=root.id)
        leaf = create_test_folder(db_session, name='Shelf', parent_folder_id=child.id)

        crumbs = FolderService(feed).breadcrumbs(leaf.id)

        assert [c['name'] for c in crumbs] == ['Warehouse', 'Aisle', 'Shelf']

    def test_reparent_into_descendant_rejected(self, db_session, feed):
        root = create_test_folder(db_session, name='Warehouse')
        child = create_test_folder(db_session, name='Aisle', parent_folder_id=root.id)

        with pytest.raises(InvalidInput):
            FolderService(feed).update_folder(root.id, parent_folder_id=child.id)

    def test_reparent_to_root(self, db_session, feed):
        root = create_test_folder(db_session, name='Warehouse')
        child = create_test_folder(db_session, name='Aisle', parent_folder_id=root.id)

        result = FolderService(feed).update_folder(child.id, parent_folder_id=None)

        assert result['parent_folder_id'] is None

    def test_create_under_missing_parent(self, db_session, feed):
        with pytest.raises(NotFound):
            FolderService(feed).create_folder('Orphan', parent_folder_id='missing')


class TestDashboardService:

    def test_totals(self, db_session):
        create_test_item(db_session, quantity=2, min_quantity=5, sell_price=3.0)
        create_test_item(db_session, quantity=10, min_quantity=1, cost_price=1.0)
        create_test_pick_list(db_session, status=PickListStatus.IN_PROGRESS)
        create_test_pick_list(db_session, status=PickListStatus.DRAFT)
        create_test_pick_list(db_session, status=PickListStatus.COMPLETE)

        dashboard = DashboardService().get_dashboard()

        assert dashboard['total_items'] == 2
        assert dashboard['total_value'] == 16.0
        assert dashboard['low_stock_count'] == 1
        assert dashboard['active_pick_list_count'] == 1
        assert dashboard['active_pick_lists'][0]['status'] == 'in_progress'


class TestActivityService:

    def test_category_filter(self, db_session, feed):
        item = create_test_item(db_session, quantity=5)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item)
        ItemService(feed).adjust_quantity(item.id, 1)
        PickListService(feed).pick_line(line.id, 1)
        activity = ActivityService()

        assert {a['action_type'] for a in activity.list_activity('quantity')} == {'quantity_adjusted'}
        assert {a['action_type'] for a in activity.list_activity('pick_list')} == {'item_picked'}
        assert activity.list_activity('item') == []
        assert len(activity.list_activity()) == 2


class TestAuthService:

    def test_register_and_sign_in(self, db_session):
        service = AuthService()
        service.register('New@Example.com', 'long-password', full_name='New Person')

        session = service.sign_in('new@example.com', 'long-password')

        claims = decode_token(session['access_token'])
        assert claims['email'] == 'new@example.com'
        assert claims['roles'] == ['member']
        assert session['profile']['full_name'] == 'New Person'

    def test_wrong_password(self, db_session):
        service = AuthService()
        service.register('user@example.com', 'long-password')

        with pytest.raises(AuthError):
            service.sign_in('user@example.com', 'nope')

    def test_duplicate_email(self, db_session):
        service = AuthService()
        service.register('user@example.com', 'long-password')
        with pytest.raises(DuplicateValue):
            service.register('USER@example.com', 'long-password')

    def test_tampered_token(self, db_session, profile):
        from stockroom.services.auth_service import issue_token
        token = issue_token(profile)
        with pytest.raises(AuthError):
            decode_token(token[:-2] + ('aa' if not token.endswith('aa') else 'bb'))

    def test_pin_lifecycle(self, db_session, profile):
        service = AuthService()

        assert service.set_pin(profile.id, '4821')['has_pin'] is True
        assert service.verify_pin(profile.id, '4821') is True
        assert service.verify_pin(profile.id, '0000') is False
        assert db_session.get(Profile, profile.id).pin_hash != '4821'

        assert service.clear_pin(profile.id)['has_pin'] is False
        assert service.verify_pin(profile.id, '4821') is False

    @pytest.mark.parametrize('pin', ['123', '123456789', '12a4', 1234])
    def test_invalid_pin(self, db_session, profile, pin):
        with pytest.raises(InvalidInput):
            AuthService().set_pin(profile.id, pin)

    def test_update_profile(self, db_session, profile):
        result = AuthService().update_profile(profile.id, full_name='Renamed', email='ignored@example.com')

        assert result['full_name'] == 'Renamed'
        assert result['email'] == 'picker@example.com'
