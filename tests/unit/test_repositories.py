from stockroom.models import Item, ItemStatus, PickListStatus, ActivityLog, ActionType
from stockroom.repositories import ItemRepository, FolderRepository, PickListRepository, ActivityRepository
from tests.conftest import (
    create_test_item, create_test_folder, create_test_pick_list, create_test_line
)


class TestItemRepository:
    """Test ItemRepository implementations."""

    def test_create_item(self, db_session):
        repo = ItemRepository()

        item = repo.add(Item(name='Bracket', sku='BR-1', quantity=3))

        assert item.id is not None
        assert item.status == ItemStatus.ACTIVE

    def test_get_by_id_hides_deleted(self, db_session):
        repo = ItemRepository()
        item = create_test_item(db_session, status=ItemStatus.DELETED)

        assert repo.get_by_id(item.id) is None
        assert repo.get_by_id(item.id, include_deleted=True).id == item.id

    def test_get_by_barcode_prefers_barcode(self, db_session):
        """Barcode match wins over an SKU that happens to hold the same code."""
        repo = ItemRepository()
        by_sku = create_test_item(db_session, sku='777')
        by_barcode = create_test_item(db_session, barcode='777')

        assert repo.get_by_barcode('777').id == by_barcode.id
        assert by_sku.id != by_barcode.id

    def test_get_by_barcode_falls_back_to_sku(self, db_session):
        repo = ItemRepository()
        item = create_test_item(db_session, sku='SKU-9')

        assert repo.get_by_barcode('SKU-9').id == item.id
        assert repo.get_by_barcode('missing') is None

    def test_list_active_scoped_to_root(self, db_session):
        repo = ItemRepository()
        folder = create_test_folder(db_session)
        root_item = create_test_item(db_session, name='Loose')
        create_test_item(db_session, name='Shelved', folder_id=folder.id)

        assert [i.id for i in repo.list_active(scope_to_folder=True)] == [root_item.id]
        assert len(repo.list_active()) == 2

    def test_decrement_stock(self, db_session):
        repo = ItemRepository()
        item = create_test_item(db_session, quantity=5)

        assert repo.decrement_stock(item.id, 3) is True
        db_session.commit()
        db_session.refresh(item)

        assert item.quantity == 2

    def test_decrement_stock_refuses_to_go_negative(self, db_session):
        repo = ItemRepository()
        item = create_test_item(db_session, quantity=2)

        assert repo.decrement_stock(item.id, 3) is False
        db_session.commit()
        db_session.refresh(item)

        assert item.quantity == 2

    def test_negative_delta_restores_stock(self, db_session):
        repo = ItemRepository()
        item = create_test_item(db_session, quantity=0)

        assert repo.decrement_stock(item.id, -4) is True
        db_session.commit()
        db_session.refresh(item)

        assert item.quantity == 4

    def test_adjust_stock_clamps_at_zero(self, db_session):
        repo = ItemRepository()
        item = create_test_item(db_session, quantity=3)

        assert repo.adjust_stock(item.id, -5) is True
        db_session.commit()
        db_session.refresh(item)

        assert item.quantity == 0

    def test_adjust_stock_missing_row(self, db_session):
        assert ItemRepository().adjust_stock('no-such-item', 1) is False


class TestFolderRepository:

    def test_descendant_ids(self, db_session):
        repo = FolderRepository()
        top = create_test_folder(db_session, name='Top')
        middle = create_test_folder(db_session, name='Middle', parent_folder_id=top.id)
        bottom = create_test_folder(db_session, name='Bottom', parent_folder_id=middle.id)
        create_test_folder(db_session, name='Elsewhere')

        assert repo.descendant_ids(top.id) == [top.id, middle.id, bottom.id]
        assert repo.descendant_ids(bottom.id) == [bottom.id]

    def test_list_children(self, db_session):
        repo = FolderRepository()
        top = create_test_folder(db_session, name='Top')
        create_test_folder(db_session, name='b', parent_folder_id=top.id)
        create_test_folder(db_session, name='a', parent_folder_id=top.id)

        assert [f.name for f in repo.list_children(None)] == ['Top']
        assert [f.name for f in repo.list_children(top.id)] == ['a', 'b']
        assert repo.count_children(top.id) == 2


class TestPickListRepository:
    """Test PickListRepository implementations."""

    def test_record_pick(self, db_session):
        repo = PickListRepository()
        item = create_test_item(db_session)
        line = create_test_line(db_session, create_test_pick_list(db_session), item)

        assert repo.record_pick(line.id, 0, 3, None) is True
        db_session.commit()
        db_session.refresh(line)

        assert line.quantity_picked == 3
        assert line.picked_at is not None

    def test_record_pick_rejects_stale_value(self, db_session):
        """A writer holding an outdated picked quantity loses."""
        repo = PickListRepository()
        item = create_test_item(db_session)
        line = create_test_line(db_session, create_test_pick_list(db_session), item, quantity_picked=2)

        assert repo.record_pick(line.id, 0, 3, None) is False
        db_session.commit()
        db_session.refresh(line)

        assert line.quantity_picked == 2

    def test_max_sort_order(self, db_session):
        repo = PickListRepository()
        item = create_test_item(db_session)
        pick_list = create_test_pick_list(db_session)

        assert repo.max_sort_order(pick_list.id) == 0

        create_test_line(db_session, pick_list, item, sort_order=4)
        create_test_line(db_session, pick_list, item, sort_order=2)

        assert repo.max_sort_order(pick_list.id) == 4
        assert [line.sort_order for line in repo.list_lines(pick_list.id)] == [2, 4]

    def test_search_and_count_active(self, db_session):
        repo = PickListRepository()
        create_test_pick_list(db_session, name='Morning run', status=PickListStatus.DRAFT)
        create_test_pick_list(db_session, name='Evening run', status=PickListStatus.IN_PROGRESS)
        create_test_pick_list(db_session, name='Done', status=PickListStatus.COMPLETE)

        assert [p.name for p in repo.search(status='draft')] == ['Morning run']
        assert {p.name for p in repo.search(query='RUN')} == {'Morning run', 'Evening run'}
        assert repo.count_active([PickListStatus.IN_PROGRESS, PickListStatus.READY_TO_PICK]) == 1

    def test_delete_cascades_lines(self, db_session):
        repo = PickListRepository()
        item = create_test_item(db_session)
        pick_list = create_test_pick_list(db_session)
        line = create_test_line(db_session, pick_list, item)
        line_id = line.id

        repo.delete(pick_list)
        db_session.commit()

        assert repo.get_line(line_id) is None


class TestActivityRepository:

    def test_for_item_newest_first(self, db_session):
        repo = ActivityRepository()
        item = create_test_item(db_session)
        repo.add(ActivityLog(action_type=ActionType.ITEM_CREATED.value, item_id=item.id, details={}))
        repo.add(ActivityLog(action_type=ActionType.QUANTITY_ADJUSTED.value, item_id=item.id, details={}))
        db_session.commit()

        entries = repo.for_item(item.id)

        assert len(entries) == 2
        assert entries[0].timestamp >= entries[1].timestamp
