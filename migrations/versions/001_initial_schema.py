"""Initial schema: profiles, folders, tags, items, pick lists, activity log

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18 09:30:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None

item_status = sa.Enum('active', 'deleted', name='itemstatus')
pick_list_status = sa.Enum('draft', 'ready_to_pick', 'in_progress', 'partially_complete', 'complete',
                           name='pickliststatus')
profile_role = sa.Enum('member', 'admin', name='profilerole')


def upgrade():
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('role', profile_role, nullable=False, server_default='member'),
        sa.Column('pin_hash', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)

    op.create_table(
        'folders',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('parent_folder_id', sa.String(length=36), nullable=True),
        sa.Column('icon', sa.String(length=50), nullable=True),
        sa.Column('colour', sa.String(length=20), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sku', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['parent_folder_id'], ['folders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('sku')
    )
    op.create_index('ix_folders_parent_folder_id', 'folders', ['parent_folder_id'])

    op.create_table(
        'tags',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('colour', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table(
        'items',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sku', sa.String(length=100), nullable=True),
        sa.Column('barcode', sa.String(length=100), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('min_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('cost_price', sa.Float(), nullable=True),
        sa.Column('sell_price', sa.Float(), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('photos', sa.JSON(), nullable=True),
        sa.Column('folder_id', sa.String(length=36), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', item_status, nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.CheckConstraint('quantity >= 0', name='ck_items_quantity_non_negative'),
        sa.ForeignKeyConstraint(['folder_id'], ['folders.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_items_name', 'items', ['name'])
    op.create_index('ix_items_sku', 'items', ['sku'], unique=True)
    op.create_index('ix_items_barcode', 'items', ['barcode'])
    op.create_index('ix_items_folder_id', 'items', ['folder_id'])
    op.create_index('ix_items_status', 'items', ['status'])

    op.create_table(
        'item_tags',
        sa.Column('item_id', sa.String(length=36), nullable=False),
        sa.Column('tag_id', sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(['item_id'], ['items.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('item_id', 'tag_id')
    )

    op.create_table(
        'pick_lists',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('status', pick_list_status, nullable=False, server_default='draft'),
        sa.Column('assigned_to', sa.String(length=36), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_pick_lists_status', 'pick_lists', ['status'])
    op.create_index('ix_pick_lists_updated_at', 'pick_lists', ['updated_at'])

    op.create_table(
        'pick_list_items',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('pick_list_id', sa.String(length=36), nullable=False),
        sa.Column('item_id', sa.String(length=36), nullable=False),
        sa.Column('quantity_requested', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('quantity_picked', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('location_hint', sa.String(length=255), nullable=True),
        sa.Column('unit_price', sa.Float(), nullable=True),
        sa.Column('picked_at', sa.DateTime(), nullable=True),
        sa.Column('picked_by', sa.String(length=36), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint('quantity_picked >= 0', name='ck_pick_list_items_picked_non_negative'),
        sa.CheckConstraint('quantity_picked <= quantity_requested', name='ck_pick_list_items_picked_within_requested'),
        sa.ForeignKeyConstraint(['pick_list_id'], ['pick_lists.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['item_id'], ['items.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_pick_list_items_pick_list_id', 'pick_list_items', ['pick_list_id'])
    op.create_index('ix_pick_list_items_item_id', 'pick_list_items', ['item_id'])

    op.create_table(
        'pick_list_comments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('pick_list_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['pick_list_id'], ['pick_lists.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_pick_list_comments_pick_list_id', 'pick_list_comments', ['pick_list_id'])

    # Audit trail keeps plain ids so history survives deletes
    op.create_table(
        'activity_log',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=True),
        sa.Column('action_type', sa.String(length=50), nullable=False),
        sa.Column('item_id', sa.String(length=36), nullable=True),
        sa.Column('pick_list_id', sa.String(length=36), nullable=True),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_activity_log_user_id', 'activity_log', ['user_id'])
    op.create_index('ix_activity_log_action_type', 'activity_log', ['action_type'])
    op.create_index('ix_activity_log_item_id', 'activity_log', ['item_id'])
    op.create_index('ix_activity_log_pick_list_id', 'activity_log', ['pick_list_id'])
    op.create_index('ix_activity_log_timestamp', 'activity_log', ['timestamp'])


def downgrade():
    # Drop tables in reverse order (respecting foreign keys)
    op.drop_table('activity_log')
    op.drop_table('pick_list_comments')
    op.drop_table('pick_list_items')
    op.drop_table('pick_lists')
    op.drop_table('item_tags')
    op.drop_table('items')
    op.drop_table('tags')
    op.drop_table('folders')
    op.drop_table('profiles')

    bind = op.get_bind()
    profile_role.drop(bind, checkfirst=True)
    pick_list_status.drop(bind, checkfirst=True)
    item_status.drop(bind, checkfirst=True)
