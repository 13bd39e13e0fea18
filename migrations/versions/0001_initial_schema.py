"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'permission',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False, unique=True),
        sa.Column('resource', sa.String(length=64)),
        sa.Column('action', sa.String(length=64)),
        sa.Column('description', sa.Text()),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_table(
        'role',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False, unique=True),
        sa.Column('description', sa.Text()),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=120), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('first_name', sa.String(length=64)),
        sa.Column('last_name', sa.String(length=64)),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime()),
        *_timestamps(),
    )
    op.create_table(
        'role_permission',
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('role.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('permission_id', sa.Integer(), sa.ForeignKey('permission.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_table(
        'user_role',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('role.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'category',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False, unique=True),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'item',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('unit', sa.String(length=32)),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('category.id')),
        sa.Column('target_text', sa.String(length=128)),
        sa.Column('target_number', sa.Float()),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('name', 'category_id', name='uq_item_name_category'),
    )
    op.create_table(
        'packaging_option',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False, unique=True),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('size_value', sa.Float()),
        sa.Column('size_unit', sa.String(length=16)),
        sa.Column('variable_weight', sa.Boolean(), nullable=False),
        sa.Column('allow_stores', sa.Boolean(), nullable=False),
        sa.Column('allow_customers', sa.Boolean(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'store',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('slug', sa.String(length=128), nullable=False, unique=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'customer',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('email', sa.String(length=120)),
        sa.Column('phone', sa.String(length=32)),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'store_inventory',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('store_id', sa.Integer(), sa.ForeignKey('store.id', ondelete='CASCADE'), nullable=False),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('item.id', ondelete='CASCADE'), nullable=False),
        sa.Column('target_quantity', sa.Float()),
        sa.Column('target_text', sa.String(length=128)),
        sa.Column('unit', sa.String(length=32)),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('store_id', 'item_id', name='uq_store_inventory_store_item'),
    )

    op.create_table(
        'delivery_plan',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('notes', sa.Text()),
        sa.Column('store_id', sa.Integer(), sa.ForeignKey('store.id', ondelete='SET NULL')),
        *_timestamps(),
    )
    op.create_index('ix_delivery_plan_date', 'delivery_plan', ['date'])
    op.create_table(
        'delivery_plan_customer',
        sa.Column('plan_id', sa.Integer(), sa.ForeignKey('delivery_plan.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customer.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('priority', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text()),
    )
    op.create_table(
        'delivery_item',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('plan_id', sa.Integer(), sa.ForeignKey('delivery_plan.id', ondelete='CASCADE'), nullable=False),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('item.id'), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('note', sa.Text()),
        sa.Column('weight_kg', sa.Float()),
        sa.Column('packaging_option_id', sa.Integer(), sa.ForeignKey('packaging_option.id')),
        *_timestamps(),
    )
    op.create_index('ix_delivery_item_plan_id', 'delivery_item', ['plan_id'])

    op.create_table(
        'stocktake',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('store_id', sa.Integer(), sa.ForeignKey('store.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('is_master', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text()),
        sa.Column('submitted_by_user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='SET NULL')),
    )
    op.create_index('ix_stocktake_store_id', 'stocktake', ['store_id'])
    op.create_index('ix_stocktake_submitted_at', 'stocktake', ['submitted_at'])
    op.create_table(
        'stocktake_item',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('stocktake_id', sa.Integer(), sa.ForeignKey('stocktake.id', ondelete='CASCADE'), nullable=False),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('item.id'), nullable=False),
        sa.Column('quantity', sa.Float()),
        sa.Column('note', sa.Text()),
    )
    op.create_index('ix_stocktake_item_stocktake_id', 'stocktake_item', ['stocktake_id'])

    op.create_table(
        'production_task',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('item.id'), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('unit', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('notes', sa.Text()),
        sa.Column('total_weight_kg', sa.Float()),
        sa.Column('packaging_option_id', sa.Integer(), sa.ForeignKey('packaging_option.id')),
        sa.Column('started_at', sa.DateTime()),
        sa.Column('completed_at', sa.DateTime()),
        sa.Column('created_by_user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='SET NULL')),
        sa.Column('assigned_to_user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='SET NULL')),
        *_timestamps(),
    )
    op.create_index('ix_production_task_date', 'production_task', ['date'])

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='SET NULL')),
        sa.Column('user_email', sa.String(length=120)),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('resource', sa.String(length=64), nullable=False),
        sa.Column('resource_id', sa.String(length=64)),
        sa.Column('metadata', sa.JSON()),
        sa.Column('ip', sa.String(length=64)),
        sa.Column('user_agent', sa.String(length=255)),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_audit_log_created_at', 'audit_log', ['created_at'])


def downgrade():
    op.drop_index('ix_audit_log_created_at', table_name='audit_log')
    op.drop_table('audit_log')
    op.drop_index('ix_production_task_date', table_name='production_task')
    op.drop_table('production_task')
    op.drop_index('ix_stocktake_item_stocktake_id', table_name='stocktake_item')
    op.drop_table('stocktake_item')
    op.drop_index('ix_stocktake_submitted_at', table_name='stocktake')
    op.drop_index('ix_stocktake_store_id', table_name='stocktake')
    op.drop_table('stocktake')
    op.drop_index('ix_delivery_item_plan_id', table_name='delivery_item')
    op.drop_table('delivery_item')
    op.drop_table('delivery_plan_customer')
    op.drop_index('ix_delivery_plan_date', table_name='delivery_plan')
    op.drop_table('delivery_plan')
    op.drop_table('store_inventory')
    op.drop_table('customer')
    op.drop_table('store')
    op.drop_table('packaging_option')
    op.drop_table('item')
    op.drop_table('category')
    op.drop_table('user_role')
    op.drop_table('role_permission')
    op.drop_table('user')
    op.drop_table('role')
    op.drop_table('permission')
