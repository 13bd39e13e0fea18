"""add production_task.output_kind

Revision ID: 0002_output_kind
Revises: 0001_initial
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0002_output_kind'
down_revision = '0001_initial'
branch_labels = None
depends_on = None


def upgrade():
    """Add output_kind and backfill TRAY for tasks whose unit mentions trays"""
    with op.batch_alter_table('production_task', schema=None) as batch_op:
        batch_op.add_column(
            sa.Column('output_kind', sa.String(length=16), nullable=False, server_default='UNITS')
        )

    op.execute(
        "UPDATE production_task SET output_kind = 'TRAY' "
        "WHERE lower(unit) LIKE '%tray%'"
    )


def downgrade():
    with op.batch_alter_table('production_task', schema=None) as batch_op:
        batch_op.drop_column('output_kind')
