"""create model preferences table

Revision ID: 8e4f2b6a91c3
Revises: 3c1d9a7e5b20
Create Date: 2026-10-12 10:31:07.904112

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from models.preference import get_qualified_table_name


# revision identifiers, used by Alembic.
revision: str = '8e4f2b6a91c3'
down_revision: Union[str, Sequence[str], None] = '3c1d9a7e5b20'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # The table name is configurable, so resolve it rather than hard-coding it.
    table = get_qualified_table_name()
    op.create_table(table,
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('preference', sa.String(length=255), nullable=False),
    sa.Column('value', sa.Text(), nullable=False),
    sa.Column('preferable_id', sa.Integer(), nullable=False),
    sa.Column('preferable_type', sa.String(length=255), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        f'{table}_preferable_type_preferable_id_index',
        table,
        ['preferable_type', 'preferable_id'],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    table = get_qualified_table_name()
    op.drop_index(f'{table}_preferable_type_preferable_id_index', table_name=table)
    op.drop_table(table)
