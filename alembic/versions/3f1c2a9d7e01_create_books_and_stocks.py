"""Create books and stocks tables

Revision ID: 3f1c2a9d7e01
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7e01'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('books',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('title', sa.Text(), nullable=False, comment='Book title'),
        sa.Column('author', sa.Text(), nullable=False, comment='Author name(s)'),
        sa.Column('description', sa.Text(), nullable=False, comment='Book description or summary'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('stocks',
        sa.Column('book_id', sa.String(length=255), nullable=False),
        sa.Column('total_stock', sa.Integer(), nullable=False, comment='Nominal number of copies owned'),
        sa.Column('lent_stock', sa.Integer(), nullable=False, comment='Copies currently checked out'),
        sa.Column('available_stock', sa.Integer(), nullable=False, comment='Copies that can be handed out'),
        sa.CheckConstraint('available_stock >= 0', name='ck_stocks_available_non_negative'),
        sa.PrimaryKeyConstraint('book_id')
    )


def downgrade() -> None:
    op.drop_table('stocks')
    op.drop_table('books')
