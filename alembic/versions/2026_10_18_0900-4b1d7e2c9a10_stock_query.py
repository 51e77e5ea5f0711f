"""stock query history

Revision ID: 4b1d7e2c9a10
Revises:
Create Date: 2026-10-18 09:00:00.000000+07:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4b1d7e2c9a10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'stock_query',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('emiten', sa.String(length=10), nullable=False),
        sa.Column('sector', sa.String(length=100), nullable=True),
        sa.Column('from_date', sa.Date(), nullable=False),
        sa.Column('to_date', sa.Date(), nullable=False),
        sa.Column('bandar', sa.String(length=10), nullable=False),
        sa.Column('barang_bandar', sa.BigInteger(), nullable=False),
        sa.Column('rata_rata_bandar', sa.BigInteger(), nullable=False),
        sa.Column('harga', sa.Numeric(14, 2), nullable=False),
        sa.Column('ara', sa.Numeric(14, 2), nullable=False),
        sa.Column('arb', sa.Numeric(14, 2), nullable=False),
        sa.Column('fraksi', sa.Integer(), nullable=False),
        sa.Column('total_bid', sa.Numeric(20, 2), nullable=False),
        sa.Column('total_offer', sa.Numeric(20, 2), nullable=False),
        sa.Column('total_papan', sa.Integer(), nullable=False),
        sa.Column('rata_rata_bid_ofer', sa.Numeric(20, 2), nullable=False),
        sa.Column('a', sa.Numeric(14, 2), nullable=False),
        sa.Column('p', sa.Numeric(20, 2), nullable=False),
        sa.Column('target_realistis', sa.BigInteger(), nullable=False),
        sa.Column('target_max', sa.BigInteger(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_stock_query_emiten'), 'stock_query', ['emiten'], unique=False)
    op.create_index('ix_stock_query_lookup', 'stock_query', ['emiten', 'from_date', 'to_date'], unique=False)
    op.create_index('ix_stock_query_emiten_to_date', 'stock_query', ['emiten', 'to_date'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_stock_query_emiten_to_date', table_name='stock_query')
    op.drop_index('ix_stock_query_lookup', table_name='stock_query')
    op.drop_index(op.f('ix_stock_query_emiten'), table_name='stock_query')
    op.drop_table('stock_query')
