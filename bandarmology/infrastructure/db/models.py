"""
Database Models (SQLAlchemy ORM)
Insert-only history table - NO UPDATES, NO DELETES
"""

from sqlalchemy import Column, Integer, BigInteger, String, Numeric, Date, DateTime, Index

from bandarmology.infrastructure.db.database import Base
from bandarmology.utils.time import now_wib_naive


class StockQueryModel(Base):
    """Flattened result of a single-date stock query"""
    __tablename__ = "stock_query"

    id = Column(Integer, primary_key=True, autoincrement=True)
    emiten = Column(String(10), nullable=False, index=True)
    sector = Column(String(100), nullable=True)
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=False)

    # Bandar
    bandar = Column(String(10), nullable=False)
    barang_bandar = Column(BigInteger, nullable=False)
    rata_rata_bandar = Column(BigInteger, nullable=False)

    # Market snapshot
    harga = Column(Numeric(14, 2), nullable=False)
    ara = Column(Numeric(14, 2), nullable=False)
    arb = Column(Numeric(14, 2), nullable=False)
    fraksi = Column(Integer, nullable=False)
    total_bid = Column(Numeric(20, 2), nullable=False)
    total_offer = Column(Numeric(20, 2), nullable=False)

    # Calculated
    total_papan = Column(Integer, nullable=False)
    rata_rata_bid_ofer = Column(Numeric(20, 2), nullable=False)
    a = Column(Numeric(14, 2), nullable=False)
    p = Column(Numeric(20, 2), nullable=False)
    target_realistis = Column(BigInteger, nullable=False)
    target_max = Column(BigInteger, nullable=False)

    created_at = Column(DateTime, nullable=False, default=now_wib_naive)

    __table_args__ = (
        Index("ix_stock_query_lookup", "emiten", "from_date", "to_date"),
        Index("ix_stock_query_emiten_to_date", "emiten", "to_date"),
    )
