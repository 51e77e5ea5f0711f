"""
Stock Query Repository
Persisted query history used as fallback and date override
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bandarmology.domain.models import StockQueryRecord
from bandarmology.infrastructure.db.models import StockQueryModel


class StockQueryRepository:
    """Repository for StockQueryRecord (append-only, newest row wins)"""

    def __init__(self, session: AsyncSession):
        """Initialize with database session"""
        self.session = session

    async def create(self, record: StockQueryRecord) -> int:
        """
        Append a new record

        Returns:
            ID of created row
        """
        model = StockQueryModel(
            emiten=record.emiten,
            sector=record.sector,
            from_date=record.from_date,
            to_date=record.to_date,
            bandar=record.bandar,
            barang_bandar=record.barang_bandar,
            rata_rata_bandar=record.rata_rata_bandar,
            harga=record.harga,
            ara=record.ara,
            arb=record.arb,
            fraksi=record.fraksi,
            total_bid=record.total_bid,
            total_offer=record.total_offer,
            total_papan=record.total_papan,
            rata_rata_bid_ofer=record.rata_rata_bid_ofer,
            a=record.a,
            p=record.p,
            target_realistis=record.target_realistis,
            target_max=record.target_max,
        )
        if record.created_at is not None:
            model.created_at = record.created_at

        self.session.add(model)
        await self.session.flush()
        return model.id

    async def get_latest(self, emiten: str) -> Optional[StockQueryRecord]:
        """Most recent record for the emiten, regardless of date"""
        result = await self.session.execute(
            select(StockQueryModel)
            .where(StockQueryModel.emiten == emiten)
            .order_by(
                StockQueryModel.to_date.desc(),
                StockQueryModel.created_at.desc(),
                StockQueryModel.id.desc(),
            )
            .limit(1)
        )
        return self._to_domain(result.scalars().first())

    async def get_by_date(self, emiten: str, target_date: date) -> Optional[StockQueryRecord]:
        """Newest record whose to_date is exactly ``target_date``"""
        result = await self.session.execute(
            select(StockQueryModel)
            .where(
                StockQueryModel.emiten == emiten,
                StockQueryModel.to_date == target_date,
            )
            .order_by(StockQueryModel.created_at.desc(), StockQueryModel.id.desc())
            .limit(1)
        )
        return self._to_domain(result.scalars().first())

    async def get_specific(
        self,
        emiten: str,
        from_date: date,
        to_date: date
    ) -> Optional[StockQueryRecord]:
        """Newest record for an exact (from_date, to_date) range"""
        result = await self.session.execute(
            select(StockQueryModel)
            .where(
                StockQueryModel.emiten == emiten,
                StockQueryModel.from_date == from_date,
                StockQueryModel.to_date == to_date,
            )
            .order_by(StockQueryModel.created_at.desc(), StockQueryModel.id.desc())
            .limit(1)
        )
        return self._to_domain(result.scalars().first())

    async def get_recent(self, emiten: str, limit: int = 30) -> List[StockQueryRecord]:
        """
        Get recent records for an emiten

        Args:
            emiten: Ticker code
            limit: Number of records to fetch

        Returns:
            List of StockQueryRecords, newest first
        """
        result = await self.session.execute(
            select(StockQueryModel)
            .where(StockQueryModel.emiten == emiten)
            .order_by(
                StockQueryModel.to_date.desc(),
                StockQueryModel.created_at.desc(),
                StockQueryModel.id.desc(),
            )
            .limit(limit)
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    @staticmethod
    def _to_domain(model: Optional[StockQueryModel]) -> Optional[StockQueryRecord]:
        """Convert database model to domain entity"""
        if model is None:
            return None

        return StockQueryRecord(
            id=model.id,
            emiten=model.emiten,
            sector=model.sector,
            from_date=model.from_date,
            to_date=model.to_date,
            bandar=model.bandar,
            barang_bandar=int(model.barang_bandar),
            rata_rata_bandar=int(model.rata_rata_bandar),
            harga=float(model.harga),
            ara=float(model.ara),
            arb=float(model.arb),
            fraksi=int(model.fraksi),
            total_bid=float(model.total_bid),
            total_offer=float(model.total_offer),
            total_papan=int(model.total_papan),
            rata_rata_bid_ofer=float(model.rata_rata_bid_ofer),
            a=float(model.a),
            p=float(model.p),
            target_realistis=int(model.target_realistis),
            target_max=int(model.target_max),
            created_at=model.created_at,
        )
