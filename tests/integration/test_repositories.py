from datetime import date, datetime

import pytest

from bandarmology.background.persistence_queue import PersistenceQueue, PersistenceWorker, session_writer
from bandarmology.domain.models import StockQueryRecord
from bandarmology.infrastructure.db.repositories.stock_query_repository import StockQueryRepository


def _record(emiten="BBCA", day=date(2024, 5, 1), to_day=None, harga=9150.0, created_at=None) -> StockQueryRecord:
    return StockQueryRecord(
        emiten=emiten,
        sector="Finance",
        from_date=day,
        to_date=to_day or day,
        bandar="BK",
        barang_bandar=500000,
        rata_rata_bandar=9000,
        harga=harga,
        ara=9180,
        arb=9100,
        fraksi=25,
        total_bid=1_500_000,
        total_offer=900_000,
        total_papan=3,
        rata_rata_bid_ofer=8000,
        a=450,
        p=62.5,
        target_realistis=10231,
        target_max=11013,
        created_at=created_at,
    )


@pytest.mark.asyncio
@pytest.mark.integration
async def test_stock_query_roundtrip(db_session):
    repo = StockQueryRepository(db_session)
    record_id = await repo.create(_record())
    await db_session.commit()

    fetched = await repo.get_by_date("BBCA", date(2024, 5, 1))
    assert fetched is not None
    assert fetched.id == record_id
    assert fetched.bandar == "BK"
    assert fetched.harga == 9150.0
    assert fetched.p == 62.5
    assert fetched.created_at is not None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_latest_ignores_requested_date(db_session):
    repo = StockQueryRepository(db_session)
    await repo.create(_record(day=date(2024, 4, 29)))
    await repo.create(_record(day=date(2024, 4, 30)))
    await repo.create(_record(emiten="TLKM", day=date(2024, 5, 2)))
    await db_session.commit()

    latest = await repo.get_latest("BBCA")
    assert latest is not None
    assert latest.to_date == date(2024, 4, 30)

    assert await repo.get_latest("GOTO") is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_newer_write_supersedes_same_key(db_session):
    repo = StockQueryRepository(db_session)
    await repo.create(_record(harga=9100, created_at=datetime(2024, 5, 1, 10, 0)))
    await repo.create(_record(harga=9175, created_at=datetime(2024, 5, 1, 16, 0)))
    await db_session.commit()

    by_date = await repo.get_by_date("BBCA", date(2024, 5, 1))
    specific = await repo.get_specific("BBCA", date(2024, 5, 1), date(2024, 5, 1))
    assert by_date.harga == 9175
    assert specific.harga == 9175
    assert len(await repo.get_recent("BBCA")) == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_by_date_misses_other_dates(db_session):
    repo = StockQueryRepository(db_session)
    await repo.create(_record(day=date(2024, 5, 1)))
    await db_session.commit()

    assert await repo.get_by_date("BBCA", date(2024, 5, 2)) is None
    assert await repo.get_specific("BBCA", date(2024, 4, 1), date(2024, 5, 1)) is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_session_writer_persists_queued_records(session_factory):
    queue = PersistenceQueue()
    worker = PersistenceWorker(queue, session_writer(session_factory))
    worker.start()

    queue.submit(_record(emiten="BBRI"))
    await queue.join()
    await worker.stop()

    async with session_factory() as session:
        stored = await StockQueryRepository(session).get_latest("BBRI")
    assert stored is not None
    assert stored.target_max == 11013
