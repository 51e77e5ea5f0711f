from datetime import date
from typing import Any, AsyncGenerator, Dict, List, Optional

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from bandarmology.api.routes import stock
from bandarmology.background.persistence_queue import PersistenceQueue
from bandarmology.config import settings
from bandarmology.domain.services.history_resolver import HistoryResolver
from bandarmology.domain.services.stock_query_service import StockQueryService
from bandarmology.infrastructure.db.database import Base, get_db
from bandarmology.infrastructure.db.repositories.stock_query_repository import StockQueryRepository

# "Today" as seen by the app under test
TODAY = date(2024, 5, 1)


def make_detector_payload(buyers: Optional[List[Dict[str, Any]]] = None, sellers=None) -> Dict[str, Any]:
    return {
        "data": {
            "bandar_detector": {"avg": {"accdist": "Acc"}},
            "broker_summary": {
                "brokers_buy": buyers if buyers is not None else [],
                "brokers_sell": sellers if sellers is not None else [],
            },
        }
    }


def make_orderbook_payload(
    close="9150",
    bids=("9100", "9140"),
    offers=("9160", "9180"),
    bid_lot="1,500,000",
    offer_lot="900,000",
    high="9200",
) -> Dict[str, Any]:
    return {
        "data": {
            "close": close,
            "high": high,
            "total_bid_offer": {"bid": {"lot": bid_lot}, "offer": {"lot": offer_lot}},
            "bid": [{"price": p, "volume": "1000"} for p in bids],
            "offer": [{"price": p, "volume": "1000"} for p in offers],
        }
    }


BBCA_BUYERS = [
    {"netbs_broker_code": "BK", "blot": "500000", "bval": "4500000000000", "netbs_buy_avg_price": "9000"},
    {"netbs_broker_code": "AK", "blot": "120000", "bval": "1090000000000", "netbs_buy_avg_price": "9083.4"},
]
BBCA_SELLERS = [
    {"netbs_broker_code": "YP", "slot": "-300000", "sval": "-2700000000000", "netbs_sell_avg_price": "9050"},
]


class FakeStockbitClient:
    """In-memory stand-in for StockbitClient"""

    def __init__(self):
        self.detector: Any = make_detector_payload(BBCA_BUYERS, BBCA_SELLERS)
        self.orderbook: Any = make_orderbook_payload()
        self.info: Any = {"data": {"sector": "Finance"}}
        self.detector_error: Optional[Exception] = None
        self.orderbook_error: Optional[Exception] = None
        self.info_error: Optional[Exception] = None
        self.calls: List[str] = []

    async def fetch_market_detector(self, emiten, from_date, to_date):
        self.calls.append("market_detector")
        if self.detector_error:
            raise self.detector_error
        return self.detector

    async def fetch_orderbook(self, emiten):
        self.calls.append("orderbook")
        if self.orderbook_error:
            raise self.orderbook_error
        return self.orderbook

    async def fetch_emiten_info(self, emiten):
        self.calls.append("emiten_info")
        if self.info_error:
            raise self.info_error
        return self.info


@pytest.fixture()
def today() -> date:
    return TODAY


@pytest.fixture()
def detector_payload():
    """Builder for market detector payloads"""
    return make_detector_payload


@pytest.fixture()
def orderbook_payload():
    """Builder for orderbook payloads"""
    return make_orderbook_payload


@pytest.fixture()
def fake_stockbit() -> FakeStockbitClient:
    return FakeStockbitClient()


@pytest.fixture()
async def db_engine(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture()
def persistence_queue() -> PersistenceQueue:
    return PersistenceQueue(maxsize=10)


@pytest.fixture()
async def app(db_session, fake_stockbit, persistence_queue) -> FastAPI:
    app = FastAPI()
    app.include_router(stock.router, prefix="/api/stock", tags=["Stock"])

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    def override_service():
        return StockQueryService(
            feed=fake_stockbit,
            history=HistoryResolver(StockQueryRepository(db_session)),
            persistence=persistence_queue,
            summary_limit=settings.BROKER_SUMMARY_LIMIT,
            today=lambda: TODAY,
        )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[stock.get_stock_query_service] = override_service
    app.state.stockbit_client = fake_stockbit
    app.state.persistence_queue = persistence_queue
    return app


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
