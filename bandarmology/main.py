"""
FastAPI Main Application
Bandarmology target-price service with write-behind query history
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging

from sqlalchemy import text

from bandarmology.config import settings
from bandarmology.core.logging import setup_logging
from bandarmology.background.persistence_queue import PersistenceQueue, PersistenceWorker, session_writer
from bandarmology.infrastructure.db.database import init_db, close_db, async_session_factory
from bandarmology.infrastructure.market_data.stockbit_client import StockbitClient

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles startup and shutdown of all services
    """
    logger.info("=" * 60)
    logger.info("🚀 Starting Bandarmology API")
    logger.info("=" * 60)

    # 1. Database
    logger.info("📊 Step 1/3: Initializing database...")
    await init_db()
    logger.info("✅ Database initialized")

    # 2. Upstream client
    logger.info("🏗️  Step 2/3: Initializing Stockbit client...")
    if not settings.STOCKBIT_TOKEN:
        logger.warning("⚠️  STOCKBIT_TOKEN not set; Stockbit will likely reject requests")
    app.state.stockbit_client = StockbitClient(
        base_url=settings.STOCKBIT_BASE_URL,
        token=settings.STOCKBIT_TOKEN,
        timeout=settings.STOCKBIT_TIMEOUT_SECONDS,
    )
    logger.info("✅ Stockbit client ready")

    # 3. Write-behind persistence
    logger.info("💾 Step 3/3: Starting persistence worker...")
    queue = PersistenceQueue(maxsize=settings.PERSISTENCE_QUEUE_SIZE)
    worker = PersistenceWorker(queue, session_writer(async_session_factory))
    worker.start()
    app.state.persistence_queue = queue
    app.state.persistence_worker = worker
    logger.info("✅ Persistence worker running")

    logger.info(f"   ✅ API Server: http://{settings.API_HOST}:{settings.API_PORT}")
    logger.info(f"   ✅ API Docs: http://{settings.API_HOST}:{settings.API_PORT}/docs")

    yield

    logger.info("🛑 Shutting down Bandarmology API...")

    # Give queued writes a chance before stopping the worker
    if queue.size():
        logger.info(f"💾 Flushing {queue.size()} pending history writes...")
        await queue.join()
    await worker.stop()

    await app.state.stockbit_client.close()

    logger.info("📊 Closing database connections...")
    await close_db()
    logger.info("👋 Shutdown complete")


app = FastAPI(
    title="Bandarmology API",
    description="Broker accumulation targets for IDX equities",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Service + database health"""
    db_status = "disconnected"
    db_error = None
    try:
        from bandarmology.infrastructure.db.database import engine
        if engine is None:
            db_status = "not_initialized"
        else:
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            db_status = "connected"
    except Exception as exc:
        db_status = "error"
        db_error = str(exc)

    worker = getattr(app.state, "persistence_worker", None)
    queue = getattr(app.state, "persistence_queue", None)

    return {
        "status": "healthy",
        "service": "Bandarmology API",
        "version": "1.0.0",
        "services": {
            "api": "running",
            "database": db_status,
            "persistence_worker": "running" if worker and worker.running else "stopped",
        },
        "persistence_queue_size": queue.size() if queue else 0,
        "database_error": db_error,
    }


# Import and include routers
from bandarmology.api.routes import stock  # noqa: E402

app.include_router(stock.router, prefix="/api/stock", tags=["Stock"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("bandarmology.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
