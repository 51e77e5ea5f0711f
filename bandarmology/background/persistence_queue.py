"""
Write-behind queue for query history.

Requests submit records without awaiting; a single worker drains the queue
and writes each record in its own session.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from bandarmology.domain.models import StockQueryRecord
from bandarmology.infrastructure.db.repositories.stock_query_repository import StockQueryRepository

logger = logging.getLogger(__name__)

RecordHandler = Callable[[StockQueryRecord], Awaitable[None]]


class PersistenceQueue:
    def __init__(self, maxsize: int = 1000):
        self._queue: asyncio.Queue[StockQueryRecord] = asyncio.Queue(maxsize=maxsize)

    def submit(self, record: StockQueryRecord) -> bool:
        """Enqueue without waiting. Returns False when the record was dropped."""
        try:
            self._queue.put_nowait(record)
        except asyncio.QueueFull:
            logger.warning(f"Persistence queue full; dropping record for {record.emiten} {record.to_date}")
            return False
        return True

    async def get(self) -> StockQueryRecord:
        return await self._queue.get()

    def size(self) -> int:
        return self._queue.qsize()

    async def join(self) -> None:
        await self._queue.join()

    def task_done(self) -> None:
        self._queue.task_done()


class PersistenceWorker:
    def __init__(self, queue: PersistenceQueue, handler: RecordHandler):
        self._queue = queue
        self._handler = handler
        self._task: Optional[asyncio.Task] = None
        self._stop = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._stop.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        self._stop.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                return

    async def _run(self) -> None:
        while not self._stop.is_set():
            record = await self._queue.get()
            try:
                await self._handler(record)
            except Exception as exc:
                logger.error(f"Failed to save stock query {record.emiten} {record.to_date}: {exc}")
            finally:
                self._queue.task_done()


def session_writer(session_factory) -> RecordHandler:
    """Handler that appends each record through its own database session."""
    async def _write(record: StockQueryRecord) -> None:
        async with session_factory() as session:
            record_id = await StockQueryRepository(session).create(record)
            await session.commit()
        logger.debug(f"Saved stock query {record.emiten} {record.to_date} as id={record_id}")

    return _write
