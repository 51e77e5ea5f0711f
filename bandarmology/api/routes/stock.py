"""
Stock API Routes
Bandarmology analysis for one emiten over a date range
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from bandarmology.config import settings
from bandarmology.domain.exceptions import NoBrokerDataError
from bandarmology.domain.models import MarketQuery
from bandarmology.domain.schemas.stock import StockAnalysisData, StockQueryHistoryItem, StockQueryRequest
from bandarmology.domain.services.history_resolver import HistoryResolver
from bandarmology.domain.services.stock_query_service import StockQueryService
from bandarmology.infrastructure.db.database import get_db
from bandarmology.infrastructure.db.repositories.stock_query_repository import StockQueryRepository
from bandarmology.utils.time import parse_iso_date

logger = logging.getLogger(__name__)
router = APIRouter()

MISSING_FIELDS_MESSAGE = "Missing required fields: emiten, fromDate, toDate"
INVALID_DATE_MESSAGE = "Invalid date format: fromDate and toDate must be YYYY-MM-DD"
MISSING_RANGE_MESSAGE = "fromDate and toDate must be given together"
INVALID_BODY_MESSAGE = "Invalid request body: expected a JSON object with string emiten, fromDate, toDate"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def get_stock_query_service(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> StockQueryService:
    """Wire the query service from app-scoped collaborators and a request session"""
    return StockQueryService(
        feed=request.app.state.stockbit_client,
        history=HistoryResolver(StockQueryRepository(db)),
        persistence=getattr(request.app.state, "persistence_queue", None),
        summary_limit=settings.BROKER_SUMMARY_LIMIT,
    )


@router.post("")
async def query_stock(
    request: Request,
    service: StockQueryService = Depends(get_stock_query_service)
):
    """
    Analyse an emiten

    Body: {emiten, fromDate, toDate}
    """
    try:
        try:
            body = StockQueryRequest.model_validate(await request.json())
        except (ValidationError, ValueError) as exc:
            logger.warning(f"Rejected stock query body: {exc}")
            return _error(400, INVALID_BODY_MESSAGE)

        if not body.emiten or not body.fromDate or not body.toDate:
            return _error(400, MISSING_FIELDS_MESSAGE)

        try:
            query = MarketQuery(
                emiten=body.emiten.strip().upper(),
                from_date=parse_iso_date(body.fromDate),
                to_date=parse_iso_date(body.toDate),
            )
        except ValueError:
            return _error(400, INVALID_DATE_MESSAGE)

        analysis = await service.run(query)
        data = StockAnalysisData.from_analysis(analysis)
        return JSONResponse(
            content={"success": True, "data": data.model_dump(mode="json", exclude_unset=True)}
        )

    except NoBrokerDataError as exc:
        return _error(404, str(exc))
    except Exception as exc:
        logger.error(f"API Error: {exc}", exc_info=True)
        return _error(500, str(exc) or "Unknown error occurred")


@router.get("/history/{emiten}")
async def get_stock_history(
    emiten: str,
    limit: int = 30,
    fromDate: Optional[str] = None,
    toDate: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """
    Get persisted query history for an emiten, newest first

    With both fromDate and toDate, only the newest record for that exact
    range is returned.
    """
    repo = StockQueryRepository(db)
    emiten = emiten.strip().upper()

    if fromDate or toDate:
        if not fromDate or not toDate:
            return _error(400, MISSING_RANGE_MESSAGE)
        try:
            from_date = parse_iso_date(fromDate)
            to_date = parse_iso_date(toDate)
        except ValueError:
            return _error(400, INVALID_DATE_MESSAGE)
        record = await repo.get_specific(emiten, from_date, to_date)
        records = [record] if record else []
    else:
        records = await repo.get_recent(emiten, limit=max(1, min(limit, 365)))

    return {
        "success": True,
        "data": [StockQueryHistoryItem.from_record(r).model_dump(mode="json") for r in records],
    }
