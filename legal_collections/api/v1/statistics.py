"""GET /api/statistics and GET /api/export - portfolio snapshot and dump"""

from datetime import date
from typing import Any, Dict, List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from legal_collections.api.dependencies import get_today
from legal_collections.api.v1.schemas import ApiResponse, StatisticsSchema
from legal_collections.domain.statistics import build_statistics
from legal_collections.infrastructure.database.repositories import PortfolioRepository
from legal_collections.infrastructure.database.session import get_db
from legal_collections.infrastructure.observability.metrics import record_statistics

router = APIRouter()


@router.get("/statistics", response_model=ApiResponse[StatisticsSchema])
def get_statistics(db: Session = Depends(get_db), today: date = Depends(get_today)):
    """
    Portfolio health computed from current table contents.

    Returns:
        Totals, pending debt (principal plus accrued interest), amount
        recovered, recovery percentage and due-date counters
    """
    totals = PortfolioRepository(db).aggregate_totals(as_of=today)
    statistics = build_statistics(totals)

    record_statistics(statistics.recovery_percentage, statistics.pending_debt)
    return ApiResponse(data=StatisticsSchema.from_domain(statistics))


@router.get("/export", response_model=ApiResponse[Dict[str, List[Dict[str, Any]]]])
def export_tables(db: Session = Depends(get_db)):
    """Dump every row of every table"""
    return ApiResponse(data=PortfolioRepository(db).dump())
