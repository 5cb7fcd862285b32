"""GET /api/search - substring search over debtors or instruments"""

from typing import List, Optional, Union
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legal_collections.api.v1.schemas import ApiResponse, DebtorSchema, InstrumentSchema
from legal_collections.domain.models import SearchTarget
from legal_collections.domain.search import parse_search_request
from legal_collections.infrastructure.database.repositories import DebtorRepository, InstrumentRepository
from legal_collections.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/search", response_model=ApiResponse[Union[List[DebtorSchema], List[InstrumentSchema]]])
def search(
    q: Optional[str] = Query(None, description="Text to look for"),
    search_type: Optional[str] = Query(None, alias="type", description="debtors | instruments"),
    db: Session = Depends(get_db),
):
    """
    Case- and accent-insensitive substring search.

    Debtors match on name or tax id; instruments on number, type or debtor name.
    """
    query, target = parse_search_request(q, search_type)

    if target is SearchTarget.DEBTORS:
        debtors = DebtorRepository(db).search(query)
        return ApiResponse(data=[DebtorSchema.model_validate(d) for d in debtors])

    instruments = InstrumentRepository(db).search(query)
    return ApiResponse(data=[InstrumentSchema.from_row(i) for i in instruments])
