"""/api/process-stages - append-only collection procedure log"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legal_collections.api.dependencies import get_request_id
from legal_collections.api.v1.schemas import (
    ApiResponse,
    CreatedSchema,
    ProcessStageRequest,
    ProcessStageSchema,
)
from legal_collections.infrastructure.database.repositories import ProcessStageRepository
from legal_collections.infrastructure.database.session import get_db
from legal_collections.infrastructure.observability.logging import log_record_change
from legal_collections.infrastructure.observability.metrics import record_change

router = APIRouter()


@router.get("/process-stages", response_model=ApiResponse[List[ProcessStageSchema]])
def list_process_stages(
    instrument_id: Optional[int] = Query(None, description="Only stages for this instrument"),
    db: Session = Depends(get_db),
):
    stages = ProcessStageRepository(db).list(instrument_id=instrument_id)
    return ApiResponse(data=[ProcessStageSchema.model_validate(s) for s in stages])


@router.post("/process-stages", response_model=ApiResponse[CreatedSchema])
def create_process_stage(
    request_body: ProcessStageRequest,
    db: Session = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    stage = ProcessStageRepository(db).create(request_body.to_draft())
    db.commit()

    record_change("process_stage", "create")
    log_record_change(request_id, "process_stage", "create", stage.id)
    return ApiResponse(data=CreatedSchema(id=stage.id), message="Process stage recorded")
