"""/api/payments - append-only payment log"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legal_collections.api.dependencies import get_request_id
from legal_collections.api.v1.schemas import ApiResponse, CreatedSchema, PaymentRequest, PaymentSchema
from legal_collections.infrastructure.database.repositories import PaymentRepository
from legal_collections.infrastructure.database.session import get_db
from legal_collections.infrastructure.observability.logging import log_record_change
from legal_collections.infrastructure.observability.metrics import record_change

router = APIRouter()


@router.get("/payments", response_model=ApiResponse[List[PaymentSchema]])
def list_payments(
    instrument_id: Optional[int] = Query(None, description="Only payments for this instrument"),
    db: Session = Depends(get_db),
):
    """List payments, most recent first"""
    payments = PaymentRepository(db).list(instrument_id=instrument_id)
    return ApiResponse(data=[PaymentSchema.model_validate(p) for p in payments])


@router.post("/payments", response_model=ApiResponse[CreatedSchema])
def create_payment(
    request_body: PaymentRequest,
    db: Session = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    payment = PaymentRepository(db).create(request_body.to_draft())
    db.commit()

    record_change("payment", "create")
    log_record_change(request_id, "payment", "create", payment.id)
    return ApiResponse(data=CreatedSchema(id=payment.id), message="Payment recorded")
