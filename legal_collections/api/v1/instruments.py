"""/api/instruments - instrument CRUD and interest accrual"""

from datetime import date
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from legal_collections.api.dependencies import get_request_id, get_today
from legal_collections.api.v1.schemas import (
    ApiResponse,
    ChangedSchema,
    CreatedSchema,
    InstrumentRequest,
    InstrumentSchema,
)
from legal_collections.domain.exceptions import NotFoundError
from legal_collections.infrastructure.database.repositories import InstrumentRepository
from legal_collections.infrastructure.database.session import get_db
from legal_collections.infrastructure.observability.logging import log_interest_accrual, log_record_change
from legal_collections.infrastructure.observability.metrics import record_change, record_interest_recalculation

router = APIRouter()


@router.get("/instruments", response_model=ApiResponse[List[InstrumentSchema]])
def list_instruments(db: Session = Depends(get_db)):
    """List instruments by due date with debtor name and tax id"""
    instruments = InstrumentRepository(db).list()
    return ApiResponse(data=[InstrumentSchema.from_row(i) for i in instruments])


@router.get("/instruments/{instrument_id}", response_model=ApiResponse[InstrumentSchema])
def get_instrument(instrument_id: int, db: Session = Depends(get_db)):
    instrument = InstrumentRepository(db).get(instrument_id)
    return ApiResponse(data=InstrumentSchema.from_row(instrument))


@router.post("/instruments", response_model=ApiResponse[CreatedSchema])
def create_instrument(
    request_body: InstrumentRequest,
    db: Session = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    instrument = InstrumentRepository(db).create(request_body.to_draft())
    db.commit()

    record_change("instrument", "create")
    log_record_change(request_id, "instrument", "create", instrument.id)
    return ApiResponse(data=CreatedSchema(id=instrument.id), message="Instrument created")


@router.put("/instruments/{instrument_id}", response_model=ApiResponse[ChangedSchema])
def update_instrument(
    instrument_id: int,
    request_body: InstrumentRequest,
    db: Session = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    changed = InstrumentRepository(db).update(instrument_id, request_body.to_draft())
    if not changed:
        raise NotFoundError(f"Instrument {instrument_id} not found")
    db.commit()

    record_change("instrument", "update", changed)
    log_record_change(request_id, "instrument", "update", instrument_id, changed)
    return ApiResponse(data=ChangedSchema(id=instrument_id, changed=changed), message="Instrument updated")


@router.delete("/instruments/{instrument_id}", response_model=ApiResponse[ChangedSchema])
def delete_instrument(
    instrument_id: int,
    db: Session = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    """Delete an instrument; rejected while payments or process stages reference it"""
    changed = InstrumentRepository(db).delete(instrument_id)
    if not changed:
        raise NotFoundError(f"Instrument {instrument_id} not found")
    db.commit()

    record_change("instrument", "delete", changed)
    log_record_change(request_id, "instrument", "delete", instrument_id, changed)
    return ApiResponse(data=ChangedSchema(id=instrument_id, changed=changed), message="Instrument deleted")


@router.post("/instruments/{instrument_id}/interest", response_model=ApiResponse[InstrumentSchema])
def recalculate_interest(
    instrument_id: int,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    request_id: str = Depends(get_request_id),
):
    """
    Recompute simple interest accrued since the due date.

    Returns:
        The full instrument; interest is left untouched when not yet due
    """
    instrument, changed = InstrumentRepository(db).recalculate_interest(instrument_id, as_of=today)
    db.commit()

    record_interest_recalculation(changed)
    log_interest_accrual(request_id, instrument_id, instrument.accrued_interest, changed)
    message = "Interest recalculated" if changed else "Instrument not yet due; interest unchanged"
    return ApiResponse(data=InstrumentSchema.from_row(instrument), message=message)
