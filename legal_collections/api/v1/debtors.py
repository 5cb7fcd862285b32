"""/api/debtors - debtor CRUD"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from legal_collections.api.dependencies import get_request_id
from legal_collections.api.v1.schemas import (
    ApiResponse,
    ChangedSchema,
    CreatedSchema,
    DebtorRequest,
    DebtorSchema,
)
from legal_collections.domain.exceptions import NotFoundError
from legal_collections.infrastructure.database.repositories import DebtorRepository
from legal_collections.infrastructure.database.session import get_db
from legal_collections.infrastructure.observability.logging import log_record_change
from legal_collections.infrastructure.observability.metrics import record_change

router = APIRouter()


@router.get("/debtors", response_model=ApiResponse[List[DebtorSchema]])
def list_debtors(db: Session = Depends(get_db)):
    """List all debtors sorted by name"""
    debtors = DebtorRepository(db).list()
    return ApiResponse(data=[DebtorSchema.model_validate(d) for d in debtors])


@router.get("/debtors/{debtor_id}", response_model=ApiResponse[DebtorSchema])
def get_debtor(debtor_id: int, db: Session = Depends(get_db)):
    debtor = DebtorRepository(db).get(debtor_id)
    return ApiResponse(data=DebtorSchema.model_validate(debtor))


@router.post("/debtors", response_model=ApiResponse[CreatedSchema])
def create_debtor(
    request_body: DebtorRequest,
    db: Session = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    """
    Register a debtor.

    Fails with 400 when tax id or name is missing, or the tax id is taken.
    """
    debtor = DebtorRepository(db).create(request_body.to_draft())
    db.commit()

    record_change("debtor", "create")
    log_record_change(request_id, "debtor", "create", debtor.id)
    return ApiResponse(data=CreatedSchema(id=debtor.id), message="Debtor created")


@router.put("/debtors/{debtor_id}", response_model=ApiResponse[ChangedSchema])
def update_debtor(
    debtor_id: int,
    request_body: DebtorRequest,
    db: Session = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    changed = DebtorRepository(db).update(debtor_id, request_body.to_draft())
    if not changed:
        raise NotFoundError(f"Debtor {debtor_id} not found")
    db.commit()

    record_change("debtor", "update", changed)
    log_record_change(request_id, "debtor", "update", debtor_id, changed)
    return ApiResponse(data=ChangedSchema(id=debtor_id, changed=changed), message="Debtor updated")


@router.delete("/debtors/{debtor_id}", response_model=ApiResponse[ChangedSchema])
def delete_debtor(
    debtor_id: int,
    db: Session = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    """Delete a debtor; rejected while the debtor still owns instruments"""
    changed = DebtorRepository(db).delete(debtor_id)
    if not changed:
        raise NotFoundError(f"Debtor {debtor_id} not found")
    db.commit()

    record_change("debtor", "delete", changed)
    log_record_change(request_id, "debtor", "delete", debtor_id, changed)
    return ApiResponse(data=ChangedSchema(id=debtor_id, changed=changed), message="Debtor deleted")
