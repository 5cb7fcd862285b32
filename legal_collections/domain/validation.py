"""Field validation for records entering the store"""

import math
from dataclasses import replace
from typing import Iterable, List, Optional
from legal_collections.domain.models import (
    DebtorDraft,
    InstrumentDraft,
    InstrumentStatus,
    PaymentDraft,
    ProcessStageDraft,
)
from legal_collections.domain.exceptions import ValidationError


def _clean(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; blank strings become None"""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _require(fields: dict) -> None:
    missing: List[str] = [name for name, value in fields.items() if value is None]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def _require_finite(name: str, value: Optional[float]) -> None:
    if value is not None and not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number")


def _require_positive(name: str, value: Optional[float]) -> None:
    _require_finite(name, value)
    if value is not None and value <= 0:
        raise ValidationError(f"{name} must be greater than zero")


def validate_debtor(draft: DebtorDraft) -> DebtorDraft:
    """Return a normalized copy of the draft or raise ValidationError"""
    cleaned = replace(
        draft,
        tax_id=_clean(draft.tax_id),
        name=_clean(draft.name),
        address=_clean(draft.address),
        phone=_clean(draft.phone),
        email=_clean(draft.email),
    )
    _require({"tax_id": cleaned.tax_id, "name": cleaned.name})
    return cleaned


def validate_instrument(draft: InstrumentDraft, allowed_types: Iterable[str]) -> InstrumentDraft:
    """
    Normalize and check an instrument draft.

    Type and status are upper-cased before the membership checks. A due date
    earlier than the issue date is rejected.
    """
    instrument_type = _clean(draft.type)
    status = _clean(draft.status)
    cleaned = replace(
        draft,
        type=instrument_type.upper() if instrument_type else None,
        number=_clean(draft.number),
        status=status.upper() if status else None,
    )
    _require(
        {
            "debtor_id": cleaned.debtor_id,
            "type": cleaned.type,
            "number": cleaned.number,
            "amount": cleaned.amount,
            "issue_date": cleaned.issue_date,
            "due_date": cleaned.due_date,
        }
    )
    _require_positive("amount", cleaned.amount)

    allowed = [t.upper() for t in allowed_types]
    if cleaned.type not in allowed:
        raise ValidationError(f"Unknown instrument type '{cleaned.type}'; expected one of {', '.join(allowed)}")

    if cleaned.status is not None and cleaned.status not in InstrumentStatus.__members__:
        raise ValidationError(f"Unknown status '{cleaned.status}'")

    _require_finite("interest_rate", cleaned.interest_rate)
    if cleaned.interest_rate is not None and cleaned.interest_rate < 0:
        raise ValidationError("interest_rate cannot be negative")

    if cleaned.due_date < cleaned.issue_date:
        raise ValidationError("due_date cannot be earlier than issue_date")

    return cleaned


def validate_payment(draft: PaymentDraft) -> PaymentDraft:
    cleaned = replace(draft, method=_clean(draft.method), receipt=_clean(draft.receipt))
    _require(
        {
            "instrument_id": cleaned.instrument_id,
            "payment_date": cleaned.payment_date,
            "amount": cleaned.amount,
        }
    )
    _require_positive("amount", cleaned.amount)
    return cleaned


def validate_process_stage(draft: ProcessStageDraft) -> ProcessStageDraft:
    cleaned = replace(
        draft,
        stage=_clean(draft.stage),
        observations=_clean(draft.observations),
        responsible=_clean(draft.responsible),
    )
    _require(
        {
            "instrument_id": cleaned.instrument_id,
            "stage": cleaned.stage,
            "stage_date": cleaned.stage_date,
        }
    )
    return cleaned
