"""Unit tests for record validation"""

import pytest
from datetime import date
from legal_collections.domain.exceptions import ValidationError
from legal_collections.domain.models import DebtorDraft, InstrumentDraft, PaymentDraft, ProcessStageDraft
from legal_collections.domain.validation import (
    validate_debtor,
    validate_instrument,
    validate_payment,
    validate_process_stage,
)

TYPES = ["CHECK", "PROMISSORY_NOTE", "INVOICE"]


def instrument_draft(**overrides) -> InstrumentDraft:
    fields = dict(
        debtor_id=1,
        type="INVOICE",
        number="FA-1",
        amount=1000.0,
        issue_date=date(2024, 1, 1),
        due_date=date(2024, 2, 1),
    )
    fields.update(overrides)
    return InstrumentDraft(**fields)


def test_debtor_strips_whitespace():
    draft = validate_debtor(DebtorDraft(tax_id=" 30-1 ", name=" Acme ", email="  "))
    assert draft.tax_id == "30-1"
    assert draft.name == "Acme"
    assert draft.email is None


@pytest.mark.parametrize("tax_id,name", [(None, "Acme"), ("30-1", None), ("30-1", "   "), ("", "Acme")])
def test_debtor_requires_tax_id_and_name(tax_id, name):
    with pytest.raises(ValidationError):
        validate_debtor(DebtorDraft(tax_id=tax_id, name=name))


def test_instrument_type_and_status_upper_cased():
    draft = validate_instrument(instrument_draft(type="check", status="in_process"), TYPES)
    assert draft.type == "CHECK"
    assert draft.status == "IN_PROCESS"


@pytest.mark.parametrize(
    "overrides",
    [
        {"debtor_id": None},
        {"number": " "},
        {"amount": None},
        {"amount": 0},
        {"amount": -10.0},
        {"type": "BOND"},
        {"status": "LOST"},
        {"interest_rate": -1.0},
        {"interest_rate": float("inf")},
        {"interest_rate": float("nan")},
        {"amount": float("inf")},
        {"amount": float("nan")},
        {"due_date": date(2023, 12, 31)},
        {"issue_date": None},
    ],
)
def test_instrument_rejects_bad_fields(overrides):
    with pytest.raises(ValidationError):
        validate_instrument(instrument_draft(**overrides), TYPES)


def test_instrument_due_on_issue_date_allowed():
    draft = validate_instrument(instrument_draft(due_date=date(2024, 1, 1)), TYPES)
    assert draft.due_date == draft.issue_date


def test_payment_requires_positive_amount():
    with pytest.raises(ValidationError):
        validate_payment(PaymentDraft(instrument_id=1, payment_date=date(2024, 1, 1), amount=0))


def test_process_stage_requires_stage_name():
    with pytest.raises(ValidationError):
        validate_process_stage(ProcessStageDraft(instrument_id=1, stage="  ", stage_date=date(2024, 1, 1)))


def test_payment_rejects_non_finite_amount():
    for amount in (float("inf"), float("-inf"), float("nan")):
        with pytest.raises(ValidationError):
            validate_payment(PaymentDraft(instrument_id=1, payment_date=date(2024, 1, 1), amount=amount))
