"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import Dict, Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field

from legal_collections.domain.models import (
    DebtorDraft,
    InstrumentDraft,
    PaymentDraft,
    PortfolioStatistics,
    ProcessStageDraft,
)
from legal_collections.infrastructure.database.models import Instrument

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope for every response"""

    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None


# Requests. Required fields are checked by the domain validators so that
# missing and blank values get the same error.


class DebtorRequest(BaseModel):
    """Request body for POST/PUT /api/debtors"""

    tax_id: Optional[str] = Field(None, description="Tax identifier, unique per debtor")
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    active: bool = True

    def to_draft(self) -> DebtorDraft:
        return DebtorDraft(**self.model_dump())


class InstrumentRequest(BaseModel):
    """Request body for POST/PUT /api/instruments"""

    debtor_id: Optional[int] = None
    type: Optional[str] = Field(None, description="CHECK, PROMISSORY_NOTE, INVOICE, ...")
    number: Optional[str] = None
    amount: Optional[float] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    interest_rate: Optional[float] = Field(None, description="Percent per annum")
    status: Optional[str] = None

    def to_draft(self) -> InstrumentDraft:
        return InstrumentDraft(**self.model_dump())


class PaymentRequest(BaseModel):
    """Request body for POST /api/payments"""

    instrument_id: Optional[int] = None
    payment_date: Optional[date] = None
    amount: Optional[float] = None
    method: Optional[str] = None
    receipt: Optional[str] = None

    def to_draft(self) -> PaymentDraft:
        return PaymentDraft(**self.model_dump())


class ProcessStageRequest(BaseModel):
    """Request body for POST /api/process-stages"""

    instrument_id: Optional[int] = None
    stage: Optional[str] = None
    stage_date: Optional[date] = None
    observations: Optional[str] = None
    responsible: Optional[str] = None
    next_action_date: Optional[date] = None

    def to_draft(self) -> ProcessStageDraft:
        return ProcessStageDraft(**self.model_dump())


# Responses


class DebtorSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tax_id: str
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    created_on: date
    active: bool


class InstrumentSchema(BaseModel):
    """Instrument with the owning debtor's name and tax id joined in"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    debtor_id: int
    type: str
    number: str
    amount: float
    issue_date: date
    due_date: date
    interest_rate: float
    accrued_interest: float
    status: str
    debtor_name: Optional[str] = None
    debtor_tax_id: Optional[str] = None

    @classmethod
    def from_row(cls, instrument: Instrument) -> "InstrumentSchema":
        schema = cls.model_validate(instrument)
        if instrument.debtor is not None:
            schema.debtor_name = instrument.debtor.name
            schema.debtor_tax_id = instrument.debtor.tax_id
        return schema


class PaymentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    instrument_id: int
    payment_date: date
    amount: float
    method: Optional[str] = None
    receipt: Optional[str] = None


class ProcessStageSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    instrument_id: int
    stage: str
    stage_date: date
    observations: Optional[str] = None
    responsible: Optional[str] = None
    next_action_date: Optional[date] = None


class CreatedSchema(BaseModel):
    """Identifier assigned to a new record"""

    id: int


class ChangedSchema(BaseModel):
    """Outcome of an update or delete"""

    id: int
    changed: int


class StatisticsSchema(BaseModel):
    """Response data for GET /api/statistics"""

    model_config = ConfigDict(from_attributes=True)

    total_debtors: int
    total_instruments: int
    pending_debt: float
    total_recovered: float
    recovery_percentage: float
    upcoming_due: int
    overdue_count: int

    @classmethod
    def from_domain(cls, statistics: PortfolioStatistics) -> "StatisticsSchema":
        return cls.model_validate(statistics)


class StatusSchema(BaseModel):
    """Response data for GET / and GET /api/status"""

    status: str
    service: str
    version: str
    counts: Dict[str, int]
    endpoints: List[str]
