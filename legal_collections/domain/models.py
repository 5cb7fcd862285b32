"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class InstrumentStatus(str, Enum):
    """Collection state of an instrument"""

    PENDING = "PENDING"
    IN_PROCESS = "IN_PROCESS"
    PAID = "PAID"
    WRITTEN_OFF = "WRITTEN_OFF"


class SearchTarget(str, Enum):
    """Entity kinds accepted by search"""

    DEBTORS = "debtors"
    INSTRUMENTS = "instruments"


@dataclass
class DebtorDraft:
    """Debtor fields as supplied by a caller, before persistence"""

    tax_id: Optional[str]
    name: Optional[str]
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    active: bool = True


@dataclass
class InstrumentDraft:
    """Instrument fields as supplied by a caller"""

    debtor_id: Optional[int]
    type: Optional[str]
    number: Optional[str]
    amount: Optional[float]
    issue_date: Optional[date]
    due_date: Optional[date]
    interest_rate: Optional[float] = None
    status: Optional[str] = None


@dataclass
class PaymentDraft:
    """Payment fields; payments are append-only"""

    instrument_id: Optional[int]
    payment_date: Optional[date]
    amount: Optional[float]
    method: Optional[str] = None
    receipt: Optional[str] = None


@dataclass
class ProcessStageDraft:
    """One step of the collection procedure; append-only"""

    instrument_id: Optional[int]
    stage: Optional[str]
    stage_date: Optional[date]
    observations: Optional[str] = None
    responsible: Optional[str] = None
    next_action_date: Optional[date] = None


@dataclass
class AggregateTotals:
    """Raw aggregate values read from the store"""

    total_debtors: int
    total_instruments: int
    pending_debt: float
    total_recovered: float
    upcoming_due: int
    overdue_count: int


@dataclass
class PortfolioStatistics:
    """Snapshot of portfolio health"""

    total_debtors: int
    total_instruments: int
    pending_debt: float
    total_recovered: float
    recovery_percentage: float
    upcoming_due: int
    overdue_count: int
