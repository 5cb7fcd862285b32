"""Data access layer for collections entities"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from sqlalchemy import Text, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager, joinedload

from legal_collections.config import settings
from legal_collections.domain.exceptions import (
    ConflictError,
    DomainException,
    InternalError,
    InvalidReferenceError,
    NotFoundError,
    ValidationError,
)
from legal_collections.domain.interest import calculate_accrued_interest, is_overdue
from legal_collections.domain.models import (
    AggregateTotals,
    DebtorDraft,
    InstrumentDraft,
    InstrumentStatus,
    PaymentDraft,
    ProcessStageDraft,
)
from legal_collections.domain.search import fold_text, matches
from legal_collections.domain.validation import (
    validate_debtor,
    validate_instrument,
    validate_payment,
    validate_process_stage,
)
from legal_collections.infrastructure.database.models import Debtor, Instrument, Payment, ProcessStage
from legal_collections.utils.date_utils import window_end

logger = logging.getLogger(__name__)

# Largest key a signed 64-bit INTEGER column can hold
MAX_ROW_ID = 2**63 - 1


def is_storable_id(record_id: Optional[int]) -> bool:
    """Ids outside the key range can never match a row"""
    return record_id is not None and 0 < record_id <= MAX_ROW_ID


def folds_in_sql(db: Session) -> bool:
    """SQLite connections carry the fold_text function registered by the engine"""
    return db.get_bind().dialect.name == "sqlite"


def folded_contains(column, query: str):
    return func.fold_text(column, type_=Text).contains(fold_text(query), autoescape=True)


def translate_integrity_error(error: IntegrityError) -> DomainException:
    """Map a constraint violation onto the domain error taxonomy"""
    message = str(error.orig).lower()
    if "foreign key" in message:
        return InvalidReferenceError("Referenced record does not exist")
    if "unique" in message or "duplicate" in message:
        return ConflictError("A record with the same unique value already exists")
    if "not null" in message or "null value" in message:
        return ValidationError("A required field is missing")
    return ConflictError("Constraint violation")


@contextmanager
def storage_errors(db: Session) -> Iterator[None]:
    """Roll back and translate raw storage errors; raw text is only logged"""
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        logger.warning("Integrity error: %s", e.orig)
        raise translate_integrity_error(e) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Storage error: %s", e)
        detail = str(e) if settings.debug else "Storage error"
        raise InternalError(detail) from e


class DebtorRepository:
    """Repository for debtors"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, draft: DebtorDraft) -> Debtor:
        """Persist a new debtor; tax id must be unique"""
        draft = validate_debtor(draft)
        with storage_errors(self.db):
            self._ensure_tax_id_free(draft.tax_id)
            db_debtor = Debtor(
                tax_id=draft.tax_id,
                name=draft.name,
                address=draft.address,
                phone=draft.phone,
                email=draft.email,
                active=draft.active,
            )
            self.db.add(db_debtor)
            self.db.flush()  # Get ID without committing
        return db_debtor

    def get(self, debtor_id: int) -> Debtor:
        debtor = None
        if is_storable_id(debtor_id):
            with storage_errors(self.db):
                debtor = self.db.get(Debtor, debtor_id)
        if debtor is None:
            raise NotFoundError(f"Debtor {debtor_id} not found")
        return debtor

    def list(self) -> List[Debtor]:
        """All debtors sorted by name"""
        with storage_errors(self.db):
            return list(self.db.scalars(select(Debtor).order_by(Debtor.name, Debtor.id)))

    def search(self, query: str) -> List[Debtor]:
        """
        Debtors whose name or tax id contains the query.

        On SQLite the folded match runs in SQL; the Python check then applies
        the same rule on every backend.
        """
        stmt = select(Debtor).order_by(Debtor.name, Debtor.id)
        if folds_in_sql(self.db):
            stmt = stmt.where(or_(folded_contains(Debtor.name, query), folded_contains(Debtor.tax_id, query)))
        with storage_errors(self.db):
            candidates = list(self.db.scalars(stmt))
        return [d for d in candidates if matches(query, d.name, d.tax_id)]

    def update(self, debtor_id: int, draft: DebtorDraft) -> int:
        """Replace debtor fields; returns the changed-row count (0 means not found)"""
        draft = validate_debtor(draft)
        if not is_storable_id(debtor_id):
            return 0
        with storage_errors(self.db):
            self._ensure_tax_id_free(draft.tax_id, exclude_id=debtor_id)
            result = self.db.execute(
                update(Debtor)
                .where(Debtor.id == debtor_id)
                .values(
                    tax_id=draft.tax_id,
                    name=draft.name,
                    address=draft.address,
                    phone=draft.phone,
                    email=draft.email,
                    active=draft.active,
                )
            )
        return result.rowcount

    def delete(self, debtor_id: int) -> int:
        """Delete a debtor without instruments; returns the changed-row count"""
        if not is_storable_id(debtor_id):
            return 0
        with storage_errors(self.db):
            owned = self.db.execute(
                select(func.count()).select_from(Instrument).where(Instrument.debtor_id == debtor_id)
            ).scalar_one()
            if owned:
                raise ConflictError(f"Debtor {debtor_id} still owns {owned} instrument(s)")
            result = self.db.execute(delete(Debtor).where(Debtor.id == debtor_id))
        return result.rowcount

    def _ensure_tax_id_free(self, tax_id: str, exclude_id: Optional[int] = None) -> None:
        stmt = select(Debtor.id).where(Debtor.tax_id == tax_id)
        if exclude_id is not None:
            stmt = stmt.where(Debtor.id != exclude_id)
        if self.db.execute(stmt).first() is not None:
            raise ConflictError(f"A debtor with tax id {tax_id} already exists")


class InstrumentRepository:
    """Repository for instruments, including interest accrual"""

    def __init__(self, db: Session, allowed_types: Optional[Iterable[str]] = None):
        self.db = db
        self.allowed_types = list(allowed_types or settings.instrument_types)

    def create(self, draft: InstrumentDraft) -> Instrument:
        """Persist a new instrument for an existing debtor"""
        draft = validate_instrument(draft, self.allowed_types)
        with storage_errors(self.db):
            self._ensure_debtor_exists(draft.debtor_id)
            db_instrument = Instrument(
                debtor_id=draft.debtor_id,
                type=draft.type,
                number=draft.number,
                amount=draft.amount,
                issue_date=draft.issue_date,
                due_date=draft.due_date,
                interest_rate=(
                    draft.interest_rate if draft.interest_rate is not None else settings.default_interest_rate
                ),
                status=draft.status or InstrumentStatus.PENDING.value,
            )
            self.db.add(db_instrument)
            self.db.flush()
        return db_instrument

    def get(self, instrument_id: int) -> Instrument:
        """Fetch instrument with its debtor loaded"""
        instrument = None
        if is_storable_id(instrument_id):
            with storage_errors(self.db):
                instrument = self.db.scalars(
                    select(Instrument).options(joinedload(Instrument.debtor)).where(Instrument.id == instrument_id)
                ).first()
        if instrument is None:
            raise NotFoundError(f"Instrument {instrument_id} not found")
        return instrument

    def list(self) -> List[Instrument]:
        """All instruments by due date, debtor joined for display"""
        with storage_errors(self.db):
            return list(
                self.db.scalars(
                    select(Instrument)
                    .options(joinedload(Instrument.debtor))
                    .order_by(Instrument.due_date, Instrument.id)
                )
            )

    def search(self, query: str) -> List[Instrument]:
        """Instruments whose number, type or debtor name contains the query"""
        stmt = (
            select(Instrument)
            .join(Instrument.debtor)
            .options(contains_eager(Instrument.debtor))
            .order_by(Instrument.due_date, Instrument.id)
        )
        if folds_in_sql(self.db):
            stmt = stmt.where(
                or_(
                    folded_contains(Instrument.number, query),
                    folded_contains(Instrument.type, query),
                    folded_contains(Debtor.name, query),
                )
            )
        with storage_errors(self.db):
            candidates = list(self.db.scalars(stmt))
        return [i for i in candidates if matches(query, i.number, i.type, i.debtor.name)]

    def update(self, instrument_id: int, draft: InstrumentDraft) -> int:
        """
        Replace instrument fields; returns the changed-row count.

        Omitted rate and status keep their stored values. Accrued interest is
        never touched here.
        """
        draft = validate_instrument(draft, self.allowed_types)
        values = {
            "debtor_id": draft.debtor_id,
            "type": draft.type,
            "number": draft.number,
            "amount": draft.amount,
            "issue_date": draft.issue_date,
            "due_date": draft.due_date,
        }
        if draft.interest_rate is not None:
            values["interest_rate"] = draft.interest_rate
        if draft.status is not None:
            values["status"] = draft.status

        if not is_storable_id(instrument_id):
            self._ensure_debtor_exists(draft.debtor_id)
            return 0
        with storage_errors(self.db):
            self._ensure_debtor_exists(draft.debtor_id)
            result = self.db.execute(update(Instrument).where(Instrument.id == instrument_id).values(**values))
        return result.rowcount

    def delete(self, instrument_id: int) -> int:
        """Delete an instrument without payments or process stages"""
        if not is_storable_id(instrument_id):
            return 0
        with storage_errors(self.db):
            payments = self.db.execute(
                select(func.count()).select_from(Payment).where(Payment.instrument_id == instrument_id)
            ).scalar_one()
            stages = self.db.execute(
                select(func.count()).select_from(ProcessStage).where(ProcessStage.instrument_id == instrument_id)
            ).scalar_one()
            if payments or stages:
                raise ConflictError(
                    f"Instrument {instrument_id} has {payments} payment(s) and {stages} process stage(s)"
                )
            result = self.db.execute(delete(Instrument).where(Instrument.id == instrument_id))
        return result.rowcount

    def recalculate_interest(self, instrument_id: int, as_of: date) -> Tuple[Instrument, int]:
        """
        Recompute simple interest accrued since the due date.

        Returns the instrument and the changed-row count: 0 when the due date
        is not yet past, in which case the stored interest is left as is.
        """
        instrument = self.get(instrument_id)
        if not is_overdue(instrument.due_date, as_of):
            return instrument, 0

        with storage_errors(self.db):
            instrument.accrued_interest = calculate_accrued_interest(
                principal=instrument.amount,
                annual_rate=instrument.interest_rate,
                due_date=instrument.due_date,
                as_of=as_of,
            )
            self.db.flush()
        return instrument, 1

    def _ensure_debtor_exists(self, debtor_id: int) -> None:
        if not is_storable_id(debtor_id) or self.db.get(Debtor, debtor_id) is None:
            raise InvalidReferenceError(f"Debtor {debtor_id} does not exist")


def _ensure_instrument_exists(db: Session, instrument_id: int) -> None:
    if not is_storable_id(instrument_id) or db.get(Instrument, instrument_id) is None:
        raise InvalidReferenceError(f"Instrument {instrument_id} does not exist")


class PaymentRepository:
    """Repository for payments (append-only)"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, draft: PaymentDraft) -> Payment:
        draft = validate_payment(draft)
        with storage_errors(self.db):
            _ensure_instrument_exists(self.db, draft.instrument_id)
            db_payment = Payment(
                instrument_id=draft.instrument_id,
                payment_date=draft.payment_date,
                amount=draft.amount,
                method=draft.method,
                receipt=draft.receipt,
            )
            self.db.add(db_payment)
            self.db.flush()
        return db_payment

    def list(self, instrument_id: Optional[int] = None) -> List[Payment]:
        """Payments, most recent first"""
        if instrument_id is not None and not is_storable_id(instrument_id):
            return []
        stmt = select(Payment).order_by(Payment.payment_date.desc(), Payment.id.desc())
        if instrument_id is not None:
            stmt = stmt.where(Payment.instrument_id == instrument_id)
        with storage_errors(self.db):
            return list(self.db.scalars(stmt))


class ProcessStageRepository:
    """Repository for process stages (append-only)"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, draft: ProcessStageDraft) -> ProcessStage:
        draft = validate_process_stage(draft)
        with storage_errors(self.db):
            _ensure_instrument_exists(self.db, draft.instrument_id)
            db_stage = ProcessStage(
                instrument_id=draft.instrument_id,
                stage=draft.stage,
                stage_date=draft.stage_date,
                observations=draft.observations,
                responsible=draft.responsible,
                next_action_date=draft.next_action_date,
            )
            self.db.add(db_stage)
            self.db.flush()
        return db_stage

    def list(self, instrument_id: Optional[int] = None) -> List[ProcessStage]:
        """Process stages, most recent first"""
        if instrument_id is not None and not is_storable_id(instrument_id):
            return []
        stmt = select(ProcessStage).order_by(ProcessStage.stage_date.desc(), ProcessStage.id.desc())
        if instrument_id is not None:
            stmt = stmt.where(ProcessStage.instrument_id == instrument_id)
        with storage_errors(self.db):
            return list(self.db.scalars(stmt))


class PortfolioRepository:
    """Aggregate queries: statistics, row counts and full export"""

    TABLES = {
        "debtors": Debtor,
        "instruments": Instrument,
        "payments": Payment,
        "process_stages": ProcessStage,
    }

    def __init__(self, db: Session):
        self.db = db

    def _scalar(self, stmt) -> float:
        return self.db.execute(stmt).scalar_one()

    def aggregate_totals(self, as_of: date, window_days: Optional[int] = None) -> AggregateTotals:
        """
        Run the aggregate queries behind the statistics snapshot.

        Queries run one after another without a wrapping transaction, so a
        concurrent write can land between them.
        """
        window_days = settings.upcoming_window_days if window_days is None else window_days
        pending = Instrument.status == InstrumentStatus.PENDING.value

        with storage_errors(self.db):
            total_debtors = self._scalar(select(func.count()).select_from(Debtor))
            total_instruments = self._scalar(select(func.count()).select_from(Instrument))
            pending_debt = self._scalar(
                select(func.coalesce(func.sum(Instrument.amount + Instrument.accrued_interest), 0.0)).where(pending)
            )
            total_recovered = self._scalar(select(func.coalesce(func.sum(Payment.amount), 0.0)))
            upcoming_due = self._scalar(
                select(func.count())
                .select_from(Instrument)
                .where(pending, Instrument.due_date >= as_of, Instrument.due_date <= window_end(as_of, window_days))
            )
            overdue_count = self._scalar(
                select(func.count()).select_from(Instrument).where(pending, Instrument.due_date < as_of)
            )

        return AggregateTotals(
            total_debtors=total_debtors,
            total_instruments=total_instruments,
            pending_debt=float(pending_debt),
            total_recovered=float(total_recovered),
            upcoming_due=upcoming_due,
            overdue_count=overdue_count,
        )

    def table_counts(self) -> Dict[str, int]:
        with storage_errors(self.db):
            return {
                name: self._scalar(select(func.count()).select_from(model))
                for name, model in self.TABLES.items()
            }

    def dump(self) -> Dict[str, List[dict]]:
        """Every row of every table, as plain column dictionaries"""
        with storage_errors(self.db):
            return {
                name: [
                    {column.name: getattr(row, column.name) for column in model.__table__.columns}
                    for row in self.db.scalars(select(model).order_by(model.id))
                ]
                for name, model in self.TABLES.items()
            }
