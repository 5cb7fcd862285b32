"""SQLAlchemy ORM models for the collections store"""

from datetime import date
from sqlalchemy import Column, Boolean, Date, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import declarative_base, relationship

from legal_collections.domain.models import InstrumentStatus

Base = declarative_base()


class Debtor(Base):
    """Person or company owing one or more instruments"""

    __tablename__ = "debtors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tax_id = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False, index=True)
    address = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    created_on = Column(Date, nullable=False, default=date.today)
    active = Column(Boolean, nullable=False, default=True)

    instruments = relationship("Instrument", back_populates="debtor", passive_deletes="all")


class Instrument(Base):
    """Check, promissory note or invoice owed by a debtor"""

    __tablename__ = "instruments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    debtor_id = Column(Integer, ForeignKey("debtors.id", ondelete="RESTRICT"), nullable=False, index=True)
    type = Column(Text, nullable=False)
    number = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    interest_rate = Column(Float, nullable=False, default=5.0)
    accrued_interest = Column(Float, nullable=False, default=0.0)
    status = Column(Text, nullable=False, default=InstrumentStatus.PENDING.value)

    debtor = relationship("Debtor", back_populates="instruments")
    payments = relationship("Payment", back_populates="instrument", passive_deletes="all")
    process_stages = relationship("ProcessStage", back_populates="instrument", passive_deletes="all")


class Payment(Base):
    """Amount collected against an instrument"""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    instrument_id = Column(Integer, ForeignKey("instruments.id", ondelete="RESTRICT"), nullable=False, index=True)
    payment_date = Column(Date, nullable=False)
    amount = Column(Float, nullable=False)
    method = Column(Text, nullable=True)
    receipt = Column(Text, nullable=True)

    instrument = relationship("Instrument", back_populates="payments")


class ProcessStage(Base):
    """Audit trail entry for a step of the collection procedure"""

    __tablename__ = "process_stages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    instrument_id = Column(Integer, ForeignKey("instruments.id", ondelete="RESTRICT"), nullable=False, index=True)
    stage = Column(Text, nullable=False)
    stage_date = Column(Date, nullable=False)
    observations = Column(Text, nullable=True)
    responsible = Column(Text, nullable=True)
    next_action_date = Column(Date, nullable=True)

    instrument = relationship("Instrument", back_populates="process_stages")
