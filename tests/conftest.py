"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from legal_collections.api.dependencies import get_today
from legal_collections.api.main import create_app
from legal_collections.domain.models import DebtorDraft, InstrumentDraft, PaymentDraft
from legal_collections.infrastructure.database.models import Debtor, Instrument, Payment
from legal_collections.infrastructure.database.repositories import (
    DebtorRepository,
    InstrumentRepository,
    PaymentRepository,
)
from legal_collections.infrastructure.database.session import Database

# Pinned "today": 2024-02-01 is exactly 100 days earlier
TODAY = date(2024, 5, 11)


@pytest.fixture
def database(tmp_path) -> Generator[Database, None, None]:
    """Fresh file-backed SQLite store per test"""
    database = Database(f"sqlite:///{tmp_path / 'test.db'}", seed_sample_data=False)
    database.init()
    try:
        yield database
    finally:
        database.dispose()


@pytest.fixture
def db(database: Database) -> Generator[Session, None, None]:
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(database: Database) -> Generator[TestClient, None, None]:
    """FastAPI test client bound to the test store with a pinned clock"""
    app = create_app(database)
    app.dependency_overrides[get_today] = lambda: TODAY

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_debtor(db: Session) -> Callable[..., Debtor]:
    def _make(tax_id: str = "30-12345678-9", name: str = "Acme", **fields) -> Debtor:
        debtor = DebtorRepository(db).create(DebtorDraft(tax_id=tax_id, name=name, **fields))
        db.commit()
        return debtor

    return _make


@pytest.fixture
def make_instrument(db: Session) -> Callable[..., Instrument]:
    def _make(debtor_id: int, number: str = "FA-1", amount: float = 1000.0, **fields) -> Instrument:
        draft = InstrumentDraft(
            debtor_id=debtor_id,
            type=fields.pop("type", "INVOICE"),
            number=number,
            amount=amount,
            issue_date=fields.pop("issue_date", date(2024, 1, 1)),
            due_date=fields.pop("due_date", date(2024, 2, 1)),
            **fields,
        )
        instrument = InstrumentRepository(db).create(draft)
        db.commit()
        return instrument

    return _make


@pytest.fixture
def make_payment(db: Session) -> Callable[..., Payment]:
    def _make(instrument_id: int, amount: float, payment_date: date = TODAY - timedelta(days=1), **fields) -> Payment:
        payment = PaymentRepository(db).create(
            PaymentDraft(instrument_id=instrument_id, payment_date=payment_date, amount=amount, **fields)
        )
        db.commit()
        return payment

    return _make


@pytest.fixture
def today() -> date:
    return TODAY
