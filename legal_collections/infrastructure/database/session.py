"""Database handle: engine, session factory and schema lifecycle"""

import logging
from typing import Generator, Optional
from fastapi import Request
from sqlalchemy import create_engine, event, select, func
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from legal_collections.config import settings
from legal_collections.domain.search import fold_text
from legal_collections.infrastructure.database.models import Base, Debtor

logger = logging.getLogger(__name__)

SAMPLE_DEBTORS = [
    {"tax_id": "30-12345678-9", "name": "Empresa Ejemplo S.A."},
    {"tax_id": "20-98765432-1", "name": "Comercio López Hnos."},
]


def _configure_sqlite_connection(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    # Lets search apply the accent-insensitive match inside SQL
    dbapi_connection.create_function("fold_text", 1, fold_text, deterministic=True)


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite gets foreign keys and fold_text on every connection"""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            # One shared connection, otherwise each checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)
        event.listen(engine, "connect", _configure_sqlite_connection)
        return engine

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle_seconds,
    )


class Database:
    """Explicitly constructed store handle shared by every request"""

    def __init__(self, database_url: Optional[str] = None, seed_sample_data: Optional[bool] = None):
        self.url = database_url or settings.database_url
        self.seed_sample_data = settings.seed_sample_data if seed_sample_data is None else seed_sample_data
        self.engine = build_engine(self.url)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def init(self) -> None:
        """Create missing tables and seed sample debtors into an empty store"""
        Base.metadata.create_all(bind=self.engine)
        if self.seed_sample_data:
            self._seed()
        logger.info("Database initialized", extra={"database_url": self.engine.url.render_as_string()})

    def _seed(self) -> None:
        with self.session_factory() as db:
            existing = db.execute(select(func.count()).select_from(Debtor)).scalar_one()
            if existing:
                return
            db.add_all([Debtor(**row) for row in SAMPLE_DEBTORS])
            db.commit()
            logger.info("Seeded sample debtors", extra={"count": len(SAMPLE_DEBTORS)})

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        """Release pooled connections"""
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency injection for database sessions"""
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
