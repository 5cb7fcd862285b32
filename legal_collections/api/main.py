"""FastAPI application factory"""

import uvicorn
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import Depends, FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.orm import Session
from starlette.responses import Response

from legal_collections.api.errors import register_exception_handlers
from legal_collections.api.middleware import RequestIDMiddleware, MetricsMiddleware
from legal_collections.api.v1 import debtors, instruments, payments, process_stages, search, statistics
from legal_collections.api.v1.schemas import ApiResponse, StatusSchema
from legal_collections.infrastructure.database.repositories import PortfolioRepository
from legal_collections.infrastructure.database.session import Database, get_db
from legal_collections.infrastructure.observability.logging import setup_logging
from legal_collections.config import settings

# Setup structured logging
setup_logging(settings.log_level)

ENDPOINTS = [
    "GET    /api/debtors",
    "GET    /api/debtors/{id}",
    "POST   /api/debtors",
    "PUT    /api/debtors/{id}",
    "DELETE /api/debtors/{id}",
    "GET    /api/instruments",
    "GET    /api/instruments/{id}",
    "POST   /api/instruments",
    "PUT    /api/instruments/{id}",
    "DELETE /api/instruments/{id}",
    "POST   /api/instruments/{id}/interest",
    "GET    /api/payments",
    "POST   /api/payments",
    "GET    /api/process-stages",
    "POST   /api/process-stages",
    "GET    /api/search?q=&type=debtors|instruments",
    "GET    /api/statistics",
    "GET    /api/export",
    "GET    /api/status",
]


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Create and configure FastAPI application"""
    database = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.init()
        yield
        database.dispose()

    app = FastAPI(
        title="Legal Collections API",
        description="Debtors, instruments, payments and collection stages",
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.database = database

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Liveness plus row counts
    @app.get("/", response_model=ApiResponse[StatusSchema])
    @app.get("/api/status", response_model=ApiResponse[StatusSchema])
    def service_status(db: Session = Depends(get_db)):
        return ApiResponse(
            data=StatusSchema(
                status="online",
                service=settings.service_name,
                version=settings.version,
                counts=PortfolioRepository(db).table_counts(),
                endpoints=ENDPOINTS,
            )
        )

    # Register API routers
    app.include_router(debtors.router, prefix="/api", tags=["debtors"])
    app.include_router(instruments.router, prefix="/api", tags=["instruments"])
    app.include_router(payments.router, prefix="/api", tags=["payments"])
    app.include_router(process_stages.router, prefix="/api", tags=["process-stages"])
    app.include_router(search.router, prefix="/api", tags=["search"])
    app.include_router(statistics.router, prefix="/api", tags=["statistics"])

    return app


def run() -> None:
    """Serve the API with uvicorn"""
    uvicorn.run(create_app(), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
