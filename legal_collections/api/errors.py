"""Exception handlers producing the uniform error envelope"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from legal_collections.domain.exceptions import DomainException
from legal_collections.infrastructure.observability.metrics import domain_error_counter


def error_response(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    content = {"success": False, "error": error}
    if message is not None:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


async def handle_domain_exception(request: Request, exc: DomainException) -> JSONResponse:
    domain_error_counter.labels(kind=exc.kind).inc()
    if exc.status_code >= 500:
        logging.error(f"{exc.kind}: {exc}", extra={"request_id": _request_id(request)})
    else:
        logging.warning(f"{exc.kind}: {exc}", extra={"request_id": _request_id(request)})
    return error_response(exc.status_code, str(exc), exc.kind)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    domain_error_counter.labels(kind="ValidationError").inc()
    return error_response(400, f"Invalid request: {details}", "ValidationError")


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        return error_response(404, f"Route not found: {request.method} {request.url.path}")
    return error_response(exc.status_code, str(exc.detail))


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logging.exception(f"Unexpected error: {exc}", extra={"request_id": _request_id(request)})
    return error_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, handle_domain_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
