"""Точка входа FastAPI."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apps.thermometer.auth import resolve_edit_key
from apps.thermometer.config import Settings, configure_logging, get_settings
from apps.thermometer.errors import (
    CsvValidationError,
    DocumentDecodeError,
    StorageUnavailable,
    ValidationError,
)
from apps.thermometer.middleware.trace_id import HEADER as TRACE_HEADER, TraceIdMiddleware, ensure_trace_id
from apps.thermometer.routers import admin, health, public
from apps.thermometer.services.config_store import ConfigStore, create_store
from apps.thermometer.utils.api_errors import error_envelope

logger = logging.getLogger(__name__)

STORAGE_RETRY_AFTER_SECONDS = 5


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", None) or ensure_trace_id(request.scope)


def _json_error(status_code: int, payload: dict, headers: dict | None = None) -> JSONResponse:
    resp = JSONResponse(content=payload, status_code=status_code, headers=headers)
    resp.headers[TRACE_HEADER] = payload["trace_id"]
    return resp


async def csv_validation_error_handler(request: Request, exc: CsvValidationError):
    payload = error_envelope(
        code=exc.code,
        message=f"CSV rejected: {exc.detail}",
        trace_id=_trace_id(request),
        detail=exc.reason,
        row=exc.row,
        column=exc.column,
    )
    return _json_error(400, payload)


async def validation_error_handler(request: Request, exc: ValidationError):
    payload = error_envelope(
        code=exc.code,
        message=f"Invalid value for '{exc.field}': {exc.reason}",
        trace_id=_trace_id(request),
        detail=exc.reason,
        field=exc.field,
    )
    return _json_error(400, payload)


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    # int parts of loc are positions inside the body, not field names
    field = ".".join(str(p) for p in first.get("loc", ()) if not isinstance(p, int)) or "body"
    reason = first.get("msg") or "invalid request"
    payload = error_envelope(
        code=ValidationError.code,
        message=f"Invalid value for '{field}': {reason}",
        trace_id=_trace_id(request),
        detail=reason,
        field=field,
    )
    return _json_error(400, payload)


async def storage_unavailable_handler(request: Request, exc: StorageUnavailable):
    trace_id = _trace_id(request)
    logger.warning("storage_unavailable trace_id=%s path=%s reason=%s", trace_id, request.url.path, exc.reason)
    payload = error_envelope(
        code=exc.code,
        message="Storage is temporarily unavailable, try again",
        trace_id=trace_id,
        detail=exc.reason,
    )
    return _json_error(503, payload, headers={"Retry-After": str(STORAGE_RETRY_AFTER_SECONDS)})


async def document_decode_error_handler(request: Request, exc: DocumentDecodeError):
    trace_id = _trace_id(request)
    logger.error("storage_corrupt trace_id=%s field=%s reason=%s", trace_id, exc.field, exc.reason)
    payload = error_envelope(
        code=exc.code,
        message="Stored configuration could not be read",
        trace_id=trace_id,
        detail=exc.detail,
    )
    return _json_error(500, payload)


async def global_exception_handler(request: Request, exc: Exception):
    trace_id = _trace_id(request)
    logger.exception("Unhandled exception trace_id=%s path=%s", trace_id, request.url.path)
    payload = error_envelope(code="internal_error", message="Internal server error", trace_id=trace_id)
    return _json_error(500, payload)


def create_app(settings: Settings | None = None, store: ConfigStore | None = None) -> FastAPI:
    """Build the app. The store is created here once and lives on app.state."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    store = store or create_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting donation thermometer backend=%s", store.kind.value)
        yield
        store.close()

    app = FastAPI(
        title="Animal Shelter Donation Thermometer API",
        description="Donation thermometer data. Admin endpoints require `Authorization: Bearer <THERMOMETER_EDIT_KEY>`.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.edit_key = resolve_edit_key(settings.thermometer_edit_key)

    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, tags=["System"])
    app.include_router(public.router, tags=["Public"])
    app.include_router(admin.router, prefix="/admin", tags=["Admin"])

    app.add_exception_handler(CsvValidationError, csv_validation_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StorageUnavailable, storage_unavailable_handler)
    app.add_exception_handler(DocumentDecodeError, document_decode_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("apps.thermometer.main:app", host="0.0.0.0", port=get_settings().port)
