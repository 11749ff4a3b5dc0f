"""Health и ready endpoints."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from apps.thermometer.deps import get_store
from apps.thermometer.errors import StorageError
from apps.thermometer.services.config_store import ConfigStore
from apps.thermometer.utils.api_errors import error_envelope

router = APIRouter()


@router.get("/health")
def health():
    return {"status": "ok", "service": "donation-thermometer"}


@router.get("/ready")
def ready(request: Request, store: ConfigStore = Depends(get_store)):
    try:
        store.get_config()
    except StorageError as e:
        payload = error_envelope(
            code=e.code,
            message="Storage is not ready",
            trace_id=getattr(request.state, "trace_id", ""),
            detail=e.detail,
        )
        payload["status"] = "error"
        return JSONResponse(payload, status_code=503)
    return {"status": "ok", **store.describe()}
