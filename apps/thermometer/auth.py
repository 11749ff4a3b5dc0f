"""Admin auth: shared edit key (THERMOMETER_EDIT_KEY) as Bearer token."""
import hmac
import logging
import uuid

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def mask_key(key: str) -> str:
    k = (key or "").strip()
    if len(k) <= 8:
        return "***"
    return f"{k[:4]}...{k[-4:]}"


def resolve_edit_key(configured: str | None) -> str:
    """Configured key, or a random one for this process (logged once)."""
    key = (configured or "").strip()
    if key:
        return key
    key = str(uuid.uuid4())
    logger.warning("THERMOMETER_EDIT_KEY not set, generated new key: %s", key)
    return key


def verify_edit_key(candidate: str | None, expected: str) -> bool:
    if not candidate or not expected:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def _candidate_key(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials:
        return credentials.credentials
    # bare key without "Bearer " is accepted too
    raw = (request.headers.get("Authorization") or "").strip()
    return raw or None


async def require_edit_key(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> None:
    if not verify_edit_key(_candidate_key(request, credentials), request.app.state.edit_key):
        logger.warning("admin_auth_failed path=%s", request.url.path)
        raise HTTPException(status_code=401, detail="Invalid or missing Authorization header")
