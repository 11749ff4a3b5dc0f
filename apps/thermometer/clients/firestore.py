"""Firestore REST v1 client (single document get / upsert)."""
from __future__ import annotations

import json
import logging
import threading
import time
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://firestore.googleapis.com/v1"
METADATA_TOKEN_URL = (
    "http://metadata.google.internal/computeMetadata/v1/instance/service-accounts/default/token"
)
# refresh metadata token this many seconds before it expires
TOKEN_EXPIRY_MARGIN = 60

ERR_TIMEOUT = "timeout"
ERR_CONNECTION = "connection_error"
ERR_AUTH = "auth_failed"
ERR_TOKEN = "token_unavailable"
ERR_RATE_LIMITED = "rate_limited"
ERR_BAD_RESPONSE = "bad_response"


def _normalize_err(err: str) -> str:
    if not err:
        return ERR_CONNECTION
    low = err.lower()
    if "timed out" in low or "timeout" in low:
        return ERR_TIMEOUT
    if "certificate verify failed" in low:
        return "ssl_verify_failed"
    return err[:200]


def _status_err(status: int, payload: dict) -> str:
    if status in (401, 403):
        return ERR_AUTH
    if status == 429:
        return ERR_RATE_LIMITED
    err = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(err, dict) and err.get("status"):
        return f"http_{status}_{err['status'].lower()}"
    return f"http_{status}"


def is_document_missing(payload: dict, collection: str, doc_id: str) -> bool:
    """True when a 404 body names the document itself.

    A missing database or project also answers 404 NOT_FOUND, only the message
    tells them apart.
    """
    err = payload.get("error") if isinstance(payload, dict) else None
    message = err.get("message") if isinstance(err, dict) else None
    if not isinstance(message, str):
        return False
    return f"documents/{collection}/{doc_id}" in message


class FirestoreClient:
    """Thin wrapper over the documents endpoint of one project/database.

    Methods return (payload, status, err) and never raise: status 0 means the
    request did not reach the server, err is None on success.
    """

    def __init__(
        self,
        project_id: str,
        *,
        database: str = "(default)",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        emulator_host: str | None = None,
        access_token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.project_id = project_id
        self.database = database
        self.emulator = bool(emulator_host)
        if emulator_host:
            base_url = f"http://{emulator_host.strip().rstrip('/')}/v1"
        self.base_url = base_url.rstrip("/")
        self._static_token = (access_token or "").strip() or None
        self._http = httpx.Client(timeout=timeout, transport=transport)
        self._token: str | None = None
        self._token_expires_at = 0.0
        self._token_lock = threading.Lock()

    def close(self) -> None:
        self._http.close()

    def document_url(self, collection: str, doc_id: str) -> str:
        return (
            f"{self.base_url}/projects/{quote(self.project_id, safe='')}"
            f"/databases/{quote(self.database, safe='()')}"
            f"/documents/{quote(collection, safe='')}/{quote(doc_id, safe='')}"
        )

    def _metadata_token(self) -> tuple[str | None, str | None]:
        with self._token_lock:
            if self._token and time.time() < self._token_expires_at - TOKEN_EXPIRY_MARGIN:
                return self._token, None
            try:
                r = self._http.get(METADATA_TOKEN_URL, headers={"Metadata-Flavor": "Google"})
            except httpx.HTTPError as e:
                logger.warning("firestore_token_request_error %s", json.dumps({"error": _normalize_err(str(e))}))
                return None, ERR_TOKEN
            if r.status_code >= 400:
                logger.warning("firestore_token_request_failed %s", json.dumps({"status": r.status_code}))
                return None, ERR_TOKEN
            try:
                data = r.json()
            except ValueError:
                return None, ERR_TOKEN
            token = data.get("access_token") if isinstance(data, dict) else None
            if not token:
                return None, ERR_TOKEN
            self._token = token
            self._token_expires_at = time.time() + int(data.get("expires_in") or 3600)
            return token, None

    def _headers(self) -> tuple[dict[str, str], str | None]:
        headers = {"Accept": "application/json"}
        if self.emulator:
            # emulator accepts any bearer; "owner" bypasses security rules
            headers["Authorization"] = "Bearer owner"
            return headers, None
        token = self._static_token
        if not token:
            token, err = self._metadata_token()
            if err:
                return headers, err
        headers["Authorization"] = f"Bearer {token}"
        return headers, None

    def _request(self, method: str, url: str, *, json_body: dict | None = None) -> tuple[dict | None, int, str | None]:
        headers, err = self._headers()
        if err:
            return None, 0, err
        try:
            r = self._http.request(method, url, headers=headers, json=json_body)
        except httpx.TimeoutException:
            return None, 0, ERR_TIMEOUT
        except httpx.HTTPError as e:
            return None, 0, _normalize_err(str(e))
        try:
            payload = r.json() if r.content else {}
        except ValueError:
            payload = {}
        if r.status_code >= 400:
            return payload if isinstance(payload, dict) else None, r.status_code, _status_err(r.status_code, payload)
        if not isinstance(payload, dict):
            return None, r.status_code, ERR_BAD_RESPONSE
        return payload, r.status_code, None

    def get_document(self, collection: str, doc_id: str) -> tuple[dict | None, int, str | None]:
        """Document JSON; (None, 404, "http_404_not_found") when absent."""
        return self._request("GET", self.document_url(collection, doc_id))

    def patch_document(self, collection: str, doc_id: str, fields: dict) -> tuple[dict | None, int, str | None]:
        """Create or fully overwrite the document (no updateMask)."""
        return self._request("PATCH", self.document_url(collection, doc_id), json_body={"fields": fields})
