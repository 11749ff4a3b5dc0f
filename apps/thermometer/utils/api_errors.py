"""Unified API error envelope."""
from __future__ import annotations

from typing import Any


def error_envelope(
    *,
    code: str,
    message: str,
    trace_id: str,
    detail: str | None = None,
    legacy_error: bool = True,
    **extra: Any,
) -> dict:
    out = {
        "code": code,
        "message": message,
        "trace_id": trace_id,
    }
    if detail:
        out["detail"] = detail
    # error location (field / row / column) for admin forms
    for k, v in extra.items():
        if v is not None:
            out[k] = v
    # Backward compatibility: admin page reads `error`.
    if legacy_error:
        out["error"] = code
    return out
