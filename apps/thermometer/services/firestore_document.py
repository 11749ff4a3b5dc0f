"""CampaignConfig <-> Firestore document fields (typed Value JSON).

Every field is mapped explicitly. Unknown document fields are ignored on
read; missing or wrongly typed known fields raise DocumentDecodeError.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

from apps.thermometer.errors import DocumentDecodeError, ValidationError
from apps.thermometer.models.campaign import CampaignConfig, Team

_TS_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(?P<frac>\d+))?(?P<tz>Z|[+-]\d{2}:\d{2})$"
)


def format_timestamp(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_timestamp(raw: str) -> datetime:
    """RFC 3339 as Firestore returns it (nanosecond fraction is cut to micros)."""
    m = _TS_RE.match(raw.strip())
    if not m:
        raise ValueError(f"bad timestamp {raw[:40]!r}")
    frac = (m.group("frac") or "0")[:6].ljust(6, "0")
    tz = m.group("tz")
    tz = "+00:00" if tz == "Z" else tz
    return datetime.fromisoformat(f"{m.group('base')}.{frac}{tz}").astimezone(timezone.utc)


def _string(value: str) -> dict:
    return {"stringValue": value}


def _double(value: float) -> dict:
    return {"doubleValue": value}


def _encode_team(team: Team) -> dict:
    return {
        "mapValue": {
            "fields": {
                "name": _string(team.name),
                "image_url": {"nullValue": None} if team.image_url is None else _string(team.image_url),
                "total_raised": _double(team.total_raised),
            }
        }
    }


def encode_config(config: CampaignConfig) -> dict[str, Any]:
    return {
        "organization_name": _string(config.organization_name),
        "title": _string(config.title),
        "goal": _double(config.goal),
        "teams": {"arrayValue": {"values": [_encode_team(t) for t in config.teams]}},
        "last_updated": {"timestampValue": format_timestamp(config.last_updated)},
    }


def _field(fields: dict, name: str, path: str) -> dict:
    value = fields.get(name)
    if not isinstance(value, dict):
        raise DocumentDecodeError(path, "field is missing")
    return value


def _read_string(fields: dict, name: str, path: str) -> str:
    value = _field(fields, name, path)
    if "stringValue" not in value or not isinstance(value["stringValue"], str):
        raise DocumentDecodeError(path, "expected stringValue")
    return value["stringValue"]


def _read_optional_string(fields: dict, name: str, path: str) -> str | None:
    value = fields.get(name)
    if value is None or (isinstance(value, dict) and "nullValue" in value):
        return None
    return _read_string(fields, name, path)


def _read_number(fields: dict, name: str, path: str) -> float:
    value = _field(fields, name, path)
    if "doubleValue" in value:
        raw = value["doubleValue"]
        # NaN/Infinity arrive as strings; domain validation rejects them later
        if isinstance(raw, str) and raw in ("NaN", "Infinity", "-Infinity"):
            return float(raw.lower().replace("infinity", "inf"))
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise DocumentDecodeError(path, "doubleValue is not a number")
        return float(raw)
    if "integerValue" in value:
        try:
            return float(int(value["integerValue"]))
        except (TypeError, ValueError):
            raise DocumentDecodeError(path, "integerValue is not an integer")
    raise DocumentDecodeError(path, "expected doubleValue or integerValue")


def _decode_team(value: Any, index: int) -> Team:
    path = f"teams[{index}]"
    fields = value.get("mapValue", {}).get("fields") if isinstance(value, dict) else None
    if not isinstance(fields, dict):
        raise DocumentDecodeError(path, "expected mapValue")
    try:
        return Team(
            name=_read_string(fields, "name", f"{path}.name"),
            image_url=_read_optional_string(fields, "image_url", f"{path}.image_url"),
            total_raised=_read_number(fields, "total_raised", f"{path}.total_raised"),
        )
    except ValidationError as e:
        raise DocumentDecodeError(f"{path}.{e.field}", e.reason)


def decode_config(document: dict) -> CampaignConfig:
    fields = document.get("fields") if isinstance(document, dict) else None
    if not isinstance(fields, dict):
        raise DocumentDecodeError("fields", "document has no fields")

    teams_value = _field(fields, "teams", "teams")
    if "arrayValue" not in teams_value or not isinstance(teams_value["arrayValue"], dict):
        raise DocumentDecodeError("teams", "expected arrayValue")
    # empty arrays come back as {"arrayValue": {}}
    raw_teams = teams_value["arrayValue"].get("values") or []
    if not isinstance(raw_teams, list):
        raise DocumentDecodeError("teams", "arrayValue.values is not a list")

    ts_value = _field(fields, "last_updated", "last_updated")
    if not isinstance(ts_value.get("timestampValue"), str):
        raise DocumentDecodeError("last_updated", "expected timestampValue")
    try:
        last_updated = parse_timestamp(ts_value["timestampValue"])
    except ValueError as e:
        raise DocumentDecodeError("last_updated", str(e))

    try:
        return CampaignConfig(
            organization_name=_read_string(fields, "organization_name", "organization_name"),
            title=_read_string(fields, "title", "title"),
            goal=_read_number(fields, "goal", "goal"),
            teams=tuple(_decode_team(v, i) for i, v in enumerate(raw_teams)),
            last_updated=last_updated,
        )
    except ValidationError as e:
        raise DocumentDecodeError(e.field, e.reason)
