"""Admin JSON body -> CampaignConfig (full replace, timestamp stays server-managed)."""
from __future__ import annotations

from typing import Any

from apps.thermometer.errors import ValidationError
from apps.thermometer.models.campaign import CampaignConfig, Team, check_amount, check_text

_MISSING = object()


def _team_from_payload(raw: Any, index: int) -> Team:
    prefix = f"teams[{index}]"
    if not isinstance(raw, dict):
        raise ValidationError(prefix, "must be an object")
    if "name" not in raw:
        raise ValidationError(f"{prefix}.name", "field is required")
    if "total_raised" not in raw:
        raise ValidationError(f"{prefix}.total_raised", "field is required")
    image_url = raw.get("image_url")
    try:
        return Team(
            name=check_text(raw["name"], "name"),
            image_url=None if image_url is None else check_text(image_url, "image_url"),
            total_raised=check_amount(raw["total_raised"], "total_raised"),
        )
    except ValidationError as e:
        raise ValidationError(f"{prefix}.{e.field}", e.reason)


def config_from_payload(payload: Any, current: CampaignConfig) -> CampaignConfig:
    """Validate `payload` and build the replacement record.

    `organization_name` is optional and falls back to the current value.
    `title`, `goal` and `teams` are required. Any client-sent `last_updated`
    is dropped; the store stamps the commit time.
    """
    if not isinstance(payload, dict):
        raise ValidationError("body", "must be a JSON object")
    for key in ("title", "goal", "teams"):
        if key not in payload:
            raise ValidationError(key, "field is required")

    organization_name = payload.get("organization_name", _MISSING)
    if organization_name is _MISSING or organization_name is None:
        organization_name = current.organization_name
    teams_raw = payload["teams"]
    if not isinstance(teams_raw, list):
        raise ValidationError("teams", "must be a list")

    return CampaignConfig(
        organization_name=check_text(organization_name, "organization_name"),
        title=check_text(payload["title"], "title"),
        goal=check_amount(payload["goal"], "goal"),
        teams=tuple(_team_from_payload(t, i) for i, t in enumerate(teams_raw)),
        last_updated=current.last_updated,
    )
