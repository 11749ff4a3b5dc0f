"""Campaign configuration record and its team entries."""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace as dc_replace
from datetime import datetime, timezone
from typing import Any

from apps.thermometer.errors import ValidationError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def check_amount(value: Any, field_name: str) -> float:
    """Non-negative finite number -> float. bool is rejected (it is an int subclass)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(field_name, "must be a number")
    try:
        amount = float(value)
    except OverflowError:
        raise ValidationError(field_name, "number is too large")
    if not math.isfinite(amount):
        raise ValidationError(field_name, "must be a finite number")
    if amount < 0:
        raise ValidationError(field_name, "must be non-negative")
    return amount


def check_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(field_name, "must be a string")
    return value


@dataclass(frozen=True)
class Team:
    name: str
    total_raised: float
    image_url: str | None = None

    def __post_init__(self) -> None:
        name = check_text(self.name, "name").strip()
        if not name:
            raise ValidationError("name", "must not be empty")
        image_url = self.image_url
        if image_url is not None:
            image_url = check_text(image_url, "image_url").strip() or None
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "image_url", image_url)
        object.__setattr__(self, "total_raised", check_amount(self.total_raised, "total_raised"))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "image_url": self.image_url, "total_raised": self.total_raised}


@dataclass(frozen=True)
class CampaignConfig:
    organization_name: str
    title: str
    goal: float
    teams: tuple[Team, ...] = ()
    last_updated: datetime = field(default=EPOCH)

    def __post_init__(self) -> None:
        check_text(self.organization_name, "organization_name")
        check_text(self.title, "title")
        object.__setattr__(self, "goal", check_amount(self.goal, "goal"))
        teams = tuple(self.teams)
        for i, team in enumerate(teams):
            if not isinstance(team, Team):
                raise ValidationError(f"teams[{i}]", "must be a team entry")
        object.__setattr__(self, "teams", teams)
        ts = self.last_updated
        if not isinstance(ts, datetime):
            raise ValidationError("last_updated", "must be a datetime")
        # naive timestamps are treated as UTC
        ts = ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts.astimezone(timezone.utc)
        object.__setattr__(self, "last_updated", ts)

    def replace(self, **changes: Any) -> "CampaignConfig":
        """New validated copy with `changes` applied."""
        return dc_replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "organization_name": self.organization_name,
            "title": self.title,
            "goal": self.goal,
            "teams": [t.to_dict() for t in self.teams],
            "last_updated": self.last_updated.isoformat(),
        }


def default_campaign_config(organization_name: str, title: str) -> CampaignConfig:
    """Empty record served before the first admin write."""
    return CampaignConfig(
        organization_name=organization_name,
        title=title,
        goal=0.0,
        teams=(),
        last_updated=EPOCH,
    )
