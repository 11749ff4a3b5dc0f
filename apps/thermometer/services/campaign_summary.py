"""Derived campaign figures for public views."""
from __future__ import annotations

from typing import Any

from apps.thermometer.models.campaign import CampaignConfig


def total_raised(config: CampaignConfig) -> float:
    return sum((t.total_raised for t in config.teams), 0.0)


def percent_of_goal(config: CampaignConfig) -> float:
    """Fraction of the goal reached (1.0 = goal met). 0 when goal is 0."""
    if config.goal == 0:
        return 0.0
    return total_raised(config) / config.goal


def campaign_summary(config: CampaignConfig) -> dict[str, Any]:
    raised = total_raised(config)
    ratio = percent_of_goal(config)
    # progress bar width: percent, capped at 100, 2 decimals
    progress = round(min(ratio * 100.0, 100.0), 2)
    return {
        "organization_name": config.organization_name,
        "title": config.title,
        "total_raised": round(raised, 2),
        "goal": config.goal,
        "percent_of_goal": ratio,
        "progress_percent": progress,
        "team_count": len(config.teams),
        "last_updated": config.last_updated.isoformat(),
    }
