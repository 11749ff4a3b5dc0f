"""Модели домена."""
from apps.thermometer.models.campaign import CampaignConfig, Team, default_campaign_config

__all__ = [
    "CampaignConfig",
    "Team",
    "default_campaign_config",
]
