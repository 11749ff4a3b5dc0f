"""CampaignConfig / Team construction rules."""
from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from apps.thermometer.errors import ValidationError
from apps.thermometer.models.campaign import EPOCH, CampaignConfig, Team, default_campaign_config


def _config(**overrides):
    base = dict(organization_name="Rescue", title="Drive", goal=1000.0, teams=())
    base.update(overrides)
    return CampaignConfig(**base)


def test_team_normalizes_name_and_empty_image_url():
    team = Team(name="  Team A ", image_url="  ", total_raised=10)
    assert team.name == "Team A"
    assert team.image_url is None
    assert team.total_raised == 10.0
    assert isinstance(team.total_raised, float)


@pytest.mark.parametrize("name", ["", "   "])
def test_team_rejects_empty_name(name):
    with pytest.raises(ValidationError) as exc:
        Team(name=name, total_raised=1.0)
    assert exc.value.field == "name"


@pytest.mark.parametrize("amount", [-0.01, float("nan"), float("inf"), "12", True, None])
def test_team_rejects_bad_amount(amount):
    with pytest.raises(ValidationError) as exc:
        Team(name="A", total_raised=amount)
    assert exc.value.field == "total_raised"


def test_config_rejects_negative_goal():
    with pytest.raises(ValidationError) as exc:
        _config(goal=-5)
    assert exc.value.field == "goal"
    assert "non-negative" in exc.value.reason


def test_config_rejects_non_team_entries():
    with pytest.raises(ValidationError) as exc:
        _config(teams=({"name": "A", "total_raised": 1},))
    assert exc.value.field == "teams[0]"


def test_config_keeps_team_order_and_is_immutable():
    teams = [Team(name="B", total_raised=1), Team(name="A", total_raised=2)]
    config = _config(teams=teams)
    assert [t.name for t in config.teams] == ["B", "A"]
    assert isinstance(config.teams, tuple)
    with pytest.raises(FrozenInstanceError):
        config.goal = 5  # type: ignore[misc]


def test_duplicate_team_names_are_allowed():
    config = _config(teams=[Team(name="A", total_raised=1), Team(name="A", total_raised=2)])
    assert len(config.teams) == 2


def test_last_updated_normalized_to_utc():
    naive = datetime(2025, 3, 1, 12, 0, 0)
    assert _config(last_updated=naive).last_updated == datetime(2025, 3, 1, 12, tzinfo=timezone.utc)
    plus3 = datetime(2025, 3, 1, 15, 0, 0, tzinfo=timezone(timedelta(hours=3)))
    assert _config(last_updated=plus3).last_updated.tzinfo == timezone.utc
    assert _config(last_updated=plus3).last_updated.hour == 12


def test_replace_revalidates():
    config = _config()
    assert config.replace(goal=5).goal == 5.0
    with pytest.raises(ValidationError):
        config.replace(goal=-1)


def test_default_record():
    config = default_campaign_config("Org", "Title")
    assert config.organization_name == "Org"
    assert config.goal == 0.0
    assert config.teams == ()
    assert config.last_updated == EPOCH


def test_to_dict_shape():
    config = _config(teams=[Team(name="A", image_url="https://x/y.png", total_raised=5)])
    data = config.to_dict()
    assert data["teams"] == [{"name": "A", "image_url": "https://x/y.png", "total_raised": 5.0}]
    assert data["last_updated"].startswith("1970-01-01T00:00:00")
