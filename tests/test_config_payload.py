"""Admin JSON body validation."""
from datetime import datetime, timezone

import pytest

from apps.thermometer.errors import ValidationError
from apps.thermometer.models.campaign import CampaignConfig, Team
from apps.thermometer.services.config_payload import config_from_payload

CURRENT = CampaignConfig(
    organization_name="Community Animal Rescue Effort",
    title="Old",
    goal=10.0,
    teams=(Team(name="Old Team", total_raised=1.0),),
    last_updated=datetime(2025, 1, 1, tzinfo=timezone.utc),
)


def _payload(**overrides):
    base = {
        "title": "2025 Spring Fundraiser",
        "goal": 25000.0,
        "teams": [{"name": "Test Team", "image_url": None, "total_raised": 5000.0}],
    }
    base.update(overrides)
    return base


def test_full_replace_keeps_organization_when_absent():
    config = config_from_payload(_payload(), CURRENT)
    assert config.organization_name == CURRENT.organization_name
    assert config.title == "2025 Spring Fundraiser"
    assert config.goal == 25000.0
    assert config.teams == (Team(name="Test Team", total_raised=5000.0),)


def test_organization_name_can_be_set_or_emptied():
    assert config_from_payload(_payload(organization_name="New Org"), CURRENT).organization_name == "New Org"
    assert config_from_payload(_payload(organization_name=""), CURRENT).organization_name == ""


def test_client_last_updated_is_ignored():
    config = config_from_payload(_payload(last_updated="2099-01-01T00:00:00Z"), CURRENT)
    assert config.last_updated == CURRENT.last_updated


def test_integer_amounts_accepted():
    config = config_from_payload(_payload(goal=100, teams=[{"name": "A", "total_raised": 3}]), CURRENT)
    assert config.goal == 100.0
    assert config.teams[0].total_raised == 3.0
    assert config.teams[0].image_url is None


@pytest.mark.parametrize("key", ["title", "goal", "teams"])
def test_required_fields(key):
    body = _payload()
    del body[key]
    with pytest.raises(ValidationError) as exc:
        config_from_payload(body, CURRENT)
    assert exc.value.field == key


@pytest.mark.parametrize("goal", [-5, "100", None, True, float("inf")])
def test_bad_goal(goal):
    with pytest.raises(ValidationError) as exc:
        config_from_payload(_payload(goal=goal), CURRENT)
    assert exc.value.field == "goal"


@pytest.mark.parametrize(
    "team,field",
    [
        ({"name": "", "total_raised": 1}, "teams[1].name"),
        ({"total_raised": 1}, "teams[1].name"),
        ({"name": "B"}, "teams[1].total_raised"),
        ({"name": "B", "total_raised": -1}, "teams[1].total_raised"),
        ({"name": "B", "total_raised": "1"}, "teams[1].total_raised"),
        ({"name": "B", "total_raised": 1, "image_url": 42}, "teams[1].image_url"),
        ("not a team", "teams[1]"),
    ],
)
def test_bad_team_entries_name_the_field(team, field):
    body = _payload(teams=[{"name": "A", "total_raised": 1}, team])
    with pytest.raises(ValidationError) as exc:
        config_from_payload(body, CURRENT)
    assert exc.value.field == field


def test_teams_must_be_list_and_body_must_be_object():
    with pytest.raises(ValidationError) as exc:
        config_from_payload(_payload(teams={"name": "A"}), CURRENT)
    assert exc.value.field == "teams"
    with pytest.raises(ValidationError) as exc:
        config_from_payload([1, 2], CURRENT)
    assert exc.value.field == "body"
