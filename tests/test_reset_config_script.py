"""Operator reset script."""
import json

from apps.thermometer.config import Settings
from apps.thermometer.services.config_store import create_store
from scripts import reset_config


def _patch_store(monkeypatch):
    store = create_store(Settings(_env_file=None, gcp_project=None))
    store.replace_config({"title": "Live", "goal": 5, "teams": [{"name": "A", "total_raised": 1}]})
    monkeypatch.setattr(reset_config, "create_store", lambda settings: store)
    return store


def test_show_prints_current_record(monkeypatch, capsys):
    _patch_store(monkeypatch)
    assert reset_config.main(["--show"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["title"] == "Live"


def test_reset_with_yes(monkeypatch, capsys):
    store = _patch_store(monkeypatch)
    assert reset_config.main(["--yes"]) == 0
    assert store.get_config().teams == ()
    assert store.get_config().title == "Animal Shelter Donation Drive"


def test_reset_aborts_without_confirmation(monkeypatch):
    store = _patch_store(monkeypatch)
    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    assert reset_config.main([]) == 1
    assert store.get_config().title == "Live"
