"""Тесты health endpoints."""
import pytest
from fastapi.testclient import TestClient

from apps.thermometer.config import Settings
from apps.thermometer.errors import StorageUnavailable
from apps.thermometer.main import create_app
from apps.thermometer.services.backends import BackendKind, ConfigBackend
from apps.thermometer.services.config_store import ConfigStore, create_store


class _DownBackend(ConfigBackend):
    kind = BackendKind.FIRESTORE

    def load(self):
        raise StorageUnavailable("Firestore read failed: timeout")

    def save(self, config):
        raise StorageUnavailable("Firestore write failed: timeout")


@pytest.fixture
def client():
    settings = Settings(_env_file=None, thermometer_edit_key="k", gcp_project=None)
    return TestClient(create_app(settings, create_store(settings)))


def test_health(client: TestClient):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"


def test_ready_reports_backend(client: TestClient):
    r = client.get("/ready")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["backend"] == "memory"
    assert data["durable"] is False


def test_ready_503_when_storage_down():
    settings = Settings(_env_file=None, thermometer_edit_key="k", gcp_project=None)
    app = create_app(settings, ConfigStore(_DownBackend()))
    r = TestClient(app).get("/ready")
    assert r.status_code == 503
    data = r.json()
    assert data["status"] == "error"
    assert data["code"] == "storage_unavailable"
    assert r.headers.get("X-Trace-Id")


def test_lifespan_logs_kind_of_passed_backend(caplog):
    settings = Settings(_env_file=None, thermometer_edit_key="k", gcp_project=None)
    with caplog.at_level("INFO", logger="apps.thermometer.main"):
        with TestClient(create_app(settings, ConfigStore(_DownBackend()))):
            pass
    assert "backend=firestore" in caplog.text
