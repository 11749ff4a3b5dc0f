"""Store facade: the only way the app reads or writes the campaign record."""
from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

import httpx

from apps.thermometer.clients.firestore import FirestoreClient
from apps.thermometer.config import Settings
from apps.thermometer.models.campaign import CampaignConfig, Team, default_campaign_config
from apps.thermometer.services.backends import BackendKind, ConfigBackend, FirestoreBackend, InMemoryBackend
from apps.thermometer.services.config_payload import config_from_payload

logger = logging.getLogger(__name__)

Mutator = Callable[[CampaignConfig], CampaignConfig]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConfigStore:
    """Serialized read-modify-write over one backend.

    The backend is fixed for the lifetime of the store. Validation happens in
    the mutator, before save(); a failing save() leaves the previous record
    authoritative and the error propagates unchanged.
    """

    def __init__(
        self,
        backend: ConfigBackend,
        *,
        default: CampaignConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.backend = backend
        self.kind: BackendKind = backend.kind
        self._default = default
        self._clock = clock
        self._write_lock = threading.Lock()

    def get_config(self) -> CampaignConfig:
        return self.backend.load()

    def apply_update(self, mutator: Mutator) -> CampaignConfig:
        with self._write_lock:
            current = self.backend.load()
            candidate = mutator(current)
            if not isinstance(candidate, CampaignConfig):
                raise TypeError(f"mutator returned {type(candidate).__name__}, expected CampaignConfig")
            stamped = candidate.replace(last_updated=max(self._clock(), current.last_updated))
            self.backend.save(stamped)
        logger.info(
            "config_saved %s",
            json.dumps({"backend": self.kind.value, "teams": len(stamped.teams), "goal": stamped.goal}),
        )
        return stamped

    def replace_teams(self, teams: Iterable[Team]) -> CampaignConfig:
        """CSV path: swap the whole team list, keep everything else."""
        new_teams = tuple(teams)
        return self.apply_update(lambda current: current.replace(teams=new_teams))

    def replace_config(self, payload: Any) -> CampaignConfig:
        """JSON path: validate `payload` against the current record and replace it."""
        return self.apply_update(lambda current: config_from_payload(payload, current))

    def reset(self) -> CampaignConfig:
        if self._default is None:
            raise RuntimeError("store has no default record configured")
        default = self._default
        return self.apply_update(lambda _current: default)

    def describe(self) -> dict[str, Any]:
        return self.backend.describe()

    def close(self) -> None:
        self.backend.close()


def select_backend_kind(settings: Settings) -> BackendKind:
    if (settings.gcp_project or "").strip():
        return BackendKind.FIRESTORE
    return BackendKind.IN_MEMORY


def create_store(settings: Settings, *, transport: httpx.BaseTransport | None = None) -> ConfigStore:
    """Build the store once at startup from settings."""
    default = default_campaign_config(settings.default_organization_name, settings.default_campaign_title)
    kind = select_backend_kind(settings)
    if kind is BackendKind.FIRESTORE:
        project = settings.gcp_project.strip()
        logger.info("config_store_init %s", json.dumps({"backend": kind.value, "project": project}))
        client = FirestoreClient(
            project,
            database=settings.firestore_database,
            base_url=settings.firestore_base_url,
            timeout=settings.firestore_timeout_seconds,
            emulator_host=settings.firestore_emulator_host,
            access_token=settings.firestore_access_token,
            transport=transport,
        )
        backend: ConfigBackend = FirestoreBackend(
            client,
            default,
            collection=settings.firestore_collection,
            doc_id=settings.firestore_document,
        )
    else:
        logger.info("config_store_init %s", json.dumps({"backend": kind.value}))
        backend = InMemoryBackend(default)
    return ConfigStore(backend, default=default)
