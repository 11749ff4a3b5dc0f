"""Persistence backends for the campaign configuration record."""
from __future__ import annotations

import enum
import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any

from apps.thermometer.clients.firestore import FirestoreClient, is_document_missing
from apps.thermometer.errors import StorageUnavailable
from apps.thermometer.models.campaign import CampaignConfig
from apps.thermometer.services.firestore_document import decode_config, encode_config

logger = logging.getLogger(__name__)

COLLECTION_NAME = "thermometer_configs"
CONFIG_DOC_ID = "current_config"


class BackendKind(str, enum.Enum):
    IN_MEMORY = "memory"
    FIRESTORE = "firestore"


class ConfigBackend(ABC):
    """load/save of the single record.

    load() returns the default record when nothing was saved yet. A save()
    that returned is visible to every later load(). Concurrent saves are
    serialized: last commit wins.
    """

    kind: BackendKind

    @abstractmethod
    def load(self) -> CampaignConfig:
        pass

    @abstractmethod
    def save(self, config: CampaignConfig) -> None:
        pass

    def describe(self) -> dict[str, Any]:
        return {"backend": type(self).__name__}

    def close(self) -> None:
        pass


class InMemoryBackend(ConfigBackend):
    """Process-local record. Not durable: a restart resets it to `default`."""

    kind = BackendKind.IN_MEMORY

    def __init__(self, default: CampaignConfig) -> None:
        self._lock = threading.Lock()
        self._config = default
        logger.info("config_backend_memory %s", json.dumps({"durable": False}))

    def load(self) -> CampaignConfig:
        # CampaignConfig is frozen, handing out the held value is a read-only view
        with self._lock:
            return self._config

    def save(self, config: CampaignConfig) -> None:
        with self._lock:
            self._config = config

    def describe(self) -> dict[str, Any]:
        return {"backend": "memory", "durable": False}


class FirestoreBackend(ConfigBackend):
    """One Firestore document holds the whole record.

    No client-side lock: several replicas may write, each save is a single
    PATCH which Firestore applies atomically. No retries here either.
    """

    kind = BackendKind.FIRESTORE

    def __init__(
        self,
        client: FirestoreClient,
        default: CampaignConfig,
        *,
        collection: str = COLLECTION_NAME,
        doc_id: str = CONFIG_DOC_ID,
    ) -> None:
        self._client = client
        self._default = default
        self.collection = collection
        self.doc_id = doc_id
        logger.info(
            "config_backend_firestore %s",
            json.dumps({"project": client.project_id, "collection": collection, "doc_id": doc_id}),
        )

    def _log_ctx(self, **extra: Any) -> str:
        return json.dumps({"collection": self.collection, "doc_id": self.doc_id, **extra})

    def load(self) -> CampaignConfig:
        doc, status, err = self._client.get_document(self.collection, self.doc_id)
        if status == 404 and is_document_missing(doc, self.collection, self.doc_id):
            logger.debug("config_load_absent %s", self._log_ctx())
            return self._default
        if err:
            logger.warning("config_load_failed %s", self._log_ctx(status=status, error=err))
            raise StorageUnavailable(f"Firestore read failed: {err}", status_code=status or None)
        config = decode_config(doc)
        logger.debug("config_load_ok %s", self._log_ctx(teams=len(config.teams)))
        return config

    def save(self, config: CampaignConfig) -> None:
        _doc, status, err = self._client.patch_document(self.collection, self.doc_id, encode_config(config))
        if err:
            logger.warning("config_save_failed %s", self._log_ctx(status=status, error=err))
            raise StorageUnavailable(f"Firestore write failed: {err}", status_code=status or None)
        logger.debug("config_save_ok %s", self._log_ctx(teams=len(config.teams)))

    def describe(self) -> dict[str, Any]:
        return {
            "backend": "firestore",
            "durable": True,
            "project": self._client.project_id,
            "collection": self.collection,
            "doc_id": self.doc_id,
        }

    def close(self) -> None:
        self._client.close()
