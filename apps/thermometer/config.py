"""Конфигурация приложения."""
import logging
from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    port: int = 8080

    # Bearer key for /admin/*; generated at startup when empty
    thermometer_edit_key: str = ""

    # GCP_PROJECT set -> Firestore, otherwise in-memory
    gcp_project: str | None = None
    firestore_database: str = "(default)"
    firestore_collection: str = "thermometer_configs"
    firestore_document: str = "current_config"
    firestore_timeout_seconds: float = 10.0
    firestore_emulator_host: str | None = None
    firestore_access_token: str | None = None
    firestore_base_url: str = "https://firestore.googleapis.com/v1"

    default_organization_name: str = "Community Animal Rescue Effort"
    default_campaign_title: str = "Animal Shelter Donation Drive"

    max_upload_bytes: int = 10 * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
