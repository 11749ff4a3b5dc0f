"""Зависимости FastAPI."""
from fastapi import Request

from apps.thermometer.services.config_store import ConfigStore


def get_store(request: Request) -> ConfigStore:
    return request.app.state.store
