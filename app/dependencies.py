import logging

import fastapi
import httpx

from app import config

logger = logging.getLogger(__name__)


def get_app_config() -> config.AppConfig:
    return config.get_config()


def get_http_client(request: fastapi.Request) -> httpx.AsyncClient:
    """Return the client created during application startup."""
    return request.app.state.http_client
