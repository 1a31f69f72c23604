"""Runtime settings for the threads users server.

Values come from the environment; a ``.env`` file found from the working
directory upwards is loaded first so local runs pick up the same configuration
as the deployed container.
"""

from __future__ import annotations

import os
from typing import List

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

load_dotenv(find_dotenv(usecwd=True))


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _default_cors_origins() -> List[str]:
    """
    Origins allowed to call the API with credentials.

    ``CORE_CORS_ALLOW_ORIGINS`` (comma separated) wins; otherwise the web app's
    ``APP_BASE_URL`` is the only origin. With neither set, CORS stays off.
    """

    explicit = os.getenv("CORE_CORS_ALLOW_ORIGINS")
    if explicit:
        return _split_origins(explicit)
    return _split_origins(os.getenv("APP_BASE_URL", ""))


class CoreSettings(BaseModel):
    """Server metadata, log level and CORS origins."""

    api_title: str = "Threads Users API"
    api_version: str = "0.1.0"
    log_level: str = Field(
        default_factory=lambda: (os.getenv("LOG_LEVEL") or os.getenv("LOGURU_LEVEL") or "INFO").upper()
    )
    cors_allow_origins: List[str] = Field(default_factory=_default_cors_origins)


settings = CoreSettings()
