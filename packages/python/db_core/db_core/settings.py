"""Configuration helpers for MongoDB connections used by db_core.

Applications can assign attributes on ``db_core.settings`` at startup, before the
first call to ``ensure_connected`` or ``get_db``, to override the defaults. If
not overridden, the values below are read from the environment.
"""
from loguru import logger
import os
from typing import Optional

from pydantic import BaseModel, Field


def _default_uri() -> Optional[str]:
    return os.getenv("MONGODB_URL") or os.getenv("MONGO_URI") or None


class MongoSettings(BaseModel):
    """Basic MongoDB configuration shared by the user and thread repositories."""

    uri: Optional[str] = Field(default_factory=_default_uri)
    db_name: str = Field(default_factory=lambda: os.getenv("MONGO_DB_NAME", "threads"))
    server_selection_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))
    )


def _default_settings() -> "MongoSettings":
    return MongoSettings()


settings: MongoSettings = _default_settings()
logger.info(
    "MongoSettings initialized with db_name={} uri_configured={}",
    settings.db_name,
    settings.uri is not None,
)
