"""Async MongoDB helpers built on top of Motor.

One Motor client is shared by the whole process. ``ensure_connected`` is cheap
to call before every operation: after the first successful ping it returns
immediately. Domain repositories import these helpers and build their own
queries on top."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from .errors import DatabaseConnectionError, DatabaseNotConfiguredError
from .settings import settings

_client: Optional[AsyncIOMotorClient] = None
_connected = False
_connect_task: Optional[asyncio.Task] = None


def get_mongo_client() -> AsyncIOMotorClient:
    """Return the shared Motor client, creating it from ``db_core.settings``."""

    global _client
    if _client is None:
        if not settings.uri:
            raise DatabaseNotConfiguredError("MongoDB URL not configured (MONGODB_URL)")
        _client = AsyncIOMotorClient(
            settings.uri,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
        )
    return _client


def get_db() -> AsyncIOMotorDatabase:
    """Return the main application database defined by ``settings.db_name``."""

    client = get_mongo_client()
    return client[settings.db_name]


def is_connected() -> bool:
    return _connected


async def _ping_server() -> None:
    global _connected
    try:
        await get_mongo_client().admin.command("ping")
    except PyMongoError as exc:
        logger.error("MongoDB connection failed: {error}", error=exc)
        raise
    _connected = True
    logger.info("MongoDB connected to db_name={}", settings.db_name)


def _forget_attempt(task: asyncio.Task) -> None:
    global _connect_task
    if _connect_task is task:
        _connect_task = None


async def ensure_connected(*, raise_on_error: bool = False) -> None:
    """
    Establish the shared connection once per process.

    - No URL configured: log and return, callers fail later at query time.
    - Already connected: return immediately.
    - Otherwise every concurrent caller awaits the same in-flight ping, so an
      unreachable server costs one timeout, not one per waiting caller. The
      attempt is forgotten once it settles and the next call tries again.
    - Connection failure: logged and swallowed unless ``raise_on_error`` is set,
      in which case it is raised as ``DatabaseConnectionError``.
    """

    global _connect_task
    if not settings.uri:
        logger.warning("MongoDB URL not found, skipping connection")
        return

    if _connected:
        logger.debug("MongoDB connection already established")
        return

    if _connect_task is None:
        _connect_task = asyncio.ensure_future(_ping_server())
        _connect_task.add_done_callback(_forget_attempt)
    try:
        # Shielded so one cancelled request does not abort the shared attempt.
        await asyncio.shield(_connect_task)
    except PyMongoError as exc:
        if raise_on_error:
            raise DatabaseConnectionError(str(exc)) from exc


async def close_connection() -> None:
    """Close the shared client and forget the connected state."""

    global _client, _connected, _connect_task
    if _connect_task is not None:
        _connect_task.cancel()
        _connect_task = None
    if _client is not None:
        _client.close()
        logger.info("MongoDB connection closed")
    _client = None
    _connected = False



async def ping() -> dict[str, Any]:
    """Run a simple ``ping`` command against the configured MongoDB server."""

    db = get_db()
    await db.command("ping")
    return {"ok": True}
