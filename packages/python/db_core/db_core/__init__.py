"""Shared MongoDB connection handling for the threads application.

Example usage in a domain repository:

    from db_core import ensure_connected, get_db

    async def find_user(user_id: str):
        await ensure_connected()
        return await get_db()["users"].find_one({"id": user_id})
"""

from .errors import DatabaseConnectionError, DatabaseError, DatabaseNotConfiguredError
from .settings import MongoSettings, settings
from .mongo import close_connection, ensure_connected, get_db, get_mongo_client, is_connected, ping
from .typing import MongoDocument, StorageKey, as_storage_key

__all__ = [
    "MongoSettings",
    "settings",
    "DatabaseError",
    "DatabaseNotConfiguredError",
    "DatabaseConnectionError",
    "ensure_connected",
    "close_connection",
    "is_connected",
    "get_mongo_client",
    "get_db",
    "ping",
    "MongoDocument",
    "StorageKey",
    "as_storage_key",
]
