"""Async persistence layer for user profiles."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Optional

from db_core import DatabaseError, MongoDocument, ensure_connected, get_db
from loguru import logger
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from .errors import UserListError, UserReadError, UserWriteError
from .models import SortOrder, User, UserPage
from .revalidation import revalidate_after_profile_write

COLLECTION_NAME = "users"

DEFAULT_PAGE_SIZE = 20

_SORT_DIRECTIONS = {
    "asc": ASCENDING,
    "ascending": ASCENDING,
    1: ASCENDING,
    "desc": DESCENDING,
    "descending": DESCENDING,
    -1: DESCENDING,
}

DATASTORE_ERRORS = (PyMongoError, DatabaseError)


def _collection():
    return get_db()[COLLECTION_NAME]


def doc_to_user(doc: MongoDocument) -> User:
    return User(
        key=str(doc["_id"]),
        id=str(doc["id"]),
        username=doc.get("username") or "",
        name=doc.get("name") or "",
        bio=doc.get("bio"),
        image=doc.get("image"),
        onboarded=bool(doc.get("onboarded", False)),
        threads=[str(thread_id) for thread_id in doc.get("threads") or []],
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


def _sort_direction(sort_order: SortOrder) -> int:
    key = sort_order.lower() if isinstance(sort_order, str) else sort_order
    try:
        return _SORT_DIRECTIONS[key]
    except KeyError:
        raise ValueError(f"Unsupported sort order: {sort_order!r}") from None


def build_user_filter(caller_id: str, search_string: str = "") -> dict:
    """Filter excluding the caller, optionally matching a substring of username or name."""

    query: dict = {"id": {"$ne": caller_id}}
    term = search_string.strip()
    if term:
        pattern = re.escape(term)
        query["$or"] = [
            {"username": {"$regex": pattern, "$options": "i"}},
            {"name": {"$regex": pattern, "$options": "i"}},
        ]
    return query


async def upsert_user(
    user_id: str,
    username: str,
    name: str,
    bio: str,
    image: str,
    path: Optional[str] = None,
) -> None:
    """
    Create the user on first save, otherwise overwrite the profile fields.

    Every save marks the user as onboarded. When the save comes from the
    profile edit page, that page is revalidated after the write has committed;
    a failing revalidation hook is logged and does not fail the save.
    """

    await ensure_connected()
    now = datetime.now(UTC)
    try:
        await _collection().update_one(
            {"id": user_id},
            {
                "$set": {
                    "username": username.lower(),
                    "name": name,
                    "bio": bio,
                    "image": image,
                    "onboarded": True,
                    "updated_at": now,
                },
                "$setOnInsert": {"created_at": now, "threads": []},
            },
            upsert=True,
        )
    except DATASTORE_ERRORS as exc:
        logger.error("Failed to upsert user {user_id}: {error}", user_id=user_id, error=exc)
        raise UserWriteError(exc) from exc

    await revalidate_after_profile_write(path)


async def get_user(user_id: str) -> Optional[User]:
    """Return the user with the given external id, or ``None``."""

    await ensure_connected()
    try:
        doc = await _collection().find_one({"id": user_id})
    except DATASTORE_ERRORS as exc:
        raise UserReadError(exc) from exc
    return doc_to_user(doc) if doc else None


async def list_users(
    caller_id: str,
    search_string: str = "",
    page_number: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    sort_order: SortOrder = "desc",
) -> UserPage:
    """List users other than the caller, newest first by default."""

    if page_number < 1:
        raise ValueError("page_number must be >= 1")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    direction = _sort_direction(sort_order)

    await ensure_connected()
    skip_amount = (page_number - 1) * page_size
    query = build_user_filter(caller_id, search_string)
    try:
        collection = _collection()
        total = await collection.count_documents(query)
        cursor = (
            collection.find(query)
            .sort([("created_at", direction), ("_id", direction)])
            .skip(skip_amount)
            .limit(page_size)
        )
        docs = [doc async for doc in cursor]
    except DATASTORE_ERRORS as exc:
        raise UserListError(exc) from exc

    users = [doc_to_user(doc) for doc in docs]
    return UserPage(users=users, has_next=total > skip_amount + len(users))
