"""Queries joining users with the threads they author or receive replies on.

Threads are owned by the posting subsystem; this module only reads them.
``author`` on a thread holds the author's internal user key and ``children``
holds the keys of reply threads.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from db_core import MongoDocument, StorageKey, as_storage_key, ensure_connected, get_db
from loguru import logger

from .errors import UserActivityError, UserContentError
from .models import ActivityItem, AuthoredThread, AuthorSummary, ThreadReply, UserThreads
from .users import COLLECTION_NAME as USERS_COLLECTION, DATASTORE_ERRORS, doc_to_user

THREADS_COLLECTION = "threads"

_AUTHOR_PROJECTION = {"name": 1, "image": 1, "id": 1}


def _threads():
    return get_db()[THREADS_COLLECTION]


def _users():
    return get_db()[USERS_COLLECTION]


def _optional_str(value) -> Optional[str]:
    return str(value) if value is not None else None


def _dedupe(values: Iterable[StorageKey]) -> List[StorageKey]:
    seen: set = set()
    result: List[StorageKey] = []
    for value in values:
        if value is None or value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


async def _find_threads(keys: List[StorageKey]) -> Dict[StorageKey, MongoDocument]:
    if not keys:
        return {}
    cursor = _threads().find({"_id": {"$in": keys}})
    return {doc["_id"]: doc async for doc in cursor}


async def _author_summaries(keys: Iterable[StorageKey]) -> Dict[StorageKey, AuthorSummary]:
    """Resolve author keys to ``{name, image, id}`` summaries in one query."""

    wanted = _dedupe(keys)
    if not wanted:
        return {}
    cursor = _users().find({"_id": {"$in": wanted}}, _AUTHOR_PROJECTION)
    return {
        doc["_id"]: AuthorSummary(
            key=str(doc["_id"]),
            id=_optional_str(doc.get("id")),
            name=doc.get("name"),
            image=doc.get("image"),
        )
        async for doc in cursor
    }


def _reply_model(doc: MongoDocument, authors: Dict[StorageKey, AuthorSummary]) -> ThreadReply:
    return ThreadReply(
        key=str(doc["_id"]),
        text=doc.get("text"),
        author=authors.get(doc.get("author")),
        parent_id=_optional_str(doc.get("parent_id")),
        children=[str(child) for child in doc.get("children") or []],
        created_at=doc.get("created_at"),
    )


async def get_authored_content(user_id: str) -> Optional[UserThreads]:
    """
    Return the user (by external id) with their threads resolved.

    Threads keep the order stored on the user. Each thread's replies are
    resolved one level deep, with reply authors reduced to summaries.
    """

    await ensure_connected()
    try:
        user_doc = await _users().find_one({"id": user_id})
        if not user_doc:
            return None

        thread_keys = _dedupe(user_doc.get("threads") or [])
        thread_docs = await _find_threads(thread_keys)

        child_keys = _dedupe(
            child
            for key in thread_keys
            if key in thread_docs
            for child in thread_docs[key].get("children") or []
        )
        child_docs = await _find_threads(child_keys)
        authors = await _author_summaries(doc.get("author") for doc in child_docs.values())
    except DATASTORE_ERRORS as exc:
        logger.error("Failed to fetch threads of user {user_id}: {error}", user_id=user_id, error=exc)
        raise UserContentError(exc) from exc

    threads: List[AuthoredThread] = []
    for key in thread_keys:
        doc = thread_docs.get(key)
        if doc is None:
            continue
        threads.append(
            AuthoredThread(
                key=str(doc["_id"]),
                text=doc.get("text"),
                author=_optional_str(doc.get("author")),
                parent_id=_optional_str(doc.get("parent_id")),
                children=[
                    _reply_model(child_docs[child], authors)
                    for child in doc.get("children") or []
                    if child in child_docs
                ],
                created_at=doc.get("created_at"),
            )
        )
    return UserThreads(user=doc_to_user(user_doc), threads=threads)


async def get_activity(user_key: str) -> List[ActivityItem]:
    """
    Return replies to the user's threads written by other users.

    ``user_key`` is the internal user key, the value threads store as ``author``.
    """

    await ensure_connected()
    author = as_storage_key(user_key)
    try:
        cursor = _threads().find({"author": author}, {"children": 1})
        reply_keys = _dedupe(
            [child async for doc in cursor for child in doc.get("children") or []]
        )
        if not reply_keys:
            return []

        cursor = _threads().find({"_id": {"$in": reply_keys}, "author": {"$ne": author}})
        replies = [doc async for doc in cursor]
        authors = await _author_summaries(doc.get("author") for doc in replies)
    except DATASTORE_ERRORS as exc:
        logger.error("Error fetching replies for {user_key}: {error}", user_key=user_key, error=exc)
        raise UserActivityError(exc) from exc

    return [_reply_model(doc, authors) for doc in replies]
