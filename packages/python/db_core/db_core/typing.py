"""Lightweight typing helpers shared by Mongo-backed repositories."""

from typing import Any, Mapping, Union

from bson import ObjectId

MongoDocument = Mapping[str, Any]

StorageKey = Union[ObjectId, str]
"""Internal ``_id`` value as stored, either an ObjectId or a plain string."""


def as_storage_key(value: StorageKey) -> StorageKey:
    """Turn a 24-hex string back into the ObjectId it was rendered from."""

    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value