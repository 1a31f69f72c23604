from datetime import UTC, datetime, timedelta

import pytest
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient

from db_core import mongo
from users_repo import clear_revalidation_hooks

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


@pytest.fixture()
def db(monkeypatch):
    """In-memory Motor database installed as the shared, already-connected client."""

    client = AsyncMongoMockClient()
    monkeypatch.setattr(mongo.settings, "uri", "mongodb://mock:27017")
    monkeypatch.setattr(mongo.settings, "db_name", "threads_test")
    monkeypatch.setattr(mongo, "_client", client)
    monkeypatch.setattr(mongo, "_connected", True)
    yield client["threads_test"]
    clear_revalidation_hooks()


@pytest.fixture()
def make_user():
    def _make_user(index: int, **overrides) -> dict:
        base = dict(
            _id=ObjectId(),
            id=f"user_{index:03d}",
            username=f"user{index:03d}",
            name=f"User {index:03d}",
            bio="",
            image=f"https://img.example/{index}.png",
            onboarded=True,
            threads=[],
            created_at=BASE_TIME + timedelta(minutes=index),
        )
        base.update(overrides)
        return base

    return _make_user


@pytest.fixture()
def make_thread():
    def _make_thread(author, index: int = 0, **overrides) -> dict:
        base = dict(
            _id=ObjectId(),
            text=f"thread {index}",
            author=author,
            parent_id=None,
            children=[],
            created_at=BASE_TIME + timedelta(minutes=index),
        )
        base.update(overrides)
        return base

    return _make_thread
