import asyncio
import time

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from db_core import (
    DatabaseConnectionError,
    DatabaseNotConfiguredError,
    close_connection,
    ensure_connected,
    get_db,
    is_connected,
)
from db_core import mongo


class StubAdmin:
    def __init__(self, error=None, delay=0.0):
        self.calls = []
        self.error = error
        self.delay = delay

    async def command(self, name):
        self.calls.append(name)
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return {"ok": 1}


@pytest.fixture()
def stub_client(monkeypatch):
    created = []

    class StubMotorClient:
        admin = None

        def __init__(self, uri, **kwargs):
            self.uri = uri
            self.kwargs = kwargs
            self.closed = False
            self.admin = StubMotorClient.admin
            created.append(self)

        def __getitem__(self, name):
            return {"db_name": name}

        def close(self):
            self.closed = True

    StubMotorClient.admin = StubAdmin()
    monkeypatch.setattr(mongo, "AsyncIOMotorClient", StubMotorClient)
    monkeypatch.setattr(mongo, "_client", None)
    monkeypatch.setattr(mongo, "_connected", False)
    monkeypatch.setattr(mongo, "_connect_task", None)
    monkeypatch.setattr(mongo.settings, "uri", "mongodb://stub:27017")
    monkeypatch.setattr(mongo.settings, "db_name", "threads_test")
    StubMotorClient.created = created
    return StubMotorClient


@pytest.mark.asyncio
async def test_missing_url_is_a_silent_noop(stub_client, monkeypatch):
    monkeypatch.setattr(mongo.settings, "uri", None)

    await ensure_connected()

    assert not is_connected()
    assert stub_client.created == []


@pytest.mark.asyncio
async def test_get_db_without_url_raises_not_configured(stub_client, monkeypatch):
    monkeypatch.setattr(mongo.settings, "uri", None)

    with pytest.raises(DatabaseNotConfiguredError):
        get_db()


@pytest.mark.asyncio
async def test_connect_is_idempotent(stub_client):
    await ensure_connected()
    await ensure_connected()

    assert is_connected()
    assert len(stub_client.created) == 1
    assert stub_client.admin.calls == ["ping"]
    assert stub_client.created[0].uri == "mongodb://stub:27017"
    assert get_db() == {"db_name": "threads_test"}


@pytest.mark.asyncio
async def test_concurrent_first_connect_pings_once(stub_client):
    await asyncio.gather(*(ensure_connected() for _ in range(5)))

    assert is_connected()
    assert stub_client.admin.calls == ["ping"]


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_failing_attempt(stub_client):
    stub_client.admin = StubAdmin(error=ServerSelectionTimeoutError("no servers"), delay=0.2)

    started = time.perf_counter()
    await asyncio.gather(*(ensure_connected() for _ in range(5)))
    elapsed = time.perf_counter() - started

    assert stub_client.admin.calls == ["ping"], "waiting callers must not queue their own pings"
    assert elapsed < 0.4
    assert not is_connected()


@pytest.mark.asyncio
async def test_concurrent_strict_callers_all_see_the_shared_failure(stub_client):
    stub_client.admin = StubAdmin(error=ServerSelectionTimeoutError("no servers"), delay=0.05)

    results = await asyncio.gather(
        *(ensure_connected(raise_on_error=True) for _ in range(3)), return_exceptions=True
    )

    assert all(isinstance(result, DatabaseConnectionError) for result in results)
    assert stub_client.admin.calls == ["ping"]


@pytest.mark.asyncio
async def test_connection_failure_is_swallowed(stub_client):
    stub_client.admin = StubAdmin(error=ServerSelectionTimeoutError("no servers"))

    await ensure_connected()

    assert not is_connected(), "a failed ping must not mark the connection established"


@pytest.mark.asyncio
async def test_connection_failure_raises_when_requested(stub_client):
    stub_client.admin = StubAdmin(error=ServerSelectionTimeoutError("no servers"))

    with pytest.raises(DatabaseConnectionError, match="no servers"):
        await ensure_connected(raise_on_error=True)
    assert not is_connected()


@pytest.mark.asyncio
async def test_failed_connect_is_retried_on_next_call(stub_client):
    stub_client.admin = StubAdmin(error=ServerSelectionTimeoutError("no servers"))
    await ensure_connected()

    stub_client.created[0].admin = StubAdmin()
    await ensure_connected()

    assert is_connected()


@pytest.mark.asyncio
async def test_close_connection_resets_state(stub_client):
    await ensure_connected()
    client = stub_client.created[0]

    await close_connection()

    assert client.closed
    assert not is_connected()
