from unittest.mock import AsyncMock, MagicMock

import pytest
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis

from rendezvous.services.store import RedisStore
from rendezvous.user import UserProfile


@pytest.fixture
def fake_redis():
    # a fresh server per test keeps hashes from leaking between tests
    return FakeRedis(server=FakeServer(), decode_responses=True)


@pytest.fixture
def store(fake_redis):
    return RedisStore(client=fake_redis, key_prefix="test:")


def make_connection(sid: str = "sid-1") -> MagicMock:
    connection = MagicMock()
    connection.id = sid
    connection.emit = AsyncMock()
    connection.broadcast = AsyncMock()
    return connection


@pytest.fixture
def connection():
    return make_connection()


@pytest.fixture
def make_user(store):
    def _make(email: str, connection=None, **data) -> UserProfile:
        return UserProfile().initialize(store, {"email": email, **data}, connection)

    return _make
