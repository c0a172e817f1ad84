from unittest.mock import MagicMock

import pytest
import redis
from pytest_mock import MockerFixture

from sliders.exceptions import StoreError
from sliders.store import RedisStore


@pytest.fixture
def client(mocker: MockerFixture) -> MagicMock:
    return mocker.MagicMock(spec=redis.Redis)


class TestRedisStore:
    def test_hgetall(self, client: MagicMock) -> None:
        client.hgetall.return_value = {"mail": "2"}

        assert RedisStore(client).hgetall("k") == {"mail": "2"}
        client.hgetall.assert_called_once_with("k")

    def test_hset_and_hdel(self, client: MagicMock) -> None:
        store = RedisStore(client)

        store.hset("k", "mail", "3")
        store.hdel("k", "mail")

        client.hset.assert_called_once_with("k", "mail", "3")
        client.hdel.assert_called_once_with("k", "mail")

    def test_redis_errors_become_store_errors(self, client: MagicMock) -> None:
        cause = redis.ConnectionError("connection refused")
        client.hgetall.side_effect = cause

        with pytest.raises(StoreError, match="HGETALL") as exc_info:
            _ = RedisStore(client).hgetall("k")

        assert exc_info.value.key == "k"
        assert exc_info.value.cause is cause

    def test_undecodable_reply_becomes_store_error(self, client: MagicMock) -> None:
        cause = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        client.hgetall.side_effect = cause

        with pytest.raises(StoreError, match="HGETALL") as exc_info:
            _ = RedisStore(client).hgetall("k")

        assert exc_info.value.cause is cause

    def test_from_url_does_not_connect(self) -> None:
        store = RedisStore.from_url("redis://localhost:6399/2")

        kwargs = store.client.connection_pool.connection_kwargs
        assert kwargs["port"] == 6399
        assert kwargs["db"] == 2
        assert kwargs["decode_responses"] is True
