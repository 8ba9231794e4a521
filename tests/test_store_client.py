"""Tests for the lazily created, process-wide Redis client."""

import threading
import time
from unittest.mock import MagicMock, patch

import pytest

import app.adapters.store.redis_client as redis_client
from app.adapters.store import get_client


@pytest.fixture(autouse=True)
def empty_client_slot(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(redis_client, "_client", None)


def test_not_created_until_first_use() -> None:
    with patch.object(redis_client.Redis, "from_url") as from_url:
        assert redis_client._client is None
        from_url.assert_not_called()

        get_client()

        from_url.assert_called_once()


def test_returns_same_instance_on_every_call() -> None:
    with patch.object(redis_client.Redis, "from_url", side_effect=lambda *a, **kw: MagicMock()):
        first = get_client()
        second = get_client()

    assert first is second


def test_passes_url_and_token_through(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(redis_client.settings.store, "url", "rediss://default@example.upstash.io:6379")
    monkeypatch.setattr(redis_client.settings.store, "token", "secret-token")

    with patch.object(redis_client.Redis, "from_url") as from_url:
        get_client()

    args, kwargs = from_url.call_args
    assert args[0] == "rediss://default@example.upstash.io:6379"
    assert kwargs["password"] == "secret-token"
    assert kwargs["decode_responses"] is True


def test_empty_token_is_not_sent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(redis_client.settings.store, "token", "")

    with patch.object(redis_client.Redis, "from_url") as from_url:
        get_client()

    assert from_url.call_args.kwargs["password"] is None


def test_real_construction_does_not_connect(monkeypatch: pytest.MonkeyPatch) -> None:
    # Nothing listens on this port; redis-py only connects on the first command
    monkeypatch.setattr(redis_client.settings.store, "url", "redis://127.0.0.1:1/0")

    client = get_client()

    assert client is get_client()


def test_failed_construction_is_not_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(redis_client.settings.store, "url", "")

    with pytest.raises(ValueError):
        get_client()

    assert redis_client._client is None


def test_concurrent_first_use_builds_one_client() -> None:
    created: list[MagicMock] = []

    def slow_from_url(*args, **kwargs):
        time.sleep(0.05)
        client = MagicMock()
        created.append(client)
        return client

    results: list[object] = []
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        results.append(get_client())

    with patch.object(redis_client.Redis, "from_url", side_effect=slow_from_url):
        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    assert len(created) == 1
    assert all(result is created[0] for result in results)
