"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before any import that loads settings.
"""

import os

os.environ["APP_ENV"] = "testing"

os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_MODEL", "gpt-4o-mini")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("APP_API_KEY", "bypass-secret-123")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")
os.environ.setdefault("REDIS_TOKEN", "test-token")

import fakeredis
import pytest

import app.adapters.store.redis_client as redis_client
import app.core.rate_limit as rate_limit


@pytest.fixture
def fake_redis() -> fakeredis.FakeAsyncRedis:
    """In-memory async Redis with real INCR/EXPIRE/TTL semantics."""
    return fakeredis.FakeAsyncRedis(decode_responses=True)


@pytest.fixture
def shared_fake_redis(monkeypatch: pytest.MonkeyPatch, fake_redis: fakeredis.FakeAsyncRedis):
    """Install ``fake_redis`` as the process-wide store client."""
    monkeypatch.setattr(redis_client, "_client", fake_redis)
    monkeypatch.setattr(rate_limit, "_limiter", None)
    return fake_redis
