"""Shared pytest fixtures."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from fxrates.cache import MemoryCache  # noqa: E402
from fxrates.client import FixerClient  # noqa: E402
from fxrates.config import ClientSettings  # noqa: E402
from fxrates.http_client import HTTPClient, HTTPClientConfig  # noqa: E402

ENDPOINT = "https://api.fixer.test/"


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture()
def settings() -> ClientSettings:
    return ClientSettings(
        endpoint=ENDPOINT,
        default_base="USD",
        default_symbols=("EUR", "GBP"),
        use_cache=True,
        cache_key_prefix="test-",
        cache_ttl_seconds=0,
        timeout=2,
    )


@pytest.fixture()
def make_client(cache: MemoryCache) -> Callable[..., FixerClient]:
    """Build a FixerClient over a real HTTPClient; pair with ``responses``."""

    def _factory(settings: ClientSettings, **overrides) -> FixerClient:
        transport = overrides.pop("transport", None) or HTTPClient(HTTPClientConfig(timeout=2))
        return FixerClient(settings, transport=transport, cache=overrides.pop("cache", cache))

    return _factory


@pytest.fixture()
def client(make_client, settings) -> FixerClient:
    return make_client(settings)
