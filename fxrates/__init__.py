"""Thin client for Fixer-style exchange-rate APIs."""

from __future__ import annotations

from .cache import MISS, Cache, MemoryCache
from .client import FixerClient
from .config import ClientSettings, get_config
from .errors import (
    ConfigurationError,
    DecodeError,
    FixerClientError,
    HttpError,
    ParseError,
    TransportError,
)
from .http_client import HTTPClient, HTTPClientConfig, HTTPResponse, Transport
from .params import RateQuery, build_cache_key, build_historical_path, build_query_params
from .schemas import RateSnapshot

__all__ = [
    "MISS",
    "Cache",
    "MemoryCache",
    "FixerClient",
    "ClientSettings",
    "get_config",
    "create_client",
    "ConfigurationError",
    "DecodeError",
    "FixerClientError",
    "HttpError",
    "ParseError",
    "TransportError",
    "HTTPClient",
    "HTTPClientConfig",
    "HTTPResponse",
    "Transport",
    "RateQuery",
    "build_cache_key",
    "build_historical_path",
    "build_query_params",
    "RateSnapshot",
]


def create_client(
    config_name: str | None = None,
    *,
    transport: Transport | None = None,
    cache: Cache | None = None,
) -> FixerClient:
    """Client factory reading settings from the selected config environment."""

    settings = ClientSettings.from_config(config_name)
    return FixerClient(settings, transport=transport, cache=cache)
