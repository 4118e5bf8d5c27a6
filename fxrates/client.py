"""Exchange-rate API client.

Usage::

    client = FixerClient(
        ClientSettings(default_base="RUB"),
        transport=HTTPClient(),
        cache=MemoryCache(),
    )
    latest = client.latest(symbols=["USD", "EUR"])
    latest["rates"]["USD"]
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from .cache import MISS, Cache, MemoryCache
from .config import ClientSettings
from .errors import DecodeError, FixerClientError, HttpError
from .http_client import HTTPClient, HTTPClientConfig, Transport
from .logging import request_log_extra
from .params import LATEST_PATH, build_cache_key, build_historical_path, build_query_params

logger = logging.getLogger(__name__)

REQUEST_HEADERS = {"Accept": "application/json"}


class FixerClient:
    """Fetch latest and historical rates, optionally through a cache.

    Collaborators are fixed at construction: a requests-backed transport and
    an in-process MemoryCache are created when none are injected.
    """

    def __init__(
        self,
        settings: ClientSettings,
        transport: Optional[Transport] = None,
        cache: Optional[Cache] = None,
    ) -> None:
        self._settings = settings
        self._owns_transport = transport is None
        self._transport = transport or HTTPClient(HTTPClientConfig(timeout=settings.timeout))
        if cache is None and settings.use_cache:
            cache = MemoryCache()
        self._cache = cache

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    def close(self) -> None:
        """Release the transport if this client created it; injected ones are left open."""

        if self._owns_transport and isinstance(self._transport, HTTPClient):
            self._transport.close()

    def __enter__(self) -> FixerClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def latest(
        self,
        base: Optional[str] = None,
        symbols: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        """Get the latest rates; returns the decoded ``base``/``date``/``rates`` object."""

        params = self.build_query_params(base, symbols)
        return self.through_cache(LATEST_PATH, params)

    def historical(
        self,
        date: Any,
        base: Optional[str] = None,
        symbols: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        """Get rates for a past day given as a date, unix timestamp or string."""

        params = self.build_query_params(base, symbols)
        path = build_historical_path(date)
        return self.through_cache(path, params)

    def build_query_params(
        self,
        base: Optional[str],
        symbols: Optional[Sequence[str]],
    ) -> Dict[str, str]:
        return build_query_params(
            base,
            symbols,
            default_base=self._settings.default_base,
            default_symbols=self._settings.default_symbols,
        )

    def build_cache_key(self, path: str, params: Mapping[str, Any]) -> str:
        return build_cache_key(self._settings.cache_key_prefix, path, params)

    def through_cache(self, path: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        if not self._settings.use_cache or self._cache is None:
            return self.perform_request(path, params)

        key = self.build_cache_key(path, params)
        data = self._cache.get(key)
        if data is not MISS:
            logger.debug("Cache hit for %s (%s)", path, key)
            return data

        logger.debug("Cache miss for %s (%s)", path, key)
        data = self.perform_request(path, params)
        self._cache.set(key, data, self._settings.cache_ttl_seconds)
        return data

    def perform_request(self, path: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        url = self._build_url(path, params)
        base = params.get("base")
        started = time.perf_counter()
        try:
            response = self._transport.send(url, REQUEST_HEADERS)
        except FixerClientError as exc:
            logger.warning(
                "Rates request for %s failed",
                path,
                extra=request_log_extra(
                    event="fixer.request",
                    path=path,
                    base=base,
                    status="error",
                    duration_ms=_elapsed_ms(started),
                    cached=False,
                    error=str(exc),
                ),
            )
            raise

        extra = request_log_extra(
            event="fixer.request",
            path=path,
            base=base,
            status=response.status_code,
            duration_ms=_elapsed_ms(started),
            cached=False,
        )
        if not response.ok:
            logger.warning("Rates API answered %s for %s", response.status_code, path, extra=extra)
            raise HttpError(response.status_code, response.body, url=url)

        logger.info("Fetched rates for %s", path, extra=extra)
        return self._decode(response.body)

    def _build_url(self, path: str, params: Mapping[str, Any]) -> str:
        url = f"{self._settings.endpoint}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    @staticmethod
    def _decode(body: str) -> Dict[str, Any]:
        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise DecodeError(f"Invalid JSON response: {exc}") from exc
        if not isinstance(payload, dict):
            raise DecodeError("Expected a JSON object in the rates response")
        return payload


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
