"""Shared HTTP transport wrapper around a requests session."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

import requests
from requests import Session
from requests.exceptions import RequestException

from .errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HTTPResponse:
    """Status code and raw body of a completed request."""

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(Protocol):
    """Contract for anything able to issue a GET and return an HTTPResponse."""

    def send(self, url: str, headers: Mapping[str, str]) -> HTTPResponse:
        ...


@dataclass(frozen=True)
class HTTPClientConfig:
    """Configuration for the shared HTTP client."""

    timeout: float = 5.0


class HTTPClient:
    """Single-shot GET transport; failures surface immediately, no retries."""

    def __init__(
        self,
        config: Optional[HTTPClientConfig] = None,
        session: Optional[Session] = None,
    ) -> None:
        self._config = config or HTTPClientConfig()
        self._session = session or requests.Session()

    def send(self, url: str, headers: Mapping[str, str]) -> HTTPResponse:
        try:
            response = self._session.get(url, headers=dict(headers), timeout=self._config.timeout)
        except RequestException as exc:
            logger.warning("HTTP request to %s failed: %s", url, exc)
            raise TransportError(f"Failed to fetch {url}: {exc}") from exc

        return HTTPResponse(status_code=response.status_code, body=response.text)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
