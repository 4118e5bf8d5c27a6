"""Error hierarchy raised by the exchange-rate client."""

from __future__ import annotations


class FixerClientError(Exception):
    """Base class for all client-level errors."""


class ConfigurationError(FixerClientError):
    """Raised when the client is missing required configuration."""


class ParseError(FixerClientError, ValueError):
    """Raised when a historical date input cannot be interpreted."""


class HttpError(FixerClientError):
    """Raised when the API answers with a non-success status."""

    def __init__(self, status_code: int, body: str, *, url: str | None = None) -> None:
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body
        self.url = url


class DecodeError(FixerClientError, ValueError):
    """Raised when a successful response does not contain a JSON object."""


class TransportError(FixerClientError):
    """Raised when the HTTP transport cannot produce a response."""
