"""Request-building rules: query parameters, historical paths and cache keys."""

from __future__ import annotations

import hashlib
import json
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Tuple

from .config import normalize_symbols
from .errors import ConfigurationError, ParseError
from .utils.datetime import date_from_timestamp, parse_date_expression

ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

LATEST_PATH = "latest"


@dataclass(frozen=True)
class RateQuery:
    """Finalized base currency and ordered target symbols for one call."""

    base: str
    symbols: Tuple[str, ...] = ()

    def to_params(self) -> Dict[str, str]:
        return {"base": self.base, "symbols": ",".join(self.symbols)}


def resolve_query(
    base: str | None,
    symbols: Sequence[str] | None,
    *,
    default_base: str = "",
    default_symbols: Sequence[str] = (),
) -> RateQuery:
    """Apply configured defaults to the call arguments.

    Raises:
        ConfigurationError: If neither ``base`` nor ``default_base`` is set.
    """

    resolved_base = (base or "").strip().upper()
    if not resolved_base:
        resolved_base = (default_base or "").strip().upper()
        if not resolved_base:
            raise ConfigurationError(
                "No base currency available: pass a base or configure FIXER_DEFAULT_BASE"
            )

    resolved_symbols = normalize_symbols(symbols)
    if not resolved_symbols:
        resolved_symbols = normalize_symbols(default_symbols)

    return RateQuery(base=resolved_base, symbols=resolved_symbols)


def build_query_params(
    base: str | None,
    symbols: Sequence[str] | None,
    *,
    default_base: str = "",
    default_symbols: Sequence[str] = (),
) -> Dict[str, str]:
    """Return the transport form of a rate query: ``{"base": ..., "symbols": "A,B"}``."""

    query = resolve_query(
        base,
        symbols,
        default_base=default_base,
        default_symbols=default_symbols,
    )
    return query.to_params()


def build_historical_path(value: Any, *, today: date | None = None) -> str:
    """Resolve a date-like value into a ``YYYY-MM-DD`` path segment.

    ``date`` and ``datetime`` objects are formatted directly, unix timestamps
    are converted to their UTC date, strings already in ``YYYY-MM-DD`` form
    pass through untouched and any other string is parsed as a free-form
    expression.
    """

    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, bool):
        raise ParseError(f"Unsupported historical date value: {value!r}")
    if isinstance(value, (int, float)):
        return date_from_timestamp(value).strftime("%Y-%m-%d")
    if isinstance(value, str):
        if ISO_DATE_RE.fullmatch(value):
            return value
        return parse_date_expression(value, today=today).strftime("%Y-%m-%d")
    raise ParseError(f"Unsupported historical date value: {value!r}")


def build_cache_key(prefix: str, path: str, params: Mapping[str, Any]) -> str:
    """Derive a stable cache key from the request path and its parameters."""

    serialized = json.dumps(dict(params), sort_keys=True, separators=(",", ":"))
    digest = hashlib.md5((path + serialized).encode("utf-8"), usedforsecurity=False).hexdigest()
    return f"{prefix}{digest}"
