"""Typed view over decoded rate responses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from .errors import DecodeError


def _normalize_code(code: str) -> str:
    normalized = str(code).strip().upper()
    if not normalized.isascii():
        raise ValueError(f"Currency code must be ASCII: {code!r}")
    return normalized


def _normalize_rates(rates: Mapping[str, Decimal | float | int]) -> Dict[str, Decimal]:
    normalized: Dict[str, Decimal] = {}
    for code, value in rates.items():
        normalized[_normalize_code(code)] = Decimal(str(value))
    return normalized


@dataclass(frozen=True)
class RateSnapshot:
    """Rates for one base currency on one day."""

    base: str
    date: date
    rates: Dict[str, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "base", _normalize_code(self.base))
        object.__setattr__(self, "rates", _normalize_rates(self.rates))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> RateSnapshot:
        """Build a snapshot from a decoded API response.

        Raises:
            DecodeError: If ``base``, ``date`` or ``rates`` is missing or malformed.
        """

        try:
            base = payload["base"]
            day = date.fromisoformat(str(payload["date"]))
            rates = payload["rates"]
        except KeyError as exc:
            raise DecodeError(f"Rate payload missing '{exc.args[0]}' field") from exc
        except ValueError as exc:
            raise DecodeError(f"Rate payload has an invalid date: {payload.get('date')!r}") from exc

        if not isinstance(rates, Mapping):
            raise DecodeError("Rate payload 'rates' field must be an object")
        try:
            return cls(base=base, date=day, rates=rates)
        except (InvalidOperation, ValueError) as exc:
            raise DecodeError(f"Rate payload contains invalid values: {exc}") from exc

    def rate(self, symbol: str) -> Decimal:
        """Return the rate for ``symbol``; raises KeyError if it was not quoted."""

        return self.rates[_normalize_code(symbol)]
