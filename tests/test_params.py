from __future__ import annotations

from datetime import date, datetime

import pytest

from fxrates.errors import ConfigurationError, ParseError
from fxrates.params import (
    RateQuery,
    build_cache_key,
    build_historical_path,
    build_query_params,
    resolve_query,
)


def test_build_query_params_uses_explicit_arguments():
    params = build_query_params("usd", ["eur", "GBP"], default_base="RUB", default_symbols=("JPY",))

    assert params == {"base": "USD", "symbols": "EUR,GBP"}


def test_build_query_params_preserves_symbol_order():
    params = build_query_params("USD", ["JPY", "EUR", "CHF"])

    assert params["symbols"] == "JPY,EUR,CHF"


def test_build_query_params_falls_back_to_defaults():
    params = build_query_params(None, [], default_base="RUB", default_symbols=("USD", "EUR"))

    assert params == {"base": "RUB", "symbols": "USD,EUR"}


def test_build_query_params_empty_base_string_uses_default():
    params = build_query_params("  ", None, default_base="EUR")

    assert params == {"base": "EUR", "symbols": ""}


def test_build_query_params_without_any_base_raises():
    with pytest.raises(ConfigurationError) as exc_info:
        build_query_params(None, ["EUR"], default_base="")

    assert "No base currency" in str(exc_info.value)


def test_build_query_params_is_deterministic():
    first = build_query_params("USD", ["EUR", "GBP"])
    second = build_query_params("USD", ["EUR", "GBP"])

    assert first == second


def test_resolve_query_returns_structured_query():
    query = resolve_query(None, None, default_base="usd", default_symbols=["eur", " "])

    assert query == RateQuery(base="USD", symbols=("EUR",))
    assert query.to_params() == {"base": "USD", "symbols": "EUR"}


def test_historical_path_passes_iso_string_through():
    assert build_historical_path("2020-05-17") == "2020-05-17"


def test_historical_path_formats_date_objects():
    assert build_historical_path(date(2020, 5, 17)) == "2020-05-17"
    assert build_historical_path(datetime(2020, 5, 17, 23, 59)) == "2020-05-17"


def test_historical_path_converts_unix_timestamp():
    assert build_historical_path(1589673600) == "2020-05-17"
    assert build_historical_path(1589673600.5) == "2020-05-17"


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        ("17 May 2020", "2020-05-17"),
        ("May 17, 2020", "2020-05-17"),
        ("2020/05/17", "2020-05-17"),
        ("17.05.2020", "2020-05-17"),
        ("2020-5-7", "2020-05-07"),
        ("2020-05-17T10:30:00", "2020-05-17"),
        ("yesterday", "2020-05-16"),
        ("-3 days", "2020-05-14"),
        ("1 week ago", "2020-05-10"),
        ("+1 day", "2020-05-18"),
    ],
)
def test_historical_path_parses_free_form_strings(expression, expected):
    assert build_historical_path(expression, today=date(2020, 5, 17)) == expected


@pytest.mark.parametrize(
    "value",
    ["not a date", "", "2020-13-45T00:00", "２０２０-０５-１７", True, None, ["2020-05-17"]],
)
def test_historical_path_rejects_unparseable_values(value):
    with pytest.raises(ParseError):
        build_historical_path(value)


def test_cache_key_is_stable_across_param_order():
    first = build_cache_key("p-", "latest", {"base": "USD", "symbols": "EUR"})
    second = build_cache_key("p-", "latest", {"symbols": "EUR", "base": "USD"})

    assert first == second
    assert first.startswith("p-")
    assert len(first) == len("p-") + 32


def test_cache_key_depends_on_path_and_params():
    params = {"base": "USD", "symbols": "EUR"}

    assert build_cache_key("", "latest", params) != build_cache_key("", "2020-05-17", params)
    assert build_cache_key("", "latest", params) != build_cache_key(
        "", "latest", {"base": "USD", "symbols": "GBP"}
    )
