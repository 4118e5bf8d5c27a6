"""Flask integration: one configured client per application."""

from __future__ import annotations

from flask import Flask, current_app

from .cache import Cache
from .client import FixerClient
from .config import ClientSettings, config_to_dict, get_config
from .http_client import Transport

EXTENSION_KEY = "fixer_client"


def init_client(
    app: Flask,
    *,
    transport: Transport | None = None,
    cache: Cache | None = None,
) -> FixerClient:
    """Attach a FixerClient built from ``app.config`` to the Flask app.

    Keys missing from ``app.config`` fall back to the environment-selected
    config class.
    """

    for key, value in config_to_dict(get_config(app.config.get("APP_ENV"))).items():
        app.config.setdefault(key, value)

    settings = ClientSettings.from_mapping(app.config)
    client = FixerClient(settings, transport=transport, cache=cache)
    app.extensions[EXTENSION_KEY] = client
    return client


def get_client() -> FixerClient:
    """Return the client registered on the current application."""

    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError as exc:
        raise RuntimeError("FixerClient is not initialised; call init_client(app) first") from exc
