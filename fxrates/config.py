"""Client configuration classes."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from .errors import ConfigurationError

DEFAULT_ENDPOINT = "https://api.fixer.io/"
DEFAULT_CACHE_KEY_PREFIX = "fxrates-fixer-client-"

ENV_KEYS = (
    "FIXER_ENDPOINT",
    "FIXER_DEFAULT_BASE",
    "FIXER_DEFAULT_SYMBOLS",
    "FIXER_USE_CACHE",
    "FIXER_CACHE_KEY_PREFIX",
    "FIXER_CACHE_TTL_SECONDS",
    "REQUEST_TIMEOUT_SECONDS",
    "LOG_LEVEL",
    "LOG_JSON_ENABLED",
    "LOG_FORMAT",
)


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "fxrates"
    FIXER_ENDPOINT = _get_env("FIXER_ENDPOINT", DEFAULT_ENDPOINT)
    FIXER_DEFAULT_BASE = _get_env("FIXER_DEFAULT_BASE", "")
    FIXER_DEFAULT_SYMBOLS = _get_env("FIXER_DEFAULT_SYMBOLS", "")
    FIXER_USE_CACHE = _get_env("FIXER_USE_CACHE", "true").lower() == "true"
    FIXER_CACHE_KEY_PREFIX = _get_env("FIXER_CACHE_KEY_PREFIX", DEFAULT_CACHE_KEY_PREFIX)
    FIXER_CACHE_TTL_SECONDS = _get_env("FIXER_CACHE_TTL_SECONDS", "0")
    REQUEST_TIMEOUT_SECONDS = _get_env("REQUEST_TIMEOUT_SECONDS", "5")
    LOG_LEVEL = _get_env("LOG_LEVEL", "INFO")
    LOG_JSON_ENABLED = _get_env("LOG_JSON_ENABLED", "false").lower() == "true"
    LOG_FORMAT = _get_env("LOG_FORMAT", "%(asctime)s %(levelname)s [%(name)s] %(message)s")


class DevelopmentConfig(BaseConfig):
    """Configuration for local development."""

    DEBUG = True
    TESTING = False


class ProductionConfig(BaseConfig):
    """Configuration for production deployments."""

    DEBUG = False
    TESTING = False


class TestingConfig(BaseConfig):
    """Configuration used by the test-suite; never hits a shared cache."""

    __test__ = False

    DEBUG = False
    TESTING = True
    FIXER_DEFAULT_BASE = "USD"
    FIXER_DEFAULT_SYMBOLS = ""
    FIXER_USE_CACHE = True
    FIXER_CACHE_TTL_SECONDS = "0"


CONFIG_BY_ENV = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(config_name: str | None = None) -> type[BaseConfig]:
    """Return the config class for the requested environment.

    Args:
        config_name: Optional explicit config identifier. If omitted, the
            APP_ENV environment variable is consulted.

    Raises:
        KeyError: If the requested configuration is not defined.
    """

    env_candidate = config_name if config_name is not None else os.getenv("APP_ENV", "development")
    env_name = (env_candidate or "development").lower()
    try:
        config_cls = CONFIG_BY_ENV[env_name]
    except KeyError as exc:
        raise KeyError(f"Unknown APP_ENV '{env_name}'") from exc
    return config_cls


def config_to_dict(config_cls: type[BaseConfig]) -> dict[str, Any]:
    """Collect the upper-case attributes of a config class into a mapping."""

    return {key: getattr(config_cls, key) for key in dir(config_cls) if key.isupper()}


def normalize_symbols(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Normalize a symbols list or comma-separated string into a tuple of codes."""

    if value is None:
        return ()
    if isinstance(value, str):
        candidates: Iterable[str] = value.split(",")
    else:
        candidates = value
    normalized = []
    for code in candidates:
        cleaned = str(code).strip().upper()
        if cleaned:
            normalized.append(cleaned)
    return tuple(normalized)


@dataclass(frozen=True)
class ClientSettings:
    """Typed, validated client settings."""

    endpoint: str = DEFAULT_ENDPOINT
    default_base: str = ""
    default_symbols: tuple[str, ...] = ()
    use_cache: bool = True
    cache_key_prefix: str = DEFAULT_CACHE_KEY_PREFIX
    cache_ttl_seconds: int = 0
    timeout: float = 5.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_base", (self.default_base or "").strip().upper())
        object.__setattr__(self, "default_symbols", normalize_symbols(self.default_symbols))

        parsed = urlparse(self.endpoint or "")
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ConfigurationError(f"Invalid API endpoint '{self.endpoint}'")
        # Paths are appended verbatim, so the root must end with a slash.
        if not self.endpoint.endswith("/"):
            object.__setattr__(self, "endpoint", f"{self.endpoint}/")
        if self.cache_ttl_seconds < 0:
            raise ConfigurationError("Cache TTL must be zero or a positive number of seconds")
        if self.timeout <= 0:
            raise ConfigurationError("Request timeout must be positive")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> ClientSettings:
        """Build settings from a Flask-style config mapping."""

        endpoint_value = config.get("FIXER_ENDPOINT")
        if not isinstance(endpoint_value, str) or not endpoint_value.strip():
            endpoint = DEFAULT_ENDPOINT
        else:
            endpoint = endpoint_value.strip()
        prefix = config.get("FIXER_CACHE_KEY_PREFIX")
        try:
            ttl = int(config.get("FIXER_CACHE_TTL_SECONDS", 0))
            timeout = float(config.get("REQUEST_TIMEOUT_SECONDS", 5))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc
        return cls(
            endpoint=endpoint,
            default_base=str(config.get("FIXER_DEFAULT_BASE") or ""),
            default_symbols=normalize_symbols(config.get("FIXER_DEFAULT_SYMBOLS")),
            use_cache=_to_bool(config.get("FIXER_USE_CACHE", True)),
            cache_key_prefix=DEFAULT_CACHE_KEY_PREFIX if prefix is None else str(prefix),
            cache_ttl_seconds=ttl,
            timeout=timeout,
        )

    @classmethod
    def from_config(cls, config_name: str | None = None) -> ClientSettings:
        """Build settings from the environment-selected config class.

        Variables set after import (e.g. loaded from a ``.env`` file) take
        precedence over the class attributes.
        """

        config = config_to_dict(get_config(config_name))
        config.update(environ_overrides())
        return cls.from_mapping(config)


def environ_overrides() -> dict[str, str]:
    """Return the recognised settings currently present in ``os.environ``."""

    return {key: os.environ[key] for key in ENV_KEYS if key in os.environ}


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
