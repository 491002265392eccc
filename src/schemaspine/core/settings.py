"""
Settings for schema-spine.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    The engine has few knobs; they live in one pydantic-settings model read
    from ``SCHEMASPINE_*`` variables and ``.env``.

Examples:
    >>> from schemaspine.core.settings import get_settings
    >>> get_settings().check_computed_defaults
    False

Tags:
    settings, configuration, pydantic, environment, schema-spine

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaSpineSettings(BaseSettings):
    """Engine settings.

    Fields
    ──────
    log_level                : Structlog log level
    log_json                 : JSON output; None auto-detects from the tty
    service_name             : ``service.name`` stamped on every log event
    check_computed_defaults  : Also check deferred default results against the
                               option kind
    """

    model_config = SettingsConfigDict(
        env_prefix="SCHEMASPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None
    service_name: str = "schema-spine"

    # ── Resolution ───────────────────────────────────────────────
    check_computed_defaults: bool = Field(
        default=False,
        description="Report TypeMismatch when a deferred default produces a value its kind rejects",
    )


_settings_cache: dict[str, SchemaSpineSettings] = {}


def get_settings(*, _force_reload: bool = False) -> SchemaSpineSettings:
    """Load, validate, and cache a :class:`SchemaSpineSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = SchemaSpineSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = [
    "SchemaSpineSettings",
    "get_settings",
    "clear_settings_cache",
]
