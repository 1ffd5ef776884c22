"""Pydantic-based settings for the query builder.

Loads from ``QUERYBUILDER_*`` environment variables (with optional .env file).
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class BuilderSettings(BaseSettings):
    """Behaviour and display flags, validated at startup."""

    model_config = {
        "env_prefix": "QUERYBUILDER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # --- Value resets ---
    reset_on_field_change: bool = Field(
        default=True,
        description="Re-derive operator and reset value when a rule's field changes",
    )
    reset_on_operator_change: bool = Field(
        default=False,
        description="Reset value when the operator or parent operator changes",
    )

    # --- Display flags (passed through to renderers) ---
    show_add_group: bool = Field(default=True, description="Allow adding/removing groups")
    show_add_rule: bool = Field(default=True, description="Allow adding rules")
    show_combinators_between_rules: bool = Field(
        default=False, description="Show the combinator selector between rules"
    )
    show_not_toggle: bool = Field(default=False, description="Show the group negation toggle")
    enable_normal_view: bool = Field(
        default=False, description="Render the flattened root-rules-only view"
    )
    enable_drilldown: bool = Field(
        default=False, description="Hide the 'advanced' escape hatch in normal view"
    )

    # --- Inputs for the server and CLI ---
    fields_file: str | None = Field(
        default=None, description="JSON file with a list of field descriptors"
    )
    query_file: str | None = Field(default=None, description="JSON file with the initial query")

    log_level: str = Field(default="INFO", description="Root log level for entry points")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {v!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> BuilderSettings:
    """Return the singleton BuilderSettings (cached after first call)."""
    return BuilderSettings()
