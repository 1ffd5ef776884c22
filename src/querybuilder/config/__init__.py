"""Configuration package.

Single source of truth: ``BuilderSettings`` via ``get_settings()``.
"""

from .runtime import BuilderSettings, get_settings

__all__ = [
    "BuilderSettings",
    "get_settings",
]
