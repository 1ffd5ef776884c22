"""Composition root: the single place where a configured builder is assembled.

Call ``build_query_builder()`` to get a ``QueryBuilder`` whose fields and
initial query come from the files named in settings.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .config.runtime import BuilderSettings, get_settings
from .domain.query import FieldDescriptor
from .services.query_builder import QueryBuilder


def load_fields(path: str | Path) -> list[FieldDescriptor]:
    """Read a JSON list of field descriptors. Raises on missing file or bad JSON."""
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, list):
        raise ValueError(f"{path}: fields file must contain a JSON list")
    return [FieldDescriptor.model_validate(item) for item in raw]


def load_query(path: str | Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: query file must contain a JSON object")
    return raw


def build_query_builder(settings: BuilderSettings | None = None, **kwargs: Any) -> QueryBuilder:
    """Construct a QueryBuilder from settings; extra kwargs go to the constructor."""
    settings = settings or get_settings()
    fields = load_fields(settings.fields_file) if settings.fields_file else []
    query = load_query(settings.query_file) if settings.query_file else None
    return QueryBuilder(fields, query, settings=settings, **kwargs)
