"""Value defaults and transitions for rules.

Rules:
1. creation: permitted values present -> ""; checkbox editor -> False; else ""
2. operator change: editor kind unchanged -> keep value;
   changed to checkbox/radio -> True; changed to anything else -> ""
3. value change on LAST_UPDATED_BY -> picked object's label (meta = email)
4. value change with a person object (mapping carrying "id") -> its id (meta = email)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .defaults import (
    EDITOR_CHECKBOX,
    EDITOR_RADIO,
    LAST_UPDATED_BY_FIELD,
    PERSON_ID_KEY,
    PERSON_LABEL_KEY,
    PERSON_META_KEY,
)
from .field_resolver import FieldResolver
from .query import Rule


@dataclass(frozen=True)
class ValueChange:
    """Normalized result of setting a rule property."""

    value: Any
    is_last_updated_field: bool = False
    is_person_field: bool = False
    value_meta: Any = None

    @property
    def sets_meta(self) -> bool:
        return self.is_last_updated_field or self.is_person_field


class ValueResolver:
    """Compute rule values on creation and on operator change."""

    def __init__(self, fields: FieldResolver) -> None:
        self._fields = fields

    def default_value(self, rule: Rule) -> Any:
        if self._fields.values(rule.field, rule.operator):
            return ""
        if self._fields.value_editor_type(rule.field, rule.operator) == EDITOR_CHECKBOX:
            return False
        return ""

    def transition_value(self, rule: Rule, previous_operator: str) -> Any:
        before = self._fields.value_editor_type(rule.field, previous_operator)
        after = self._fields.value_editor_type(rule.field, rule.operator)
        if before == after:
            return rule.value
        if after in (EDITOR_CHECKBOX, EDITOR_RADIO):
            return True
        return ""


def normalize_value_change(prop: str, value: Any, rule: Rule) -> ValueChange:
    """Apply the last-updated-by and person-object rules to an incoming value."""
    if prop != "value":
        return ValueChange(value=value)
    is_mapping = isinstance(value, Mapping)
    is_last_updated = rule.field == LAST_UPDATED_BY_FIELD
    is_person = is_mapping and PERSON_ID_KEY in value
    updated = value
    if is_last_updated and is_mapping:
        updated = value.get(PERSON_LABEL_KEY) or updated
    if is_person:
        updated = value[PERSON_ID_KEY]
    meta = value.get(PERSON_META_KEY) if is_mapping else None
    return ValueChange(
        value=updated,
        is_last_updated_field=is_last_updated,
        is_person_field=is_person,
        value_meta=meta,
    )
