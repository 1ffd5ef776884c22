"""FieldResolver: effective operators, editors and values for a field."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from .defaults import DEFAULT_OPERATORS, EDITOR_TEXT, INPUT_TEXT
from .query import NameLabelPair

if TYPE_CHECKING:
    from ..ports.hooks import BuilderHooks


class FieldResolver:
    """Consult override hooks, falling back to the built-in defaults.

    Two-tier operators: ``parent_operators(field)`` asks the hooks for an
    outer operator set. When one exists, its first entry parameterizes the
    query for the field's actual operators.
    """

    def __init__(
        self,
        hooks: BuilderHooks | None = None,
        operators: Sequence[NameLabelPair] | None = None,
    ) -> None:
        self._hooks = hooks
        self._operators = list(operators or DEFAULT_OPERATORS)

    @property
    def default_operators(self) -> list[NameLabelPair]:
        return list(self._operators)

    def operators(self, field: str, parent_operator: str | None = None) -> list[NameLabelPair]:
        if self._hooks is not None:
            ops = self._hooks.get_operators(field, False, parent_operator)
            if ops:
                return list(ops)
        return list(self._operators)

    def parent_operators(self, field: str) -> list[NameLabelPair]:
        """Outer operator set, empty when the field has no two-tier mode."""
        if self._hooks is not None:
            ops = self._hooks.get_operators(field, True, None)
            if ops:
                return list(ops)
        return []

    def derive_operator(self, field: str) -> tuple[str, str]:
        """Return ``(operator, parent_operator)`` for a freshly picked field."""
        parents = self.parent_operators(field)
        if parents:
            parent = parents[0].name
            return self.operators(field, parent)[0].name, parent
        return self.operators(field)[0].name, ""

    def value_editor_type(
        self, field: str, operator: str, parent_operator: str | None = None
    ) -> str:
        if self._hooks is not None:
            kind = self._hooks.get_value_editor_type(field, operator, parent_operator)
            if kind:
                return kind
        return EDITOR_TEXT

    def input_type(self, field: str, operator: str) -> str:
        if self._hooks is not None:
            kind = self._hooks.get_input_type(field, operator)
            if kind:
                return kind
        return INPUT_TEXT

    def values(self, field: str, operator: str) -> list[Any]:
        if self._hooks is not None:
            vals = self._hooks.get_values(field, operator)
            if vals:
                return list(vals)
        return []

    def placeholder(self, field: str, operator: str, parent_operator: str | None = None) -> str:
        if self._hooks is not None:
            text = self._hooks.get_placeholder(field, operator, parent_operator)
            if text:
                return text
        return ""

    def selected_column(self) -> str | None:
        if self._hooks is None:
            return None
        return self._hooks.get_selected_column() or None
