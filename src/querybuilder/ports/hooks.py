"""Port: caller-supplied field/operator override hooks.

Every hook may return ``None`` (or any falsy value) to mean "no override";
the resolvers then fall back to their documented defaults.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from ..domain.query import NameLabelPair


@runtime_checkable
class BuilderHooks(Protocol):
    """Override points consulted by the field/operator resolver."""

    def get_operators(
        self, field: str, is_parent: bool = False, parent_operator: str | None = None
    ) -> Sequence[NameLabelPair] | None: ...

    def get_value_editor_type(
        self, field: str, operator: str, parent_operator: str | None = None
    ) -> str | None: ...

    def get_input_type(self, field: str, operator: str) -> str | None: ...

    def get_values(self, field: str, operator: str) -> Sequence[Any] | None: ...

    def get_placeholder(
        self, field: str, operator: str, parent_operator: str | None = None
    ) -> str | None: ...

    def get_selected_column(self) -> str | None: ...


@dataclass
class CallbackHooks:
    """BuilderHooks backed by optional plain callables."""

    operators: Callable[..., Sequence[NameLabelPair] | None] | None = None
    value_editor_type: Callable[..., str | None] | None = None
    input_type: Callable[[str, str], str | None] | None = None
    values: Callable[[str, str], Sequence[Any] | None] | None = None
    placeholder: Callable[..., str | None] | None = None
    selected_column: Callable[[], str | None] | None = None

    def get_operators(self, field, is_parent=False, parent_operator=None):
        if self.operators is None:
            return None
        return self.operators(field, is_parent, parent_operator)

    def get_value_editor_type(self, field, operator, parent_operator=None):
        if self.value_editor_type is None:
            return None
        return self.value_editor_type(field, operator, parent_operator)

    def get_input_type(self, field, operator):
        if self.input_type is None:
            return None
        return self.input_type(field, operator)

    def get_values(self, field, operator):
        if self.values is None:
            return None
        return self.values(field, operator)

    def get_placeholder(self, field, operator, parent_operator=None):
        if self.placeholder is None:
            return None
        return self.placeholder(field, operator, parent_operator)

    def get_selected_column(self):
        if self.selected_column is None:
            return None
        return self.selected_column()
