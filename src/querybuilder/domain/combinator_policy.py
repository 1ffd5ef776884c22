"""CombinatorPolicy: force AND on groups holding protected-field rules.

A rule counts only when it sits below the root's direct children: the
entry call treats the root's own rules as "root" and skips them. Every
nested group is checked against all of its descendants.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .defaults import FIELD_TYPE_COLUMN, FIELD_TYPE_MEASURE
from .query import Combinator, FieldDescriptor, Rule, RuleGroup

PROTECTED_FIELD_TYPES: tuple[str, ...] = (FIELD_TYPE_COLUMN, FIELD_TYPE_MEASURE)


class CombinatorPolicy:
    """Evaluate protected-category predicates and enforce AND."""

    def __init__(self, get_fields: Callable[[], Iterable[FieldDescriptor]]) -> None:
        self._get_fields = get_fields

    def has_column_child_rule(self, group: RuleGroup) -> bool:
        return self.has_child_rule(group, FIELD_TYPE_COLUMN)

    def has_measure_child_rule(self, group: RuleGroup) -> bool:
        return self.has_child_rule(group, FIELD_TYPE_MEASURE)

    def has_child_rule(self, group: RuleGroup, field_type: str) -> bool:
        """True if a rule of ``field_type`` exists below ``group``'s own rules."""
        return any(self._has_rule(child, field_type, is_root=True) for child in group.rules)

    def enforce(self, root: RuleGroup) -> RuleGroup:
        """Force AND where required, in place, over the whole tree."""
        if any(self.has_child_rule(root, ft) for ft in PROTECTED_FIELD_TYPES):
            root.combinator = Combinator.AND
        for child in root.rules:
            if isinstance(child, RuleGroup):
                self._enforce_nested(child)
        return root

    def _enforce_nested(self, group: RuleGroup) -> None:
        for child in group.rules:
            if isinstance(child, RuleGroup):
                self._enforce_nested(child)
        if any(self._has_rule(group, ft, is_root=False) for ft in PROTECTED_FIELD_TYPES):
            group.combinator = Combinator.AND

    def _has_rule(self, node: Rule | RuleGroup, field_type: str, is_root: bool) -> bool:
        if isinstance(node, RuleGroup):
            return any(self._has_rule(child, field_type, is_root=False) for child in node.rules)
        if is_root:
            return False
        return self._field_type(node.field) == field_type

    def _field_type(self, field_name: str) -> str | None:
        for field in self._get_fields():
            if field.name == field_name:
                return field.field_type
        return None
