"""Read-only objects handed to renderers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..domain.query import FieldDescriptor, NameLabelPair, RuleGroup


@dataclass(frozen=True)
class BuilderSchema:
    """Everything a rule/group renderer may read or call.

    Renderers hold no tree logic: they query resolvers and emit intents
    (add/remove/change) through the callables below.
    """

    fields: tuple[FieldDescriptor, ...]
    combinators: tuple[NameLabelPair, ...]

    show_add_group: bool
    show_add_rule: bool
    show_combinators_between_rules: bool
    show_not_toggle: bool
    enable_drilldown: bool

    get_operators: Callable[..., list[NameLabelPair]]
    get_parent_operators: Callable[[str], list[NameLabelPair]]
    get_value_editor_type: Callable[..., str]
    get_input_type: Callable[[str, str], str]
    get_values: Callable[[str, str], list[Any]]
    get_placeholder: Callable[..., str]
    get_level: Callable[[str], int]
    is_rule_group: Callable[[Any], bool]
    has_column_child_rule: Callable[..., bool]
    has_measure_child_rule: Callable[..., bool]

    create_rule: Callable[[], Any]
    create_rule_group: Callable[[], RuleGroup]
    on_rule_add: Callable[[Any, str], bool]
    on_group_add: Callable[[Any, str], bool]
    on_rule_remove: Callable[[str, str], bool]
    on_group_remove: Callable[[str, str], bool]
    on_prop_change: Callable[[str, Any, str], bool]
    on_add_rule_at_root: Callable[[], bool]
    clear_rule: Callable[[], bool]


@dataclass(frozen=True)
class QueryView:
    """What the top-level builder renders for the current snapshot."""

    root: RuleGroup
    rule_count: int
    no_rules_applied: bool
    show_add_filter: bool
    show_advanced: bool
