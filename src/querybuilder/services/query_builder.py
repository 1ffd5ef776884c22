"""QueryBuilder: owns the current rule-tree snapshot and its mutations.

Every mutation clones the current snapshot, edits the copy, re-runs
combinator enforcement, commits the copy and notifies listeners. Prior
snapshots are never modified. Unknown target ids are silent no-ops.
Incoming nodes whose id is missing or already taken get a fresh id.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ..config.runtime import BuilderSettings, get_settings
from ..domain.combinator_policy import CombinatorPolicy
from ..domain.defaults import DEFAULT_COMBINATORS
from ..domain.field_resolver import FieldResolver
from ..domain.locator import find_node, level_of
from ..domain.projector import ValidityProjector
from ..domain.query import (
    Combinator,
    FieldDescriptor,
    NameLabelPair,
    Rule,
    RuleGroup,
    is_rule_group,
    iter_nodes,
    parse_node,
)
from ..domain.value_resolver import ValueResolver, normalize_value_change
from ..ports.hooks import BuilderHooks
from ..ports.id_gen import NodeIdProvider, UuidNodeIdProvider
from .schema import BuilderSchema, QueryView

_LOGGER = logging.getLogger("querybuilder.builder")

ChangeListener = Callable[[RuleGroup, "str | None", "str | None"], None]

# Accepted property names (wire and attribute spelling) -> Rule attribute.
_RULE_PROPS = {
    "field": "field",
    "operator": "operator",
    "value": "value",
    "parentOperator": "parent_operator",
    "parent_operator": "parent_operator",
    "valueMeta": "value_meta",
    "value_meta": "value_meta",
}


class QueryBuilder:
    """Controller over copy-on-write rule-tree snapshots."""

    def __init__(
        self,
        fields: Iterable[FieldDescriptor | Mapping[str, Any]],
        query: RuleGroup | Rule | Mapping[str, Any] | None = None,
        *,
        settings: BuilderSettings | None = None,
        hooks: BuilderHooks | None = None,
        operators: Iterable[NameLabelPair] | None = None,
        combinators: Iterable[NameLabelPair] | None = None,
        id_provider: NodeIdProvider | None = None,
        on_change: ChangeListener | None = None,
        on_advanced_click: Callable[[], None] | None = None,
        logger: Any = None,
    ) -> None:
        self._fields = [FieldDescriptor.model_validate(f) for f in fields]
        self._settings = settings or get_settings()
        self._combinators = list(combinators or DEFAULT_COMBINATORS)
        self._resolver = FieldResolver(hooks, list(operators) if operators else None)
        self._values = ValueResolver(self._resolver)
        self._policy = CombinatorPolicy(lambda: self._fields)
        self._projector = ValidityProjector()
        self._ids = id_provider or UuidNodeIdProvider()
        self._listeners: list[ChangeListener] = [on_change] if on_change else []
        self._on_advanced_click = on_advanced_click
        self._logger = logger or _LOGGER
        self._root = self._materialize(query)

    # ------------------------------------------------------------------
    # Snapshot access
    # ------------------------------------------------------------------

    @property
    def query(self) -> RuleGroup:
        """Current snapshot. Never mutated by the builder; do not mutate it."""
        return self._root

    @property
    def fields(self) -> list[FieldDescriptor]:
        return list(self._fields)

    @property
    def resolver(self) -> FieldResolver:
        return self._resolver

    @property
    def settings(self) -> BuilderSettings:
        return self._settings

    def find(self, node_id: str) -> Rule | RuleGroup | None:
        return find_node(node_id, self._root)

    def level_of(self, node_id: str) -> int:
        return level_of(node_id, self._root)

    def has_column_child_rule(self, group: RuleGroup | None = None) -> bool:
        return self._policy.has_column_child_rule(self._root if group is None else group)

    def has_measure_child_rule(self, group: RuleGroup | None = None) -> bool:
        return self._policy.has_measure_child_rule(self._root if group is None else group)

    def valid_query(self) -> RuleGroup:
        return self._projector.project(self._root)

    def normal_query(self) -> RuleGroup:
        return self._projector.normal_view(self._root)

    def set_query(self, query: RuleGroup | Rule | Mapping[str, Any] | None) -> RuleGroup:
        """Replace the snapshot with a new external input (no notification)."""
        self._root = self._materialize(query)
        self._logger.debug(
            "query_loaded",
            extra={"root_id": self._root.id, "rule_count": len(self._root.rules)},
        )
        return self._root

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    def create_rule_group(self) -> RuleGroup:
        return RuleGroup(
            id=self._ids.new_group_id(),
            combinator=Combinator(self._combinators[0].name),
            not_=False,
        )

    def create_rule(self) -> Rule:
        """Build a default rule: selected column (or first field), derived operator."""
        if not self._fields:
            raise ValueError("At least one field must be configured to create a rule")
        field = self._fields[0].name
        selected = self._resolver.selected_column()
        if selected:
            field = selected
        operator, parent_operator = self._resolver.derive_operator(field)
        return Rule(
            id=self._ids.new_rule_id(),
            field=field,
            operator=operator,
            parent_operator=parent_operator,
            value="",
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_rule(self, rule: Rule | Mapping[str, Any], parent_id: str) -> bool:
        """Insert ``rule`` under ``parent_id``, ahead of any sibling groups."""
        root = self._clone()
        parent = find_node(parent_id, root)
        if not isinstance(parent, RuleGroup):
            return self._not_found("add_rule", parent_id)
        new_rule = self._coerce(rule, Rule, root)
        new_rule.value = self._values.default_value(new_rule)
        _insert_rule(parent, new_rule)
        self._commit("add_rule", root)
        return True

    def add_rule_at_root(self) -> bool:
        root = self._clone()
        new_rule = self.create_rule()
        self._claim_ids(new_rule, _ids_in(root))
        new_rule.value = self._values.default_value(new_rule)
        _insert_rule(root, new_rule)
        self._commit("add_rule_at_root", root)
        return True

    def add_group(self, group: RuleGroup | Mapping[str, Any] | None, parent_id: str) -> bool:
        """Append ``group`` (seeded with one default rule) under ``parent_id``."""
        root = self._clone()
        parent = find_node(parent_id, root)
        if not isinstance(parent, RuleGroup):
            return self._not_found("add_group", parent_id)
        new_group = self.create_rule_group() if group is None else self._coerce(group, RuleGroup, root)
        seed = self.create_rule()
        seed.value = self._values.default_value(seed)
        new_group.rules.append(seed)
        self._claim_ids(new_group, _ids_in(root))
        parent.rules.append(new_group)
        self._commit("add_group", root)
        return True

    def remove_rule(self, rule_id: str, parent_id: str) -> bool:
        return self._remove("remove_rule", Rule, rule_id, parent_id)

    def remove_group(self, group_id: str, parent_id: str) -> bool:
        return self._remove("remove_group", RuleGroup, group_id, parent_id)

    def change_property(self, prop: str, value: Any, rule_id: str) -> bool:
        """Set one rule property and apply the configured resets."""
        attr = _RULE_PROPS.get(prop)
        if attr is None:
            raise ValueError(f"Unknown rule property {prop!r}")
        root = self._clone()
        rule = find_node(rule_id, root)
        if not isinstance(rule, Rule):
            return self._not_found("change_property", rule_id)

        change = normalize_value_change(prop, value, rule)
        previous_operator = rule.operator
        setattr(rule, attr, change.value)
        if change.sets_meta:
            rule.value_meta = change.value_meta

        if self._settings.reset_on_field_change and attr == "field":
            rule.operator, rule.parent_operator = self._resolver.derive_operator(rule.field)
            rule.value = self._values.default_value(rule)
        if self._settings.reset_on_operator_change and attr == "operator":
            rule.value = self._values.transition_value(rule, previous_operator)
        if self._settings.reset_on_operator_change and attr == "parent_operator":
            rule.operator = self._resolver.operators(rule.field, rule.parent_operator)[0].name
            rule.value = ""

        self._commit("change_property", root, prop=prop, rule_id=rule_id)
        return True

    def clear(self) -> bool:
        """Drop every rule; the root keeps its id, metadata and combinator."""
        root = self._clone()
        root.rules = []
        self._commit("clear", root)
        return True

    # ------------------------------------------------------------------
    # Notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def request_advanced(self) -> bool:
        if self._on_advanced_click is None:
            return False
        self._on_advanced_click()
        return True

    # ------------------------------------------------------------------
    # Renderer surface
    # ------------------------------------------------------------------

    def view(self) -> QueryView:
        normal = self._settings.enable_normal_view
        root = self.normal_query() if normal else self._root
        rule_count = len(root.rules)
        return QueryView(
            root=root,
            rule_count=rule_count,
            no_rules_applied=normal and rule_count == 0,
            show_add_filter=normal,
            show_advanced=normal and not self._settings.enable_drilldown,
        )

    def schema(self) -> BuilderSchema:
        s = self._settings
        return BuilderSchema(
            fields=tuple(self._fields),
            combinators=tuple(self._combinators),
            show_add_group=s.show_add_group,
            show_add_rule=s.show_add_rule,
            show_combinators_between_rules=s.show_combinators_between_rules,
            show_not_toggle=s.show_not_toggle,
            enable_drilldown=s.enable_drilldown,
            get_operators=self._resolver.operators,
            get_parent_operators=self._resolver.parent_operators,
            get_value_editor_type=self._resolver.value_editor_type,
            get_input_type=self._resolver.input_type,
            get_values=self._resolver.values,
            get_placeholder=self._resolver.placeholder,
            get_level=self.level_of,
            is_rule_group=is_rule_group,
            has_column_child_rule=self.has_column_child_rule,
            has_measure_child_rule=self.has_measure_child_rule,
            create_rule=self.create_rule,
            create_rule_group=self.create_rule_group,
            on_rule_add=self.add_rule,
            on_group_add=self.add_group,
            on_rule_remove=self.remove_rule,
            on_group_remove=self.remove_group,
            on_prop_change=self.change_property,
            on_add_rule_at_root=self.add_rule_at_root,
            clear_rule=self.clear,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _materialize(self, query) -> RuleGroup:
        if query is None:
            return self.create_rule_group()
        node = parse_node(query)
        if isinstance(node, Rule):
            root = self.create_rule_group()
            root.rules.append(node)
            node = root
        self._claim_ids(node, set())
        return self._policy.enforce(self._projector.project(node))

    def _claim_ids(self, tree: Rule | RuleGroup, taken: set[str]) -> None:
        """Give every node of ``tree`` an id absent from ``taken``; the first holder keeps it."""
        for node in iter_nodes(tree):
            while not node.id or node.id in taken:
                node.id = (
                    self._ids.new_group_id() if isinstance(node, RuleGroup) else self._ids.new_rule_id()
                )
            taken.add(node.id)

    def _coerce(self, payload, expected: type, root: RuleGroup):
        node = parse_node(payload)
        if not isinstance(node, expected):
            raise ValueError(f"Expected a {expected.__name__} payload, got {type(node).__name__}")
        self._claim_ids(node, _ids_in(root))
        return node

    def _remove(self, operation: str, kind: type, node_id: str, parent_id: str) -> bool:
        root = self._clone()
        parent = find_node(parent_id, root)
        if not isinstance(parent, RuleGroup):
            return self._not_found(operation, parent_id)
        index = next(
            (i for i, child in enumerate(parent.rules) if child.id == node_id and isinstance(child, kind)),
            None,
        )
        if index is None:
            return self._not_found(operation, node_id)
        del parent.rules[index]
        self._commit(operation, self._projector.project(root))
        return True

    def _clone(self) -> RuleGroup:
        return self._root.model_copy(deep=True)

    def _commit(
        self,
        operation: str,
        root: RuleGroup,
        prop: str | None = None,
        rule_id: str | None = None,
    ) -> None:
        self._policy.enforce(root)
        self._root = root
        self._logger.debug(
            "query_committed",
            extra={
                "operation": operation,
                "root_id": root.id,
                "rule_count": len(root.rules),
                "changed_prop": prop,
                "changed_rule_id": rule_id,
            },
        )
        for listener in list(self._listeners):
            listener(root.model_copy(deep=True), prop, rule_id)

    def _not_found(self, operation: str, node_id: str) -> bool:
        self._logger.debug("target_not_found", extra={"operation": operation, "node_id": node_id})
        return False


def _ids_in(tree: RuleGroup) -> set[str]:
    return {node.id for node in iter_nodes(tree) if node.id}


def _insert_rule(parent: RuleGroup, rule: Rule) -> None:
    """Rules go before the first nested group; otherwise they are appended."""
    index = next((i for i, child in enumerate(parent.rules) if isinstance(child, RuleGroup)), None)
    if index is None:
        parent.rules.append(rule)
    else:
        parent.rules.insert(index, rule)
