"""ValidityProjector: rebuild a tree without empty groups.

Semantics:
- Groups keep their id, combinator, negation and display metadata.
- Rules are always kept, reduced to id/field/operator/parentOperator/value
  (plus valueMeta when present).
- A nested group survives only if its rebuilt ``rules`` is non-empty, so
  emptiness cascades upward.
- The root always survives, even with no rules.
- ``normal_view`` keeps only the root's direct rules and drops every group.
"""

from __future__ import annotations

from .query import Rule, RuleGroup


class ValidityProjector:
    """Bottom-up rebuild of rule trees."""

    def project(self, root: RuleGroup) -> RuleGroup:
        """Return a pruned copy of ``root``; the input is not modified."""
        rebuilt = _group_shell(root)
        for child in root.rules:
            projected = self._project_node(child)
            if projected is not None:
                rebuilt.rules.append(projected)
        return rebuilt

    def normal_view(self, root: RuleGroup) -> RuleGroup:
        """Flattened view: root metadata plus its direct rules only."""
        flat = _group_shell(root)
        flat.rules = [
            child.model_copy(deep=True) for child in root.rules if isinstance(child, Rule)
        ]
        return flat

    def _project_node(self, node: Rule | RuleGroup) -> Rule | RuleGroup | None:
        if isinstance(node, Rule):
            return _essential_rule(node)
        group = _group_shell(node)
        for child in node.rules:
            projected = self._project_node(child)
            if projected is not None:
                group.rules.append(projected)
        return group if group.rules else None


def _group_shell(group: RuleGroup) -> RuleGroup:
    return RuleGroup(
        id=group.id,
        combinator=group.combinator,
        not_=group.not_,
        name=group.name,
        email=group.email,
        is_active=group.is_active,
        disabled=group.disabled,
    )


def _essential_rule(rule: Rule) -> Rule:
    reduced = Rule(
        id=rule.id,
        field=rule.field,
        operator=rule.operator,
        parent_operator=rule.parent_operator,
        value=rule.value,
    )
    if rule.value_meta is not None:
        reduced.value_meta = rule.value_meta
    return reduced.model_copy(deep=True)
