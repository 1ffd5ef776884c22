"""Locate nodes by id and compute nesting depth."""

from __future__ import annotations

from .query import Rule, RuleGroup

LEVEL_NOT_FOUND = -1


def find_node(node_id: str, tree: Rule | RuleGroup) -> Rule | RuleGroup | None:
    """Depth-first search for the first node whose id matches."""
    if tree.id == node_id:
        return tree
    if isinstance(tree, RuleGroup):
        for child in tree.rules:
            found = find_node(node_id, child)
            if found is not None:
                return found
    return None


def level_of(node_id: str, tree: Rule | RuleGroup, level: int = 0) -> int:
    """Return the depth of ``node_id`` (root = 0), or ``LEVEL_NOT_FOUND``."""
    if tree.id == node_id:
        return level
    if isinstance(tree, RuleGroup):
        for child in tree.rules:
            found = level_of(node_id, child, level + 1)
            if found != LEVEL_NOT_FOUND:
                return found
    return LEVEL_NOT_FOUND
