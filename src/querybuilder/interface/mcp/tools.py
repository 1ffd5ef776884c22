"""Tool registry for the studio MCP server.

One in-process builder session per server. Every tool returns JSON;
bad input comes back as ``{"error": ...}`` rather than raising.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from ...domain.query import dump_query
from ...services.query_builder import QueryBuilder
from ...wiring import build_query_builder
from .observability import ToolOutcome, metrics_snapshot, record_tool_call

STUDIO_TOOLS = frozenset({
    "query_get",
    "query_load",
    "query_clear",
    "rule_add",
    "rule_add_root",
    "group_add",
    "rule_remove",
    "group_remove",
    "rule_update",
    "node_level",
    "field_options",
    "builder_metrics",
})

_session: QueryBuilder | None = None


def _get_builder() -> QueryBuilder:
    global _session
    if _session is None:
        _session = build_query_builder()
    return _session


def set_session_builder(builder: QueryBuilder | None) -> None:
    """Replace (or drop, with ``None``) the session builder."""
    global _session
    _session = builder


def _jsonable(items: list[Any]) -> list[Any]:
    return [item.model_dump() if isinstance(item, BaseModel) else item for item in items]


def _mutation_result(builder: QueryBuilder, applied: bool) -> dict[str, Any]:
    return {"applied": applied, "query": dump_query(builder.query)}


def _invoke(
    tool: str,
    action: Callable[[QueryBuilder], dict[str, Any]],
    node_id: str | None = None,
) -> str:
    start = time.perf_counter()
    builder = _get_builder()
    error: str | None = None
    try:
        result = action(builder)
    except ValueError as exc:
        error = str(exc)
        result = {"error": error}
    latency_ms = (time.perf_counter() - start) * 1000
    record_tool_call(
        ToolOutcome(
            tool=tool,
            root_id=builder.query.id,
            rule_count=len(builder.query.rules),
            latency_ms=latency_ms,
            applied=result.get("applied"),
            node_id=node_id,
            error=error,
        )
    )
    return json.dumps(result)


def register_studio_tools(mcp):
    """Register the query-editing tools."""

    @mcp.tool()
    def query_get(normal_view: bool = False) -> str:
        """Return the current query.

        Args:
            normal_view: Return only the root's direct rules (groups dropped)

        Returns:
            JSON with the query tree
        """
        def action(b: QueryBuilder) -> dict[str, Any]:
            root = b.normal_query() if normal_view else b.query
            return {"query": dump_query(root)}
        return _invoke("query_get", action)

    @mcp.tool()
    def query_load(query_json: str) -> str:
        """Replace the current query with a new one (group or bare rule).

        Args:
            query_json: JSON object of the query tree

        Returns:
            JSON with the normalized query tree
        """
        return _invoke(
            "query_load",
            lambda b: {"query": dump_query(b.set_query(json.loads(query_json)))},
        )

    @mcp.tool()
    def query_clear() -> str:
        """Remove every rule from the query, keeping the root."""
        return _invoke("query_clear", lambda b: _mutation_result(b, b.clear()))

    @mcp.tool()
    def rule_add(parent_id: str, rule_json: str | None = None) -> str:
        """Add a rule under a group; rules are placed ahead of nested groups.

        Args:
            parent_id: Id of the group receiving the rule
            rule_json: Optional JSON rule; a default rule is built when omitted

        Returns:
            JSON with applied flag and the query tree
        """
        def action(b: QueryBuilder) -> dict[str, Any]:
            rule = json.loads(rule_json) if rule_json else b.create_rule()
            return _mutation_result(b, b.add_rule(rule, parent_id))
        return _invoke("rule_add", action, parent_id)

    @mcp.tool()
    def rule_add_root() -> str:
        """Add a default rule directly under the root."""
        return _invoke("rule_add_root", lambda b: _mutation_result(b, b.add_rule_at_root()))

    @mcp.tool()
    def group_add(parent_id: str, combinator: str = "and", negate: bool = False) -> str:
        """Add a group (seeded with one default rule) under a group.

        Args:
            parent_id: Id of the group receiving the new group
            combinator: 'and' or 'or'
            negate: Invert the new group's result

        Returns:
            JSON with applied flag and the query tree
        """
        group = {"combinator": combinator, "not": negate, "rules": []}
        return _invoke(
            "group_add", lambda b: _mutation_result(b, b.add_group(group, parent_id)), parent_id
        )

    @mcp.tool()
    def rule_remove(rule_id: str, parent_id: str) -> str:
        """Remove a rule; groups left empty are pruned."""
        return _invoke(
            "rule_remove",
            lambda b: _mutation_result(b, b.remove_rule(rule_id, parent_id)),
            rule_id,
        )

    @mcp.tool()
    def group_remove(group_id: str, parent_id: str) -> str:
        """Remove a group and everything below it; groups left empty are pruned."""
        return _invoke(
            "group_remove",
            lambda b: _mutation_result(b, b.remove_group(group_id, parent_id)),
            group_id,
        )

    @mcp.tool()
    def rule_update(rule_id: str, prop: str, value_json: str) -> str:
        """Change one property of a rule.

        Args:
            rule_id: Id of the rule
            prop: 'field', 'operator', 'parentOperator', 'value' or 'valueMeta'
            value_json: JSON-encoded new value (strings must be quoted)

        Returns:
            JSON with applied flag and the query tree
        """
        return _invoke(
            "rule_update",
            lambda b: _mutation_result(b, b.change_property(prop, json.loads(value_json), rule_id)),
            rule_id,
        )

    @mcp.tool()
    def node_level(node_id: str) -> str:
        """Return the nesting level of a node (root = 0, -1 if absent)."""
        return _invoke(
            "node_level", lambda b: {"node_id": node_id, "level": b.level_of(node_id)}, node_id
        )

    @mcp.tool()
    def field_options(
        field: str,
        operator: str | None = None,
        parent_operator: str | None = None,
    ) -> str:
        """Resolve operators, editor kinds, values and placeholder for a field.

        Args:
            field: Field name
            operator: Operator to resolve editor/values for (default: first operator)
            parent_operator: Outer operator for two-tier operator sets

        Returns:
            JSON with operators, parent_operators, value_editor_type, input_type,
            values and placeholder
        """
        def action(b: QueryBuilder) -> dict[str, Any]:
            r = b.resolver
            operators = r.operators(field, parent_operator)
            op = operator or operators[0].name
            return {
                "field": field,
                "operators": _jsonable(operators),
                "parent_operators": _jsonable(r.parent_operators(field)),
                "value_editor_type": r.value_editor_type(field, op, parent_operator),
                "input_type": r.input_type(field, op),
                "values": _jsonable(r.values(field, op)),
                "placeholder": r.placeholder(field, op, parent_operator),
            }
        return _invoke("field_options", action)

    @mcp.tool()
    def builder_metrics() -> str:
        """Return per-tool call, error, edit and no-op counters plus the current rule count."""
        return json.dumps(metrics_snapshot())
