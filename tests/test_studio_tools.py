"""Studio MCP server tests: registered tool set and JSON tool behaviour.

Tools are called through their registered functions against an
in-process session builder; no transport is started.
"""

import json

import pytest

from querybuilder.config.runtime import BuilderSettings
from querybuilder.interface.mcp.observability import metrics_snapshot, reset_metrics
from querybuilder.interface.mcp.server import create_server
from querybuilder.interface.mcp.tools import STUDIO_TOOLS, set_session_builder
from querybuilder.ports.id_gen import SequentialNodeIdProvider
from querybuilder.services.query_builder import QueryBuilder

FIELDS = [
    {"name": "name", "label": "Name"},
    {"name": "region", "label": "Region", "fieldType": "column"},
]

QUERY = {
    "id": "root",
    "combinator": "or",
    "rules": [
        {"id": "r-a", "field": "name", "operator": "=", "value": "x"},
        {"id": "g-x", "combinator": "or", "rules": [{"id": "r-b", "field": "name", "operator": "=", "value": "y"}]},
    ],
}


def _get_tool_names(server) -> set[str]:
    """Extract registered tool names from a FastMCP server."""
    return set(server._tool_manager._tools.keys())


@pytest.fixture
def call():
    builder = QueryBuilder(
        FIELDS, QUERY, settings=BuilderSettings(), id_provider=SequentialNodeIdProvider()
    )
    set_session_builder(builder)
    reset_metrics()
    tools = create_server()._tool_manager._tools

    def _call(name, **kwargs):
        return json.loads(tools[name].fn(**kwargs))

    yield _call
    set_session_builder(None)
    reset_metrics()


def test_studio_exposes_exactly_the_studio_tools():
    tool_names = _get_tool_names(create_server())
    assert tool_names == STUDIO_TOOLS, f"Expected {STUDIO_TOOLS}, got {tool_names}"


class TestQueryTools:
    def test_query_get(self, call):
        result = call("query_get")
        assert result["query"]["id"] == "root"
        assert [n["id"] for n in result["query"]["rules"]] == ["r-a", "g-x"]

    def test_query_get_normal_view(self, call):
        result = call("query_get", normal_view=True)
        assert [n["id"] for n in result["query"]["rules"]] == ["r-a"]

    def test_query_load_normalizes(self, call):
        payload = {"id": "new", "combinator": "and", "rules": [{"id": "g-e", "combinator": "or", "rules": []}]}
        result = call("query_load", query_json=json.dumps(payload))
        assert result["query"] == {"id": "new", "combinator": "and", "not": False, "rules": []}

    def test_query_load_bad_json_is_an_error(self, call):
        result = call("query_load", query_json="{not json")
        assert "error" in result
        assert metrics_snapshot()["errors"]["query_load"] == 1

    def test_query_clear(self, call):
        result = call("query_clear")
        assert result["applied"] is True
        assert result["query"]["rules"] == []


class TestMutationTools:
    def test_rule_add_default_rule(self, call):
        result = call("rule_add", parent_id="root")
        assert result["applied"] is True
        assert [n["id"] for n in result["query"]["rules"]] == ["r-a", "r-1", "g-x"]

    def test_rule_add_payload_forces_and(self, call):
        result = call("rule_add", parent_id="g-x", rule_json=json.dumps({"field": "region", "operator": "="}))
        assert result["query"]["combinator"] == "and"
        assert result["query"]["rules"][1]["combinator"] == "and"

    def test_rule_add_unknown_parent(self, call):
        result = call("rule_add", parent_id="missing")
        assert result["applied"] is False

    def test_rule_add_root(self, call):
        result = call("rule_add_root")
        assert result["query"]["rules"][1]["field"] == "name"

    def test_group_add(self, call):
        result = call("group_add", parent_id="root", combinator="or", negate=True)
        group = result["query"]["rules"][-1]
        assert group["combinator"] == "or"
        assert group["not"] is True
        assert len(group["rules"]) == 1

    def test_rule_remove_prunes_group(self, call):
        result = call("rule_remove", rule_id="r-b", parent_id="g-x")
        assert result["applied"] is True
        assert [n["id"] for n in result["query"]["rules"]] == ["r-a"]

    def test_group_remove(self, call):
        result = call("group_remove", group_id="g-x", parent_id="root")
        assert [n["id"] for n in result["query"]["rules"]] == ["r-a"]

    def test_rule_update(self, call):
        result = call("rule_update", rule_id="r-a", prop="value", value_json='"z"')
        assert result["query"]["rules"][0]["value"] == "z"

    def test_rule_update_unknown_prop_is_an_error(self, call):
        result = call("rule_update", rule_id="r-a", prop="colour", value_json='"red"')
        assert "colour" in result["error"]


class TestInspectionTools:
    def test_node_level(self, call):
        assert call("node_level", node_id="r-b") == {"node_id": "r-b", "level": 2}
        assert call("node_level", node_id="missing")["level"] == -1

    def test_field_options_defaults(self, call):
        result = call("field_options", field="name")
        assert len(result["operators"]) == 16
        assert result["operators"][0] == {"name": "in", "label": "in"}
        assert result["parent_operators"] == []
        assert result["value_editor_type"] == "text"
        assert result["values"] == []

    def test_builder_metrics_counts_calls(self, call):
        call("query_get")
        call("query_get")
        call("node_level", node_id="root")
        metrics = call("builder_metrics")
        assert metrics["tool_calls"] == {"query_get": 2, "node_level": 1}
        assert metrics["errors"] == {}
        assert metrics["rule_count"] == 2

    def test_builder_metrics_separates_edits_noops_and_errors(self, call):
        call("rule_add", parent_id="root")
        call("rule_remove", rule_id="missing", parent_id="root")
        call("rule_update", rule_id="r-a", prop="colour", value_json='"red"')
        metrics = call("builder_metrics")
        assert metrics["edits"] == {"rule_add": 1}
        assert metrics["noops"] == {"rule_remove": 1}
        assert metrics["errors"] == {"rule_update": 1}
        assert metrics["rule_count"] == 3

    def test_tool_call_is_logged_with_outcome(self, call, caplog):
        caplog.set_level("INFO", logger="querybuilder.mcp")
        call("rule_remove", rule_id="r-b", parent_id="g-x")
        record = caplog.records[-1]
        assert record.getMessage() == "studio_tool"
        assert record.tool == "rule_remove"
        assert record.applied is True
        assert record.node_id == "r-b"
        assert record.rule_count == 1
