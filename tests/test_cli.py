"""CLI command tests against query/field files on disk."""

import json

import pytest

from querybuilder.config.runtime import get_settings
from querybuilder.interface.cli import levels, main, normalize


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.delenv("QUERYBUILDER_FIELDS_FILE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def files(tmp_path):
    query = {
        "id": "root",
        "combinator": "or",
        "rules": [
            {"id": "r-a", "field": "name", "operator": "=", "value": "x"},
            {"id": "g-x", "combinator": "or", "rules": [{"id": "r-b", "field": "region", "operator": "="}]},
            {"id": "g-empty", "combinator": "and", "rules": []},
        ],
    }
    fields = [
        {"name": "name", "label": "Name"},
        {"name": "region", "label": "Region", "fieldType": "column"},
    ]
    query_path = tmp_path / "query.json"
    fields_path = tmp_path / "fields.json"
    query_path.write_text(json.dumps(query))
    fields_path.write_text(json.dumps(fields))
    return query_path, fields_path


def test_normalize_prunes_and_enforces(files):
    query_path, fields_path = files
    result = normalize(query_path, fields_path)
    assert [n["id"] for n in result["rules"]] == ["r-a", "g-x"]
    assert result["combinator"] == "and"
    assert result["rules"][1]["combinator"] == "and"


def test_normalize_without_fields_keeps_combinators(files):
    query_path, _ = files
    result = normalize(query_path)
    assert result["combinator"] == "or"


def test_normalize_normal_view(files):
    query_path, fields_path = files
    result = normalize(query_path, fields_path, normal_view=True)
    assert [n["id"] for n in result["rules"]] == ["r-a"]


def test_levels(files):
    query_path, fields_path = files
    assert levels(query_path, fields_path) == [("root", 0), ("r-a", 1), ("g-x", 1), ("r-b", 2)]


def test_missing_query_file_exits(tmp_path):
    with pytest.raises(SystemExit):
        normalize(tmp_path / "absent.json")


def test_main_normalize_prints_json(files, capsys):
    query_path, fields_path = files
    main(["normalize", str(query_path), "--fields", str(fields_path)])
    printed = json.loads(capsys.readouterr().out)
    assert printed["id"] == "root"
