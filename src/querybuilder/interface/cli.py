"""CLI commands for inspecting and normalizing query files."""

import argparse
import json
import logging
import sys
from pathlib import Path

from ..config.runtime import get_settings
from ..domain.query import dump_query, iter_nodes
from ..services.query_builder import QueryBuilder
from ..wiring import load_fields, load_query


def _load_builder(query_path: Path, fields_path: Path | None) -> QueryBuilder:
    """Build a session for one query file. Exits on a missing file."""
    if not query_path.exists():
        print(f"Error: query file not found: {query_path}", file=sys.stderr)
        sys.exit(1)
    settings = get_settings()
    fields_file = fields_path or (Path(settings.fields_file) if settings.fields_file else None)
    if fields_file is not None and not fields_file.exists():
        print(f"Error: fields file not found: {fields_file}", file=sys.stderr)
        sys.exit(1)
    fields = load_fields(fields_file) if fields_file is not None else []
    return QueryBuilder(fields, load_query(query_path), settings=settings)


def normalize(query_path: Path, fields_path: Path | None = None, normal_view: bool = False) -> dict:
    """Return the pruned, combinator-enforced form of a query file."""
    builder = _load_builder(query_path, fields_path)
    root = builder.normal_query() if normal_view else builder.query
    return dump_query(root)


def levels(query_path: Path, fields_path: Path | None = None) -> list[tuple[str, int]]:
    """Return ``(id, level)`` for every node of a normalized query file."""
    builder = _load_builder(query_path, fields_path)
    return [(node.id, builder.level_of(node.id)) for node in iter_nodes(builder.query)]


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Inspect rule-tree query files")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    normalize_parser = subparsers.add_parser(
        "normalize", help="Print the query with empty groups pruned and combinators enforced"
    )
    normalize_parser.add_argument("file", type=Path, help="Query JSON file")
    normalize_parser.add_argument(
        "--fields", type=Path, default=None, help="Field descriptors JSON file"
    )
    normalize_parser.add_argument(
        "--normal-view", action="store_true", help="Keep only the root's direct rules"
    )

    levels_parser = subparsers.add_parser("levels", help="Print every node id with its nesting level")
    levels_parser.add_argument("file", type=Path, help="Query JSON file")
    levels_parser.add_argument(
        "--fields", type=Path, default=None, help="Field descriptors JSON file"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else get_settings().log_level)

    if args.command == "normalize":
        print(json.dumps(normalize(args.file, args.fields, args.normal_view), indent=2))
    elif args.command == "levels":
        for node_id, level in levels(args.file, args.fields):
            print(f"{'  ' * level}{node_id}\t{level}")
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
