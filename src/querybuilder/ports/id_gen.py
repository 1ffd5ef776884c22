"""Port: node ID generation strategies."""

from __future__ import annotations

import itertools
import uuid
from typing import Protocol, runtime_checkable


@runtime_checkable
class NodeIdProvider(Protocol):
    """Generate unique ids for rules and groups."""

    def new_rule_id(self) -> str: ...

    def new_group_id(self) -> str: ...


# ---------------------------------------------------------------------------
# Default implementations (pure stdlib, no infra deps)
# ---------------------------------------------------------------------------


class UuidNodeIdProvider:
    """Uses uuid4 for ids, prefixed ``r-`` / ``g-``."""

    def new_rule_id(self) -> str:
        return f"r-{uuid.uuid4().hex}"

    def new_group_id(self) -> str:
        return f"g-{uuid.uuid4().hex}"


class SequentialNodeIdProvider:
    """Deterministic ids (``r-1``, ``g-1``, ...) for tests and fixtures."""

    def __init__(self) -> None:
        self._rules = itertools.count(1)
        self._groups = itertools.count(1)

    def new_rule_id(self) -> str:
        return f"r-{next(self._rules)}"

    def new_group_id(self) -> str:
        return f"g-{next(self._groups)}"
