"""Session activity for the studio server.

Every tool call produces one ``ToolOutcome``: it is logged as a
``studio_tool`` record and folded into ``SessionMetrics``. Edits that hit
an unknown id (``applied`` false) are counted as no-ops, apart from errors.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import asdict, dataclass
from typing import Any

_LOGGER = logging.getLogger("querybuilder.mcp")


@dataclass(frozen=True)
class ToolOutcome:
    """What one tool call did to the session query."""

    tool: str
    root_id: str | None
    rule_count: int
    latency_ms: float
    applied: bool | None = None  # None for read-only tools
    node_id: str | None = None
    error: str | None = None


class SessionMetrics:
    """Counters over the tool calls of one studio session."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.calls: Counter[str] = Counter()
        self.errors: Counter[str] = Counter()
        self.edits: Counter[str] = Counter()
        self.noops: Counter[str] = Counter()
        self.rule_count = 0

    def record(self, outcome: ToolOutcome) -> None:
        self.calls[outcome.tool] += 1
        self.rule_count = outcome.rule_count
        if outcome.error:
            self.errors[outcome.tool] += 1
        elif outcome.applied is True:
            self.edits[outcome.tool] += 1
        elif outcome.applied is False:
            self.noops[outcome.tool] += 1

    def snapshot(self) -> dict[str, Any]:
        return {
            "tool_calls": dict(self.calls),
            "errors": dict(self.errors),
            "edits": dict(self.edits),
            "noops": dict(self.noops),
            "rule_count": self.rule_count,
        }


METRICS = SessionMetrics()


def record_tool_call(outcome: ToolOutcome) -> None:
    """Log one tool call and fold it into the session counters."""
    payload = {k: v for k, v in asdict(outcome).items() if v is not None}
    payload["latency_ms"] = round(outcome.latency_ms, 2)
    _LOGGER.log(logging.WARNING if outcome.error else logging.INFO, "studio_tool", extra=payload)
    METRICS.record(outcome)


def metrics_snapshot() -> dict[str, Any]:
    return METRICS.snapshot()


def reset_metrics() -> None:
    METRICS.reset()
