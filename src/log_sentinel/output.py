"""Alert rendering for Log Sentinel.

Two line formats are supported:

- ``pretty``: ``[High] brute_force ip=10.0.0.3 user=root :: <message>``
- ``jsonl``: one self-contained JSON object per alert
"""
from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .rules.schemas import Alert
from .stats import AlertStats

OUTPUT_MODES = ("pretty", "jsonl")


def format_pretty(alert: Alert) -> str:
    parts: List[str] = []
    if alert.address is not None:
        parts.append(f"ip={alert.address}")
    if alert.username is not None:
        parts.append(f"user={alert.username}")
    info = f" {' '.join(parts)} ::" if parts else ""
    return f"[{alert.severity.label}] {alert.rule_id}{info} {alert.message}"


def format_json(alert: Alert) -> str:
    """Serialize with pydantic; serialization errors propagate to the caller."""
    return alert.model_dump_json()


class AlertWriter:
    """Output sink: writes one rendered line per alert."""

    def __init__(self, mode: str = "pretty", stream: Optional[TextIO] = None) -> None:
        if mode not in OUTPUT_MODES:
            raise ValueError(f"Unsupported output mode: {mode}")
        self.mode = mode
        self.stream = stream if stream is not None else sys.stdout

    def write(self, alert: Alert) -> None:
        line = format_json(alert) if self.mode == "jsonl" else format_pretty(alert)
        self.stream.write(line + "\n")
        self.stream.flush()


def format_summary(stats: AlertStats, top_n: int = 5) -> str:
    lines = ["", "== Summary ==", "By rule:"]
    for rule_id, count in stats.by_rule():
        lines.append(f"  {rule_id}: {count}")
    lines.append("Top IPs:")
    for address, count in stats.top_addresses(top_n):
        lines.append(f"  {address}: {count}")
    return "\n".join(lines)


def print_summary(stats: AlertStats, *, top_n: int = 5, stream: Optional[TextIO] = None) -> None:
    out = stream if stream is not None else sys.stdout
    out.write(format_summary(stats, top_n) + "\n")
    out.flush()


__all__ = [
    "OUTPUT_MODES",
    "AlertWriter",
    "format_json",
    "format_pretty",
    "format_summary",
    "print_summary",
]
