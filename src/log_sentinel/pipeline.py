"""Driver loop: lines -> events -> alerts -> sinks, one line at a time."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .ingestion.parser import parse_line
from .rules.engine import RuleEngine
from .rules.schemas import Alert
from .stats import AlertStats

LOGGER = logging.getLogger("log_sentinel.pipeline")


@dataclass
class RunResult:
    lines: int = 0
    events: int = 0
    alerts: int = 0


def run_pipeline(
    lines: Iterable[str],
    engine: RuleEngine,
    on_alert: Callable[[Alert], None],
    *,
    stats: Optional[AlertStats] = None,
    result: Optional[RunResult] = None,
) -> RunResult:
    """Process every line from ``lines`` synchronously.

    Each alert goes to ``stats`` (if given) and then ``on_alert``. Errors
    raised while pulling lines (``OSError``) or in the sinks propagate and
    end the run. Pass ``result`` to keep counts visible to the caller if the
    run is interrupted.
    """
    result = result if result is not None else RunResult()
    for line in lines:
        result.lines += 1
        event = parse_line(line)
        if event is None:
            continue
        result.events += 1
        for alert in engine.process(event):
            result.alerts += 1
            if stats is not None:
                stats.observe(alert)
            on_alert(alert)

    LOGGER.info(
        "Processed %d lines (%d events), raised %d alerts",
        result.lines, result.events, result.alerts,
    )
    return result
