"""Rule engine: runs every detection rule against one event."""
from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from dateutil import tz

from ..ingestion.schemas import Event
from .brute import BruteForceDetector
from .schemas import Alert
from .signatures import apply_all


def local_now() -> datetime:
    return datetime.now(tz.tzlocal())


class RuleEngine:
    """Owns the rule set and the brute-force detector's per-address state.

    Build one per run and pass it down; instances are not thread-safe.
    """

    def __init__(
        self,
        threshold: int = 8,
        window_secs: int = 60,
        *,
        max_tracked: Optional[int] = None,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self.brute_detector = BruteForceDetector(threshold, window_secs, max_tracked=max_tracked)
        self.clock = clock

    def process(self, event: Event) -> List[Alert]:
        """Return 0-4 alerts in order: auth_failure, ssh_success, sudo_usage, brute_force."""
        now = self.clock()
        alerts = apply_all(event, now)
        brute = self.brute_detector.check(event, now)
        if brute is not None:
            alerts.append(brute)
        return alerts
