"""Stateful brute-force detection for Log Sentinel.

Per source address the detector keeps a time-ordered queue of recent
authentication failures and the time of its last brute-force alert:

    unseen -> accumulating -> triggered -> cooling down -> ...

An alert fires when the failures inside the trailing window reach the
threshold, at most once per address per :data:`COOLDOWN`. Addresses are
tracked independently of each other and of usernames.
"""
from __future__ import annotations

import bisect
import logging
from collections import OrderedDict, deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Deque, Optional

from ..ingestion.schemas import Event, IPAddress
from .schemas import Alert, Severity
from .signatures import is_auth_failure

LOGGER = logging.getLogger("log_sentinel.rules.brute")

RULE_ID = "brute_force"
COOLDOWN = timedelta(minutes=5)


@dataclass
class BruteForceState:
    recent_failures: Deque[datetime] = field(default_factory=deque)
    last_alert_at: Optional[datetime] = None


class BruteForceDetector:
    """Sliding-window failure counter keyed by source address.

    ``max_tracked`` optionally bounds the number of addresses kept; beyond
    it the least recently touched address is forgotten. Left unset, every
    address seen stays tracked for the life of the detector.
    """

    def __init__(
        self,
        threshold: int = 8,
        window_secs: int = 60,
        *,
        max_tracked: Optional[int] = None,
    ) -> None:
        if threshold <= 0:
            raise ValueError("threshold must be positive")
        if window_secs <= 0:
            raise ValueError("window_secs must be positive")
        if max_tracked is not None and max_tracked <= 0:
            raise ValueError("max_tracked must be positive")
        self.threshold = threshold
        self.window_secs = window_secs
        self.window = timedelta(seconds=window_secs)
        self.max_tracked = max_tracked
        self._states: "OrderedDict[IPAddress, BruteForceState]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, address: object) -> bool:
        return address in self._states

    def state_for(self, address: IPAddress) -> Optional[BruteForceState]:
        return self._states.get(address)

    def _touch(self, address: IPAddress) -> BruteForceState:
        state = self._states.get(address)
        if state is None:
            state = self._states[address] = BruteForceState()
            if self.max_tracked is not None and len(self._states) > self.max_tracked:
                evicted, _ = self._states.popitem(last=False)
                LOGGER.debug("Evicted %s from brute-force tracking", evicted)
        else:
            self._states.move_to_end(address)
        return state

    def check(self, event: Event, now: datetime) -> Optional[Alert]:
        """Observe one event; return a HIGH alert if it completes a burst.

        Non-failure lines and failures without an address leave all state
        untouched. ``now`` is used when the event has no timestamp.
        """
        if not is_auth_failure(event.raw) or event.address is None:
            return None

        when = event.timestamp or now
        state = self._touch(event.address)

        queue = state.recent_failures
        if queue and when < queue[-1]:
            bisect.insort(queue, when)
        else:
            queue.append(when)

        cutoff = when - self.window
        while queue and queue[0] < cutoff:
            queue.popleft()

        if len(queue) < self.threshold:
            return None

        if state.last_alert_at is not None and when - state.last_alert_at < COOLDOWN:
            LOGGER.debug("Suppressed brute_force for %s (cooldown)", event.address)
            return None

        state.last_alert_at = when
        return Alert(
            rule_id=RULE_ID,
            severity=Severity.HIGH,
            timestamp=when,
            address=event.address,
            username=event.username,
            message=(
                f"Possible brute-force attack: {len(queue)} failures "
                f"in {self.window_secs} seconds"
            ),
            raw=event.raw,
        )


__all__ = ["BruteForceDetector", "BruteForceState", "COOLDOWN", "RULE_ID"]
