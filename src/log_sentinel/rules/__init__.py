"""Rule-based detection package for Log Sentinel.

Holds the stateless signatures, the stateful brute-force detector and the
engine that runs them all. Typical usage:

from log_sentinel.rules import RuleEngine
engine = RuleEngine(threshold=8, window_secs=60)
alerts = engine.process(event)
"""
from __future__ import annotations

from .brute import COOLDOWN, BruteForceDetector, BruteForceState
from .engine import RuleEngine
from .schemas import Alert, Severity
from .signatures import RULES, apply_all, apply_rule, is_auth_failure

__all__ = [
    "Alert",
    "BruteForceDetector",
    "BruteForceState",
    "COOLDOWN",
    "RULES",
    "RuleEngine",
    "Severity",
    "apply_all",
    "apply_rule",
    "is_auth_failure",
]
