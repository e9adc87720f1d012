"""Stateless rule signatures for Log Sentinel.

Each rule inspects a single :class:`Event` and either stays quiet or
returns the severity it fires with. ``apply_all`` runs every rule in the
fixed registry order and renders the hits as :class:`Alert` objects.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from ..ingestion.schemas import Event
from .schemas import Alert, Severity

AUTH_FAILURE_MARKERS = ("failed password", "authentication failure")
SSH_SUCCESS_MARKERS = ("accepted password", "accepted publickey")


# ---------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------

def is_auth_failure(raw: str) -> bool:
    """True if the line reports a failed authentication (case-insensitive)."""
    lowered = raw.lower()
    return any(marker in lowered for marker in AUTH_FAILURE_MARKERS)


@dataclass(frozen=True)
class Rule:
    rule_id: str
    message: str
    fn: Callable[[Event], Optional[Severity]]

    def run(self, event: Event, now: datetime) -> Optional[Alert]:
        severity = self.fn(event)
        if severity is None:
            return None
        return Alert(
            rule_id=self.rule_id,
            severity=severity,
            timestamp=event.timestamp or now,
            address=event.address,
            username=event.username,
            message=self.message,
            raw=event.raw,
        )


# ---------------------------------------------------------------------
# Rule implementations
# ---------------------------------------------------------------------

def _rule_auth_failure(event: Event) -> Optional[Severity]:
    return Severity.MEDIUM if is_auth_failure(event.raw) else None


def _rule_ssh_success(event: Event) -> Optional[Severity]:
    lowered = event.raw.lower()
    if any(marker in lowered for marker in SSH_SUCCESS_MARKERS):
        return Severity.INFO
    return None


def _rule_sudo_usage(event: Event) -> Optional[Severity]:
    """sudo entries: failed auth is HIGH, an executed COMMAND= is LOW."""
    raw = event.raw
    if "sudo:" not in raw:
        return None
    if "authentication failure" in raw.lower():
        return Severity.HIGH
    if "COMMAND=" in raw:
        return Severity.LOW
    return Severity.INFO


# ---------------------------------------------------------------------
# Rule registry (evaluation order is significant)
# ---------------------------------------------------------------------

RULES: List[Rule] = [
    Rule(
        rule_id="auth_failure",
        message="Authentication failure detected",
        fn=_rule_auth_failure,
    ),
    Rule(
        rule_id="ssh_success",
        message="Successful SSH login",
        fn=_rule_ssh_success,
    ),
    Rule(
        rule_id="sudo_usage",
        message="Sudo command executed or attempted",
        fn=_rule_sudo_usage,
    ),
]

RULE_INDEX = {r.rule_id: r for r in RULES}


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def apply_rule(event: Event, rule_id: str, now: datetime) -> Optional[Alert]:
    """Apply a single rule by id."""
    if rule_id not in RULE_INDEX:
        raise KeyError(f"Unknown rule: {rule_id}")
    return RULE_INDEX[rule_id].run(event, now)


def apply_all(event: Event, now: datetime) -> List[Alert]:
    """Apply every stateless rule in registry order.

    ``now`` stamps alerts for events that carry no timestamp of their own.
    """
    alerts: List[Alert] = []
    for rule in RULES:
        alert = rule.run(event, now)
        if alert is not None:
            alerts.append(alert)
    return alerts


__all__ = [
    "AUTH_FAILURE_MARKERS",
    "Rule",
    "RULES",
    "RULE_INDEX",
    "apply_all",
    "apply_rule",
    "is_auth_failure",
]
