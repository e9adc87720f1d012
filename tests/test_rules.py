"""Stateless rule and engine tests for Log Sentinel."""
from __future__ import annotations

from ipaddress import ip_address

import pytest

from log_sentinel.ingestion.parser import parse_line
from log_sentinel.ingestion.schemas import Event
from log_sentinel.rules import RULES, RuleEngine, Severity, apply_all, apply_rule

from conftest import (
    ACCEPTED_LINE,
    BASE_TIME,
    FAILED_LINE,
    SUDO_AUTH_FAIL_LINE,
    SUDO_LINE,
    rule_ids,
)


def test_registry_order():
    assert [r.rule_id for r in RULES] == ["auth_failure", "ssh_success", "sudo_usage"]


def test_severity_ordering():
    assert Severity.INFO < Severity.LOW < Severity.MEDIUM < Severity.HIGH
    assert str(Severity.MEDIUM) == "Medium"


@pytest.mark.parametrize(
    "raw",
    [
        "sshd[1]: Failed password for root from 10.0.0.1 port 22",
        "sshd[1]: FAILED PASSWORD for root",
        "pam_unix(sshd:auth): authentication failure; rhost=10.0.0.1",
    ],
)
def test_auth_failure_rule(raw):
    alert = apply_rule(Event(raw=raw), "auth_failure", BASE_TIME)
    assert alert is not None
    assert alert.severity is Severity.MEDIUM
    assert alert.message == "Authentication failure detected"


@pytest.mark.parametrize(
    "raw",
    [
        "Accepted password for bob from 10.0.0.2 port 22",
        "Accepted publickey for bob from 10.0.0.2 port 22",
    ],
)
def test_ssh_success_rule(raw):
    alert = apply_rule(Event(raw=raw), "ssh_success", BASE_TIME)
    assert alert is not None
    assert alert.severity is Severity.INFO


def test_ssh_success_ignores_other_methods():
    event = Event(raw="Accepted keyboard-interactive/pam for bob from 10.0.0.2")
    assert apply_rule(event, "ssh_success", BASE_TIME) is None


@pytest.mark.parametrize(
    "raw,severity",
    [
        (SUDO_AUTH_FAIL_LINE, Severity.HIGH),
        (SUDO_LINE, Severity.LOW),
        ("Jan  2 16:22:00 server sudo: pam_unix(sudo:session): session opened for user root", Severity.INFO),
    ],
)
def test_sudo_usage_severity(raw, severity):
    alert = apply_rule(Event(raw=raw), "sudo_usage", BASE_TIME)
    assert alert is not None
    assert alert.severity is severity


def test_sudo_rule_needs_literal_marker():
    assert apply_rule(Event(raw="SUDO: COMMAND=/bin/ls"), "sudo_usage", BASE_TIME) is None


def test_apply_rule_unknown():
    with pytest.raises(KeyError):
        apply_rule(Event(raw="x"), "nope", BASE_TIME)


def test_apply_all_quiet_line():
    assert apply_all(Event(raw="kernel: eth0 link up"), BASE_TIME) == []


def test_alert_copies_event_fields():
    event = parse_line(FAILED_LINE)
    [alert] = apply_all(event, BASE_TIME)
    assert alert.timestamp == event.timestamp
    assert alert.address == event.address
    assert alert.username == "admin"
    assert alert.raw == FAILED_LINE


def test_alert_timestamp_defaults_to_clock():
    event = Event(raw="Failed password for root from 10.0.0.1")
    [alert] = apply_all(event, BASE_TIME)
    assert alert.timestamp == BASE_TIME


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

def test_engine_single_failure_line(engine):
    event = parse_line(FAILED_LINE)
    alerts = engine.process(event)
    assert rule_ids(alerts) == ["auth_failure"]
    assert alerts[0].severity is Severity.MEDIUM

    state = engine.brute_detector.state_for(ip_address("192.168.1.100"))
    assert state is not None
    assert len(state.recent_failures) == 1


def test_engine_sudo_auth_failure_fires_two_rules(engine):
    alerts = engine.process(parse_line(SUDO_AUTH_FAIL_LINE))
    assert rule_ids(alerts) == ["auth_failure", "sudo_usage"]
    assert [a.severity for a in alerts] == [Severity.MEDIUM, Severity.HIGH]


def test_engine_success_line(engine):
    alerts = engine.process(parse_line(ACCEPTED_LINE))
    assert rule_ids(alerts) == ["ssh_success"]
    assert len(engine.brute_detector) == 0


def test_engine_repeated_line_triggers_brute_force(engine):
    # Same syslog timestamp eight times: all inside one window.
    event = parse_line(FAILED_LINE)
    for _ in range(7):
        assert rule_ids(engine.process(event)) == ["auth_failure"]
    alerts = engine.process(event)
    assert rule_ids(alerts) == ["auth_failure", "brute_force"]
    brute = alerts[-1]
    assert brute.severity is Severity.HIGH
    assert brute.address == ip_address("192.168.1.100")
    assert brute.message == "Possible brute-force attack: 8 failures in 60 seconds"


def test_engine_uses_clock_for_untimed_events(engine, clock):
    event = Event(raw="Failed password for root from 10.9.9.9", address=ip_address("10.9.9.9"))
    [alert] = engine.process(event)
    assert alert.timestamp == clock.now


@pytest.mark.parametrize("threshold,window", [(0, 60), (8, 0), (-1, 60)])
def test_engine_rejects_non_positive_parameters(threshold, window):
    with pytest.raises(ValueError):
        RuleEngine(threshold, window)
