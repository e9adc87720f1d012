"""
Pytest configuration & shared fixtures for Log Sentinel.

Also ensures modules under `src/` are importable inside tests by
inserting that directory at the front of sys.path.

Provides:
- Sample auth/sudo log lines and a temporary auth log file
- A fixed, controllable clock and a RuleEngine bound to it
- Helpers to build failure events at chosen offsets
- FastAPI TestClient bound to a fresh app
"""
from __future__ import annotations

# --- Make `src` importable for tests -----------------------------------------
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
sys.path.insert(0, str(SRC_PATH))  # highest priority

# -----------------------------------------------------------------------------
from datetime import datetime, timedelta
from ipaddress import ip_address
from typing import Callable, Dict, List

import pytest
from dateutil import tz

from log_sentinel.ingestion.schemas import Event
from log_sentinel.rules.engine import RuleEngine


# ---------------------------------------------------------------------------
# Sample log contents
# ---------------------------------------------------------------------------

FAILED_LINE = "Jan 2 15:04:05 server sshd[1]: Failed password for admin from 192.168.1.100 port 22 ssh2"
ACCEPTED_LINE = "Jan  2 15:10:23 server sshd[5678]: Accepted publickey for alice from 10.0.0.50 port 54321 ssh2"
SUDO_LINE = "Jan  2 16:20:15 server sudo: alice : TTY=pts/0 ; PWD=/home/alice ; USER=root ; COMMAND=/bin/cat /etc/shadow"
SUDO_AUTH_FAIL_LINE = "Jan  2 16:21:00 server sudo: pam_unix(sudo:auth): authentication failure; logname=bob uid=1000 euid=0 tty=/dev/pts/1 ruser=bob rhost=  user=bob"

AUTH_SAMPLE = "\n".join([
    "Jan  7 12:01:02 web-1 sshd[1234]: Failed password for invalid user admin from 10.0.0.3 port 5555 ssh2",
    "Jan  7 12:01:05 web-1 sshd[1234]: Failed password for root from 10.0.0.3 port 5556 ssh2",
    "",
    "Jan  7 12:01:07 web-1 sshd[1234]: Accepted password for ubuntu from 10.0.0.4 port 6001 ssh2",
    SUDO_LINE,
]) + "\n"

# Fixed reference instant, well clear of any DST transition.
BASE_TIME = datetime(2024, 1, 2, 15, 0, 0, tzinfo=tz.tzutc())


# ---------------------------------------------------------------------------
# Filesystem fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def sample_logs(tmp_path: Path) -> Dict[str, Path]:
    auth = tmp_path / "auth_small.log"
    auth.write_text(AUTH_SAMPLE, encoding="utf-8")
    return {"auth": auth}


# ---------------------------------------------------------------------------
# Clock / engine fixtures
# ---------------------------------------------------------------------------

class FakeClock:
    """Callable clock whose value tests move explicitly."""

    def __init__(self, start: datetime = BASE_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def engine(clock: FakeClock) -> RuleEngine:
    return RuleEngine(threshold=8, window_secs=60, clock=clock)


@pytest.fixture()
def failure_at() -> Callable[..., Event]:
    """Build a failed-password event for ``address`` at ``BASE_TIME + offset`` seconds."""

    def _make(offset: float, address: str = "192.168.1.100", user: str = "admin") -> Event:
        return Event(
            timestamp=BASE_TIME + timedelta(seconds=offset),
            address=ip_address(address),
            username=user,
            raw=f"sshd[1]: Failed password for {user} from {address} port 22 ssh2",
        )

    return _make


def rule_ids(alerts) -> List[str]:
    return [a.rule_id for a in alerts]


# ---------------------------------------------------------------------------
# API client fixture
# ---------------------------------------------------------------------------

@pytest.fixture()
def api_client():
    from fastapi.testclient import TestClient

    from log_sentinel.api.app import create_app
    from log_sentinel.config import SentinelConfig

    app = create_app(SentinelConfig(brute_threshold=3, brute_window_secs=60))
    return TestClient(app)
