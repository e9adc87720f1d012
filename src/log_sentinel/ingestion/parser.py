# src/log_sentinel/ingestion/parser.py
from __future__ import annotations

import ipaddress
import re
from datetime import datetime, tzinfo as TzInfo
from typing import List, Optional, Pattern

from dateutil import tz

from .schemas import Event, IPAddress

# =========================
# Regexes (line-level)
# =========================

_IPV4_RE = re.compile(r"(?<!\d)\d{1,3}(?:\.\d{1,3}){3}(?!\d)")

# Full eight-group form, or a "::" compressed form with at least one group.
_HEX = r"[0-9a-fA-F]{1,4}"
_IPV6_RE = re.compile(
    rf"""
    (?<![0-9A-Za-z:])
    (?:
        (?:{_HEX}:){{7}}{_HEX}
      | (?:{_HEX}:){{1,7}}:(?:{_HEX}(?::{_HEX}){{0,6}})?
      | ::{_HEX}(?::{_HEX}){{0,6}}
    )
    (?![0-9A-Za-z:])
    """,
    re.VERBOSE,
)

# Tried in order; the first pattern that matches anywhere wins.
# "USER=" is sudo's target account, not the invoking one.
_USER_PATTERNS: List[Pattern[str]] = [
    re.compile(r"Failed password for (?P<user>\S+)"),
    re.compile(r"Accepted \w+ for (?P<user>\S+)"),
    re.compile(r"invalid user (?P<user>\S+)"),
    re.compile(r"USER=(?P<user>\S+)"),
    re.compile(r"for (?P<user>\S+) from"),
]

# Syslog prefix: "Jan  2 17:30:45" or "Jan 2 17:30:45"
_SYSLOG_TS_RE = re.compile(
    r"^(?P<mon>[A-Z][a-z]{2})\s+(?P<day>\d{1,2})\s+(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
)

_MONTHS = {
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12,
}


# =========================
# Field extractors
# =========================

def _first_address(pattern: Pattern[str], line: str) -> Optional[IPAddress]:
    m = pattern.search(line)
    if not m:
        return None
    try:
        return ipaddress.ip_address(m.group(0))
    except ValueError:
        return None


def extract_ip(line: str) -> Optional[IPAddress]:
    """Return the first IPv4 address in ``line``, else the first IPv6 one.

    Only the first candidate of each family is considered; a candidate that
    does not form a valid address counts as no address.
    """
    return _first_address(_IPV4_RE, line) or _first_address(_IPV6_RE, line)


def extract_user(line: str) -> Optional[str]:
    for pattern in _USER_PATTERNS:
        m = pattern.search(line)
        if m:
            return m.group("user")
    return None


def extract_ts(line: str, *, tzinfo: Optional[TzInfo] = None) -> Optional[datetime]:
    """Parse a leading syslog timestamp in the current year and local zone.

    Returns ``None`` for unknown months, impossible dates, and wall-clock
    times that are ambiguous or nonexistent in the local zone (DST shifts).
    """
    m = _SYSLOG_TS_RE.match(line)
    if not m:
        return None

    month = _MONTHS.get(m.group("mon"))
    if month is None:
        return None

    zone = tzinfo or tz.tzlocal()
    year = datetime.now(zone).year
    try:
        ts = datetime(
            year,
            month,
            int(m.group("day")),
            int(m.group("hour")),
            int(m.group("minute")),
            int(m.group("second")),
            tzinfo=zone,
        )
    except ValueError:
        return None

    if not tz.datetime_exists(ts) or tz.datetime_ambiguous(ts):
        return None
    return ts


# =========================
# Parser (line -> Event)
# =========================

def parse_line(line: str) -> Optional[Event]:
    """Best-effort parse of one raw line into an :class:`Event`.

    Never fails on content: missing fields are simply ``None``. Blank lines
    carry nothing to evaluate and yield ``None``.
    """
    line = line.rstrip("\r\n")
    if not line.strip():
        return None
    return Event(
        timestamp=extract_ts(line),
        address=extract_ip(line),
        username=extract_user(line),
        raw=line,
    )


__all__ = ["parse_line", "extract_ip", "extract_user", "extract_ts"]
