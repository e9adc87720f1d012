"""Log Sentinel – rule-based alerting over auth/syslog text streams.

Subpackages:
- ingestion: line sources (file, stdin, follow) and the line parser
- rules: stateless signatures, brute-force detector, rule engine
- api: FastAPI app and schemas

Modules:
- pipeline: the line -> event -> alert driver loop
- output / stats: alert rendering and end-of-run aggregation
"""
from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    "ingestion",
    "rules",
    "api",
    "pipeline",
    "output",
    "stats",
]
