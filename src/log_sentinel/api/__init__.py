"""Log Sentinel API package.

Exports the `create_app(cfg)` factory plus the public Pydantic schemas so
callers can import from a single place.

Example
-------
from log_sentinel.api import create_app
from log_sentinel.api import AnalyzeRequest, AnalyzeResponse
"""
from __future__ import annotations

from .app import create_app
from .schemas import AnalyzeRequest, AnalyzeResponse, HealthResponse, StatsResponse

__all__ = [
    "create_app",
    # Schemas
    "AnalyzeRequest",
    "AnalyzeResponse",
    "HealthResponse",
    "StatsResponse",
]
