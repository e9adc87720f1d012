"""Pydantic schemas for the Log Sentinel API."""
from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from ..rules.schemas import Alert


class HealthResponse(BaseModel):
    """Simple health check response."""
    status: str = Field(..., description="Service status, e.g. 'ok'")


class AnalyzeRequest(BaseModel):
    """Request body for /analyze.

    `lines` are raw log lines, evaluated in order against the service's
    long-lived rule engine, so brute-force state carries across requests.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "lines": [
                    "Jan  2 15:04:05 server sshd[1]: Failed password for admin from 192.168.1.100 port 22 ssh2",
                ]
            }
        }
    )

    lines: List[str] = Field(..., description="Raw log lines to evaluate")


class AnalyzeResponse(BaseModel):
    """Response body for /analyze."""
    lines_processed: int
    alerts: List[Alert] = Field(default_factory=list)


class StatsResponse(BaseModel):
    total_alerts: int
    by_rule: Dict[str, int]
    top_addresses: Dict[str, int]


__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "HealthResponse",
    "StatsResponse",
]
