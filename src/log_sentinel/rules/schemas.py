"""Alert schemas for Log Sentinel rules."""
from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from ..ingestion.schemas import IPAddress

__all__ = [
    "Severity",
    "Alert",
]


class Severity(IntEnum):
    """Ordered alert severity: INFO < LOW < MEDIUM < HIGH."""

    INFO = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def __str__(self) -> str:
        return self.label


class Alert(BaseModel):
    """One rule's finding for one event. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    rule_id: str = Field(..., description="Stable rule identifier, e.g. 'auth_failure'")
    severity: Severity
    timestamp: datetime = Field(..., description="Event time, or evaluation time if the line had none")
    address: Optional[IPAddress] = None
    username: Optional[str] = None
    message: str
    raw: str

    @field_serializer("severity")
    def _severity_label(self, severity: Severity) -> str:
        return severity.label
