"""Event schema for parsed log lines in Log Sentinel.

Defines the **Pydantic** model produced by the parser for every raw line.
Keep this module focused on *schemas only*; parsing lives in
:mod:`log_sentinel.ingestion.parser`.
"""
from __future__ import annotations

from datetime import datetime
from ipaddress import IPv4Address, IPv6Address
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "IPAddress",
    "Event",
]

IPAddress = Union[IPv4Address, IPv6Address]


class Event(BaseModel):
    """Best-effort facts extracted from one raw log line. Immutable."""

    model_config = ConfigDict(frozen=True)

    timestamp: Optional[datetime] = Field(None, description="Timezone-aware local time, if the line carried one")
    address: Optional[IPAddress] = Field(None, description="First IPv4 (else IPv6) address found in the line")
    username: Optional[str] = Field(None, description="Account name from common auth phrasings")
    raw: str = Field(..., min_length=1, description="Original line, newline stripped")
