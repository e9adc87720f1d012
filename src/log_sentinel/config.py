"""
Log Sentinel configuration loader.

Supports JSON or YAML configs. Also merges in environment variable overrides
(prefixed with LOG_SENTINEL_), then validates the merged mapping into a
`SentinelConfig`.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt

ENV_PREFIX = "LOG_SENTINEL_"


class SentinelConfig(BaseModel):
    """Validated runtime settings shared by the CLI and the API."""

    model_config = ConfigDict(extra="ignore")

    brute_threshold: PositiveInt = Field(8, description="Failures per window that trigger brute_force")
    brute_window_secs: PositiveInt = Field(60, description="Sliding window length in seconds")
    poll_interval: PositiveFloat = Field(0.25, description="Follow-mode poll interval in seconds")
    max_tracked_addresses: Optional[PositiveInt] = Field(
        None, description="Cap on addresses tracked by the brute-force detector (unset = unbounded)"
    )
    json_output: bool = False
    summary: bool = False
    summary_top_n: PositiveInt = 5
    log_level: str = "INFO"
    log_json: bool = False
    log_file: Optional[str] = None


def load_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load configuration dict from file (JSON or YAML).
    Falls back to empty dict if no path is given.
    Environment variables prefixed with LOG_SENTINEL_ override keys.
    """
    cfg: Dict[str, Any] = {}

    if path is not None:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Config not found: {p}")
        with p.open("r", encoding="utf-8") as f:
            if p.suffix.lower() in {".yaml", ".yml"}:
                cfg = yaml.safe_load(f) or {}
            else:
                cfg = json.load(f)
        if not isinstance(cfg, dict):
            raise ValueError(f"Config must be a mapping: {p}")

    for k, v in os.environ.items():
        if k.startswith(ENV_PREFIX):
            key = k.removeprefix(ENV_PREFIX).lower()
            cfg[key] = v

    return cfg


def resolve_config(
    path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> SentinelConfig:
    """Merge file, environment and explicit overrides (``None`` values skipped).

    Raises ``pydantic.ValidationError`` on invalid values.
    """
    cfg = load_config(path)
    for key, value in (overrides or {}).items():
        if value is not None:
            cfg[key] = value
    return SentinelConfig.model_validate(cfg)

