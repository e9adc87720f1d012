"""FastAPI application for Log Sentinel.

Provides a health check and an /analyze endpoint that runs posted log
lines through a single rule engine owned by the app instance. Sync routes
run in a threadpool, so the engine and stats are only touched while
holding ``app.state.lock``.
"""
from __future__ import annotations

import logging
import threading
from typing import List, Optional

from fastapi import FastAPI, Request

from ..config import SentinelConfig
from ..pipeline import run_pipeline
from ..rules.engine import RuleEngine
from ..rules.schemas import Alert
from ..stats import AlertStats
from .schemas import AnalyzeRequest, AnalyzeResponse, HealthResponse, StatsResponse

LOGGER = logging.getLogger("log_sentinel.api")


# ------------------------------------------------------------------
# Factory & routes
# ------------------------------------------------------------------

def create_app(cfg: Optional[SentinelConfig] = None) -> FastAPI:
    cfg = cfg or SentinelConfig()
    app = FastAPI(title="Log Sentinel API", version="0.1.0")
    app.state.config = cfg
    app.state.engine = RuleEngine(
        cfg.brute_threshold,
        cfg.brute_window_secs,
        max_tracked=cfg.max_tracked_addresses,
    )
    app.state.stats = AlertStats()
    app.state.lock = threading.Lock()

    @app.get("/healthz", response_model=HealthResponse)
    def healthz() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze", response_model=AnalyzeResponse)
    def analyze(req: AnalyzeRequest, request: Request) -> AnalyzeResponse:
        state = request.app.state
        alerts: List[Alert] = []
        with state.lock:
            result = run_pipeline(req.lines, state.engine, alerts.append, stats=state.stats)
        return AnalyzeResponse(lines_processed=result.lines, alerts=alerts)

    @app.get("/stats", response_model=StatsResponse)
    def stats(request: Request) -> StatsResponse:
        state = request.app.state
        with state.lock:
            summary = state.stats.summary(state.config.summary_top_n)
        return StatsResponse(**summary)

    LOGGER.info(
        "API ready (threshold=%d, window=%ds)", cfg.brute_threshold, cfg.brute_window_secs
    )
    return app
