#!/usr/bin/env python3
"""Log Sentinel CLI

Unified command-line interface for scanning logs and serving the API.

Examples
--------
# Scan a file once, human-readable alerts plus a summary
log-sentinel scan --file /var/log/auth.log --summary

# Follow a live file (survives rotation), JSON Lines output
log-sentinel scan --file /var/log/auth.log --follow --json

# Pipe from another tool
journalctl -f -o short | log-sentinel scan --stdin

# Serve FastAPI
log-sentinel serve --port 8000
"""
from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .config import SentinelConfig, resolve_config
from .ingestion.readers import build_reader
from .logging_setup import get_logger, setup_logging
from .output import AlertWriter, print_summary
from .pipeline import RunResult, run_pipeline
from .rules.engine import RuleEngine
from .stats import AlertStats

LOGGER = get_logger("log_sentinel.cli")

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _config_from_args(args: argparse.Namespace) -> SentinelConfig:
    overrides: Dict[str, Any] = {
        "brute_threshold": getattr(args, "brute_threshold", None),
        "brute_window_secs": getattr(args, "brute_window_secs", None),
        "poll_interval": getattr(args, "poll_interval", None),
        "max_tracked_addresses": getattr(args, "max_tracked", None),
        "log_level": args.log_level,
    }
    # store_true flags only override when set
    if getattr(args, "json", False):
        overrides["json_output"] = True
    if getattr(args, "summary", False):
        overrides["summary"] = True
    return resolve_config(args.config, overrides)


# ---------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------

def cmd_scan(args: argparse.Namespace, cfg: SentinelConfig) -> int:
    try:
        lines = build_reader(
            args.file,
            stdin=args.stdin,
            follow=args.follow,
            poll_interval=cfg.poll_interval,
        )
    except ValueError as e:
        sys.stderr.write(f"log-sentinel scan: error: {e}\n")
        return EXIT_USAGE
    except OSError as e:
        LOGGER.error("Cannot open input: %s", e)
        return EXIT_IO_ERROR

    engine = RuleEngine(
        cfg.brute_threshold,
        cfg.brute_window_secs,
        max_tracked=cfg.max_tracked_addresses,
    )
    writer = AlertWriter("jsonl" if cfg.json_output else "pretty")
    stats = AlertStats()
    result = RunResult()

    status = EXIT_OK
    try:
        run_pipeline(lines, engine, writer.write, stats=stats, result=result)
    except BrokenPipeError:
        LOGGER.error("Alert output closed after %d lines", result.lines)
        return EXIT_IO_ERROR
    except OSError as e:
        # Raised by the line source or by the alert writer.
        LOGGER.error("I/O error after %d lines: %s", result.lines, e)
        return EXIT_IO_ERROR
    except KeyboardInterrupt:
        LOGGER.info("Interrupted after %d lines", result.lines)
        status = EXIT_INTERRUPTED

    if cfg.summary:
        print_summary(stats, top_n=cfg.summary_top_n)
    return status


def cmd_serve(args: argparse.Namespace, cfg: SentinelConfig) -> int:
    import uvicorn

    from .api.app import create_app

    app = create_app(cfg)
    uvicorn.run(app, host=args.host, port=args.port, log_level=cfg.log_level.lower())
    return EXIT_OK


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="log-sentinel", description="Lightweight log monitoring + alerting")
    p.add_argument("--config", default=None, help="JSON/YAML config file")
    p.add_argument("--log-level", default=None, help="Diagnostic log level (logs go to stderr)")
    sub = p.add_subparsers(dest="cmd", required=True)

    # scan
    ps = sub.add_parser("scan", help="Evaluate log lines from a file or stdin")
    src = ps.add_mutually_exclusive_group()
    src.add_argument("--file", default=None, help="Path to a log file (e.g., /var/log/auth.log)")
    src.add_argument("--stdin", action="store_true", help="Read from stdin")
    ps.add_argument("--follow", action="store_true", help="Follow the file like tail -F")
    ps.add_argument("--json", action="store_true", help="Output alerts as JSON Lines")
    ps.add_argument("--summary", action="store_true", help="Print summary at the end")
    ps.add_argument("--brute-threshold", type=int, default=None, help="Brute-force threshold (failures in window, default 8)")
    ps.add_argument("--brute-window-secs", type=int, default=None, help="Brute-force window in seconds (default 60)")
    ps.add_argument("--poll-interval", type=float, default=None, help="Follow-mode poll interval in seconds (default 0.25)")
    ps.add_argument("--max-tracked", type=int, default=None, help="Cap on tracked source addresses (default unbounded)")
    ps.set_defaults(func=cmd_scan)

    # serve
    pv = sub.add_parser("serve", help="Serve FastAPI app")
    pv.add_argument("--host", default="127.0.0.1")
    pv.add_argument("--port", type=int, default=8000)
    pv.set_defaults(func=cmd_serve)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = _config_from_args(args)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        parser.error(str(e))
    setup_logging(level=cfg.log_level, json_logs=cfg.log_json, log_file=cfg.log_file)
    return args.func(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
