"""Log ingestion (line sources and parsers) for Log Sentinel."""
from .parser import extract_ip, extract_ts, extract_user, parse_line
from .readers import (
    FollowReader,
    build_reader,
    read_file_lines,
    read_stdin_lines,
)
from .schemas import Event

__all__ = [
    "Event",
    "FollowReader",
    "build_reader",
    "extract_ip",
    "extract_ts",
    "extract_user",
    "parse_line",
    "read_file_lines",
    "read_stdin_lines",
]
