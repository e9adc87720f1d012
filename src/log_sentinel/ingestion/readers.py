# src/log_sentinel/ingestion/readers.py
from __future__ import annotations

import logging
import os
import sys
import time
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, Optional, TextIO, Union

LOGGER = logging.getLogger("log_sentinel.readers")

DEFAULT_POLL_INTERVAL = 0.25


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").rstrip("\r\n")


# =========================
# Static sources (end of input terminates)
# =========================

def _iter_handle(handle: BinaryIO) -> Iterator[str]:
    try:
        for raw in handle:
            yield _decode(raw)
    finally:
        handle.close()


def read_file_lines(path: Union[str, Path]) -> Iterator[str]:
    """Open ``path`` now and return an iterator over its newline-stripped lines.

    Opening is eager so a missing or unreadable file fails before any line
    is processed.
    """
    handle = Path(path).open("rb")
    LOGGER.debug("Opened %s", path)
    return _iter_handle(handle)


def read_stdin_lines(stream: Optional[TextIO] = None) -> Iterator[str]:
    """Yield newline-stripped lines from ``stream`` (default: ``sys.stdin``).

    A text stream backed by a byte buffer is read through that buffer and
    decoded like a file, so invalid UTF-8 is replaced instead of raised.
    """
    stream = stream if stream is not None else sys.stdin
    buffer: Optional[BinaryIO] = getattr(stream, "buffer", None)
    if buffer is not None:
        for raw in buffer:
            yield _decode(raw)
        return
    for line in stream:
        yield line.rstrip("\r\n")


# =========================
# Follow mode (tail -F)
# =========================

class FollowReader:
    """Iterate over a file's lines forever, like ``tail -F``.

    Reading starts at the beginning of the file. Whenever no complete line
    is available the iterator checks whether the path now names a different
    file (rotation: inode/device changed) or the file shrank below the read
    position (truncation); either way reading restarts at offset 0 of the
    file now at ``path`` and a pending partial line is dropped. Otherwise it
    sleeps ``poll_interval`` seconds and retries.

    Iteration only ends by exception: I/O errors propagate, a quiet file
    blocks indefinitely.
    """

    def __init__(
        self,
        path: Union[str, Path],
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.path = Path(path)
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._handle: Optional[BinaryIO] = None
        self._identity: Optional[tuple[int, int]] = None
        self._pending = b""
        self._open()

    # -- state -------------------------------------------------------------

    @property
    def position(self) -> int:
        """Byte offset of the next unread byte in the current file."""
        if self._handle is None:
            return 0
        return self._handle.tell()

    def _open(self) -> None:
        handle = self.path.open("rb")
        st = os.fstat(handle.fileno())
        if self._handle is not None:
            self._handle.close()
        self._handle = handle
        self._identity = (st.st_dev, st.st_ino)
        self._pending = b""
        LOGGER.info("Following %s (inode %d)", self.path, st.st_ino)

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    # -- rotation probe ----------------------------------------------------

    def _reopen_if_replaced(self) -> bool:
        """Probe ``path`` at end of data; return True if reading should resume now.

        Only called once the current handle is drained, so switching files
        never skips unread complete lines of the old one.
        """
        try:
            st = self.path.stat()
        except FileNotFoundError:
            # Renamed away and not yet recreated: wait for the new file.
            return False

        if (st.st_dev, st.st_ino) != self._identity:
            if self._pending:
                LOGGER.debug("Dropping %d byte partial line at rotation", len(self._pending))
            LOGGER.info("Rotation detected on %s; reopening", self.path)
            try:
                self._open()
            except FileNotFoundError:
                LOGGER.debug("%s vanished before reopen; retrying next poll", self.path)
                return False
            return True

        if st.st_size < self.position:
            LOGGER.info("Truncation detected on %s; restarting at offset 0", self.path)
            assert self._handle is not None
            self._handle.seek(0)
            self._pending = b""
            return True

        return False

    # -- iteration ---------------------------------------------------------

    def __iter__(self) -> "FollowReader":
        return self

    def __next__(self) -> str:
        if self._handle is None:
            raise ValueError("I/O operation on closed FollowReader")
        while True:
            chunk = self._handle.readline()
            if chunk.endswith(b"\n"):
                raw, self._pending = self._pending + chunk, b""
                return _decode(raw)
            if chunk:
                # Writer has not finished the line yet.
                self._pending += chunk
            if not self._reopen_if_replaced():
                self._sleep(self.poll_interval)


# =========================
# Dispatcher
# =========================

def build_reader(
    file: Union[str, Path, None] = None,
    *,
    stdin: bool = False,
    follow: bool = False,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    stdin_stream: Optional[TextIO] = None,
) -> Iterator[str]:
    """
    Select the line source for a run.

    Behavior:
      - ``stdin`` wins over ``file``; ``follow`` only applies to files
      - raises ValueError when neither a file nor stdin is selected
      - raises FileNotFoundError / PermissionError immediately for files
    """
    if stdin:
        return read_stdin_lines(stdin_stream)
    if file is None:
        raise ValueError("Provide --file <path> or --stdin")
    if follow:
        return FollowReader(file, poll_interval=poll_interval)
    return read_file_lines(file)


__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "FollowReader",
    "build_reader",
    "read_file_lines",
    "read_stdin_lines",
]
