"""
Log Writer - Thread-safe append-only text log file.

A LogWriter owns one open append-mode handle and one lock:
1. Opening creates the file (0644) if missing and always appends if present
2. Every write formats its payload first, then appends it under the lock
3. Closing releases the handle; later writes and a second close both fail

Payloads written concurrently from many threads each land as one contiguous
run. Their relative order is whatever order the lock is acquired in.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from log_utils import (
    closed_file_error,
    encode_text,
    encode_json,
    format_printf,
    join_values,
    wrap_os_error,
)

logger = logging.getLogger(__name__)

FILE_MODE = 0o644


def _opener(path: str, flags: int) -> int:
    return os.open(path, flags, FILE_MODE)


class LogWriter:
    """Append-only log file guarded by a mutual-exclusion lock."""

    def __init__(self, path):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._closed = False
        try:
            # unbuffered "ab" is O_WRONLY | O_CREAT | O_APPEND with no Python-side buffer
            self._fh = open(self.path, "ab", buffering=0, opener=_opener)
        except OSError as e:
            raise wrap_os_error(e, self.path) from e
        logger.debug(f"Opened log file: {self.path}")

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close the underlying handle.

        Not idempotent: closing an already closed writer raises LogIOError
        (EBADF) rather than silently succeeding.
        """
        with self._lock:
            if self._closed:
                raise closed_file_error(self.path)
            self._close_handle()
        logger.debug(f"Closed log file: {self.path}")

    def _close_handle(self) -> None:
        # Caller holds the lock.
        self._closed = True
        try:
            self._fh.close()
        except OSError as e:
            raise wrap_os_error(e, self.path) from e

    def write(self, text: str) -> None:
        """Append text exactly as given. No separator is added.

        Text is encoded to UTF-8 before the lock is taken; text that cannot
        be encoded raises SerializationError and nothing is written. Returns
        only once the OS has accepted every byte. On LogIOError some leading
        bytes of the payload may already be in the file, but nothing from it
        is ever written later.
        """
        if not isinstance(text, str):
            raise TypeError(f"write() expects str, got {type(text).__name__}")
        data = memoryview(encode_text(text))
        with self._lock:
            if self._closed:
                raise closed_file_error(self.path)
            written = 0
            try:
                while written < len(data):
                    written += self._fh.write(data[written:])
            except OSError as e:
                raise wrap_os_error(e, self.path) from e

    def write_values(self, *values) -> None:
        """Append values joined print-style, without a trailing newline."""
        self.write(join_values(*values))

    def write_line(self, *values) -> None:
        """Append values joined print-style followed by exactly one newline."""
        self.write(join_values(*values) + "\n")

    def write_formatted(self, fmt: str, *args) -> None:
        """Append a printf-style template filled with args."""
        self.write(format_printf(fmt, *args))

    def write_json(
        self, message: str, fields: Optional[dict] = None, *, newline: bool = False
    ) -> None:
        """Append message and fields as one single-line JSON object.

        No newline follows the object unless newline=True, so consecutive
        calls without it produce concatenated objects.
        """
        text = encode_json(message, fields)
        if newline:
            text += "\n"
        self.write(text)

    def __enter__(self) -> "LogWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        with self._lock:
            if self._closed:
                return
            self._close_handle()
        logger.debug(f"Closed log file: {self.path}")

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"LogWriter(path={str(self.path)!r}, {state})"


def open_log_writer(path) -> LogWriter:
    """Open (or create) path for appending and return its LogWriter."""
    return LogWriter(path)
