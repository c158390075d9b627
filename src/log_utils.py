"""Shared helpers for the log writer: error types and payload formatting.

Everything here runs outside the writer's lock. Formatting a payload must
never hold up other threads that are waiting to append.
"""

import errno
import json
from typing import Optional


class LogWriterError(Exception):
    """Base class for every error raised by the log writer."""


class LogIOError(LogWriterError, OSError):
    """Open, write or close failed at the filesystem/OS level."""


class SerializationError(LogWriterError, ValueError):
    """A payload could not be encoded as JSON or as UTF-8 text."""


class LogFormatError(LogWriterError, ValueError):
    """A printf-style template did not match its arguments."""


def wrap_os_error(exc: OSError, path) -> LogIOError:
    """Convert an OSError into a LogIOError, keeping errno and filename."""
    code = exc.errno if exc.errno is not None else errno.EIO
    message = exc.strerror or str(exc)
    return LogIOError(code, message, str(path))


def closed_file_error(path) -> LogIOError:
    return LogIOError(errno.EBADF, "file already closed", str(path))


def join_values(*values) -> str:
    """Join values print-style.

    Each value is converted with str(). A single space separates two
    adjacent operands unless both of them are strings. Nothing is appended
    after the last operand.

        join_values("a", "b")      -> "ab"
        join_values("a", 1)        -> "a 1"
        join_values(1, 2, "x")     -> "1 2 x"
    """
    parts = []
    for i, value in enumerate(values):
        if i > 0:
            prev = values[i - 1]
            if not (isinstance(prev, str) and isinstance(value, str)):
                parts.append(" ")
        parts.append(str(value))
    return "".join(parts)


def format_printf(fmt: str, *args) -> str:
    """Substitute args into a printf-style template (%s, %d, %r, %%)."""
    try:
        return fmt % args
    except (TypeError, ValueError, KeyError) as e:
        raise LogFormatError(f"Cannot format {fmt!r} with {len(args)} argument(s): {e}") from e


def encode_text(text: str) -> bytes:
    """Encode text as UTF-8 bytes for the file."""
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise SerializationError(f"Cannot encode log text as UTF-8: {e}") from e


def encode_json(message: str, fields: Optional[dict] = None) -> str:
    """Encode message plus fields as a single-line JSON object.

    The "message" key is inserted, overwriting any existing value. The
    caller's mapping is left untouched. The result is guaranteed to encode
    as UTF-8.
    """
    try:
        payload = dict(fields) if fields else {}
        payload["message"] = message
        text = json.dumps(
            payload, ensure_ascii=False, allow_nan=False, separators=(",", ":")
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(f"Cannot encode log record: {e}") from e
    encode_text(text)
    return text
