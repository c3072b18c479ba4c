"""
Append timestamped, tab-separated lines to a plain text log file.

Each call opens the file in append mode, writes one line and closes it again.
Nothing is held open between calls and no locking is done, so concurrent
writers to the same path may interleave.
"""

from __future__ import annotations

import enum
import os
import sys
from dataclasses import dataclass
from datetime import datetime

from .configuration import DEFAULT_LOGGER_CONFIG, LoggerConfig
from .date_time import format_timestamp

FALLBACK_ENCODING = "utf-8"

CONTROL_ESCAPES = str.maketrans(
    {
        "\\": "\\\\",
        "\t": "\\t",
        "\r": "\\r",
        "\n": "\\n",
    }
)


class LogErrorKind(enum.Enum):
    OPEN_FAILURE = "open_failure"
    WRITE_FAILURE = "write_failure"


@dataclass(frozen=True)
class LogResult:
    """
    Outcome of a single ``append_log`` call. Truthy only when the line was written.
    """

    ok: bool
    error: LogErrorKind | None = None
    detail: str | None = None
    encoding_loss: bool = False
    line: str | None = None

    def __bool__(self) -> bool:
        return self.ok


def escape_field(text: str) -> str:
    return text.translate(CONTROL_ESCAPES)


def format_line(
    level: str,
    message: str,
    *,
    now: datetime | None = None,
    escape_control_chars: bool = True,
) -> str:
    """
    Build ``<timestamp>\\t<level>\\t<message>`` without the line terminator.
    """
    if escape_control_chars:
        level = escape_field(level)
        message = escape_field(message)
    return f"{format_timestamp(now)}\t{level}\t{message}"


def encode_line(line: str, encoding: str, errors: str) -> tuple[bytes, bool]:
    """
    Encode strictly if possible, otherwise with the lossy handler.
    Returns the bytes and whether anything was replaced.

    If the codec or handler cannot produce bytes at all, the line is written
    as UTF-8 with replacement characters instead.
    """
    try:
        return line.encode(encoding), False
    except UnicodeEncodeError:
        try:
            return line.encode(encoding, errors), True
        except (UnicodeError, LookupError):
            pass
    except LookupError:
        pass
    return line.encode(FALLBACK_ENCODING, "replace"), True


def _report_failure(path: str | os.PathLike[str], result: LogResult) -> None:
    print(
        f"[line-logger] {result.error.value} for '{os.fspath(path)}': {result.detail}",
        file=sys.stderr,
    )


def append_log(
    path: str | os.PathLike[str],
    level: str,
    message: str,
    *,
    config: LoggerConfig | None = None,
    now: datetime | None = None,
) -> LogResult:
    """
    Append one ``[DD-MM-YYYY HH:MM:SS]<TAB>level<TAB>message`` line to ``path``.

    The file is created if missing; missing parent directories are not, and the
    call then reports ``OPEN_FAILURE``. I/O errors never propagate: they are
    returned as a failed ``LogResult``.
    """
    config = config or DEFAULT_LOGGER_CONFIG
    line = format_line(
        level,
        message,
        now=now,
        escape_control_chars=config.escape_control_chars,
    )
    payload, lossy = encode_line(line + "\n", config.encoding, config.encoding_errors)

    try:
        file = open(path, "ab")
    except (OSError, ValueError) as exc:
        result = LogResult(
            ok=False,
            error=LogErrorKind.OPEN_FAILURE,
            detail=str(exc),
            encoding_loss=lossy,
            line=line,
        )
    else:
        try:
            with file:
                file.write(payload)
                file.flush()
                if config.fsync:
                    os.fsync(file.fileno())
        except OSError as exc:
            result = LogResult(
                ok=False,
                error=LogErrorKind.WRITE_FAILURE,
                detail=str(exc),
                encoding_loss=lossy,
                line=line,
            )
        else:
            result = LogResult(ok=True, encoding_loss=lossy, line=line)

    if not result.ok and config.fallback_to_stderr:
        _report_failure(path, result)
    return result


__all__ = [
    "LogErrorKind",
    "LogResult",
    "append_log",
    "encode_line",
    "escape_field",
    "format_line",
]
