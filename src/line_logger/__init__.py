"""
Minimal synchronous file-append logger.

This package exposes ``append_log``, which writes one timestamped,
tab-separated line per call to a plain text file.
"""

from .configuration import LoggerConfig, load_logger_config
from .logging_utils import LogErrorKind, LogResult, append_log

__all__ = ["LogErrorKind", "LogResult", "LoggerConfig", "append_log", "load_logger_config"]
