"""
Configuration helpers for the line logger.

The log call never reads configuration itself; callers that want a pinned
policy build a ``LoggerConfig`` here and pass it to ``append_log``.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

PACKAGE_ROOT = Path(__file__).resolve().parent
PACKAGE_CONFIG_PATH = PACKAGE_ROOT / "config" / "line_logger.yaml"

BOOLEAN_KEYS = (
    "escape_control_chars",
    "fsync",
    "fallback_to_stderr",
)

# Handlers that always substitute something for an unencodable character.
SUBSTITUTING_ERROR_HANDLERS = (
    "replace",
    "ignore",
    "backslashreplace",
    "xmlcharrefreplace",
    "namereplace",
)

# Timestamp, separators and terminator must come out as plain ASCII bytes.
ASCII_SAMPLE = "[05-03-2024 14:02:31]\tINFO\t\n"
LOSSY_SAMPLE = "\u00e9\ufffd\u2713\ud800"


def check_transcoding(encoding: str, errors: str) -> None:
    """
    Raise ValueError unless ``encoding`` is a narrow, ASCII-compatible text codec
    without a byte-order mark and ``errors`` always substitutes.
    """
    if errors not in SUBSTITUTING_ERROR_HANDLERS:
        raise ValueError(
            f"Configuration 'encoding_errors' must be one of {SUBSTITUTING_ERROR_HANDLERS}, "
            f"not {errors!r}."
        )
    try:
        ascii_bytes = ASCII_SAMPLE.encode(encoding)
        LOSSY_SAMPLE.encode(encoding, errors)
    except (LookupError, UnicodeError, TypeError) as exc:
        raise ValueError(f"Configuration 'encoding' cannot encode text: {encoding!r}") from exc
    if ascii_bytes != ASCII_SAMPLE.encode("ascii"):
        raise ValueError(
            f"Configuration 'encoding' must be ASCII-compatible with no byte-order mark: {encoding!r}"
        )


@dataclass(frozen=True)
class LoggerConfig:
    """
    Immutable transcoding, escaping and durability policy for ``append_log``.
    """

    encoding: str = "utf-8"
    encoding_errors: str = "replace"
    escape_control_chars: bool = True
    fsync: bool = False
    fallback_to_stderr: bool = False

    def __post_init__(self) -> None:
        check_transcoding(self.encoding, self.encoding_errors)

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "LoggerConfig":
        """
        Build a LoggerConfig from a mapping, validating keys and values.
        """
        known = {field.name for field in fields(cls)}
        unknown = sorted(set(config) - known)
        if unknown:
            raise ValueError(f"Unknown logger configuration keys: {unknown}")

        encoding = str(config.get("encoding", cls.encoding))
        try:
            encoding = codecs.lookup(encoding).name
        except LookupError as exc:
            raise ValueError(f"Configuration 'encoding' is not a known codec: {encoding!r}") from exc

        errors = str(config.get("encoding_errors", cls.encoding_errors))

        flags: dict[str, bool] = {}
        for name in BOOLEAN_KEYS:
            value = config.get(name, getattr(cls, name))
            if not isinstance(value, bool):
                raise ValueError(f"Configuration '{name}' must be true or false.")
            flags[name] = value

        return cls(encoding=encoding, encoding_errors=errors, **flags)

    def as_dict(self) -> dict[str, Any]:
        return {
            "encoding": self.encoding,
            "encoding_errors": self.encoding_errors,
            "escape_control_chars": self.escape_control_chars,
            "fsync": self.fsync,
            "fallback_to_stderr": self.fallback_to_stderr,
        }


def load_yaml_config(source: str | Path) -> dict[str, Any]:
    """
    Load a YAML configuration file from local disk.
    """
    text = Path(source).expanduser().read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError("Configuration YAML must define a mapping at the top level.")
    return data


def merge_config(base: dict[str, Any], override: dict[str, Any] | None) -> dict[str, Any]:
    """
    Return a shallow merge of base + override (override wins).
    """
    merged = dict(base)
    if override:
        merged.update(override)
    return merged


def load_logger_config(config_path: str | Path | None = None) -> LoggerConfig:
    """
    Merge the packaged defaults with an optional user YAML into a LoggerConfig.
    """
    user_config: dict[str, Any] | None = None
    if config_path:
        user_config = load_yaml_config(config_path)
    merged = merge_config(load_yaml_config(PACKAGE_CONFIG_PATH), user_config)
    return LoggerConfig.from_dict(merged)


DEFAULT_LOGGER_CONFIG = LoggerConfig()


__all__ = [
    "DEFAULT_LOGGER_CONFIG",
    "LoggerConfig",
    "PACKAGE_CONFIG_PATH",
    "load_logger_config",
    "load_yaml_config",
    "merge_config",
]
