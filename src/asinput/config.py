"""ContextVar-based input configuration for asinput.

Holds the pieces of the active language configuration that the input layer
needs: which bytes start a line comment, what counts as end of line, how
multibyte input is treated, and how large each delivered buffer is.

Usage:
    # Direct use
    from asinput.config import InputConfig, set_input_config, reset_input_config

    set_input_config(InputConfig(line_comment_chars=";"))
    try:
        data = read_source("foo.s")
    finally:
        reset_input_config()

    # Or use the context manager
    with input_config_context(InputConfig(line_comment_chars=";")):
        data = read_source("foo.s")

An InputFile snapshots the active config when it is constructed, so changing
the context afterwards does not affect files that are already being read.

"""

from collections.abc import Callable
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

# Size of each chunk handed to the caller. Chosen for speed; callers ask for
# it once, before the nature of any input file is known.
BUFFER_SIZE = 32 * 1024


class MultibyteHandling(Enum):
    """How bytes outside 7-bit ASCII are treated.

    - ALLOW: accepted silently, no scanning
    - WARN: every delivered buffer is scanned and multibyte bytes are warned about
    - WARN_SYMBOLS: only symbol names are checked; that happens downstream,
      so the input layer does not scan buffers

    """

    ALLOW = "allow"
    WARN = "warn"
    WARN_SYMBOLS = "warn-sym-only"


def default_is_end_of_line(c: int | None) -> bool:
    """Return True for newline, carriage return, or end of data (None)."""
    return c is None or c == 0x0A or c == 0x0D


@dataclass(frozen=True, slots=True)
class InputConfig:
    """Immutable input configuration.

    Attributes:
        line_comment_chars: Characters that start a comment running to end of
            line. Only the first line's comment is inspected, for #APP/#NO_APP.
        multibyte_handling: Multibyte scanning mode
        buffer_size: Maximum number of bytes delivered per buffer
        is_end_of_line: Predicate over a byte value (None means end of data)

    """

    line_comment_chars: str = "#"
    multibyte_handling: MultibyteHandling = MultibyteHandling.ALLOW
    buffer_size: int = BUFFER_SIZE
    is_end_of_line: Callable[[int | None], bool] = field(default=default_is_end_of_line)

    def __post_init__(self) -> None:
        if self.buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {self.buffer_size}")
        if not self.line_comment_chars.isascii():
            raise ValueError(f"line_comment_chars must be ASCII, got {self.line_comment_chars!r}")

    @property
    def warn_multibyte(self) -> bool:
        """True when delivered buffers must be scanned for multibyte bytes."""
        return self.multibyte_handling is MultibyteHandling.WARN

    @property
    def comment_bytes(self) -> bytes:
        """line_comment_chars as a byte string (one byte per char)."""
        return self.line_comment_chars.encode("ascii")

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "InputConfig":
        """Create InputConfig from dictionary.

        Only includes keys that are valid InputConfig fields; unknown keys
        are silently ignored. multibyte_handling may be given by enum value
        ("warn") or by name ("WARN").

        Example:
            >>> config = InputConfig.from_dict({
            ...     "line_comment_chars": ";",
            ...     "multibyte_handling": "warn",
            ...     "unknown_key": "ignored",
            ... })
            >>> config.warn_multibyte
            True

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        mode = filtered.get("multibyte_handling")
        if isinstance(mode, str):
            try:
                filtered["multibyte_handling"] = MultibyteHandling(mode)
            except ValueError:
                filtered["multibyte_handling"] = MultibyteHandling[mode.upper()]
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: InputConfig = InputConfig()

_input_config: ContextVar[InputConfig] = ContextVar(
    "input_config",
    default=_DEFAULT_CONFIG,
)


def get_input_config() -> InputConfig:
    """Get the input configuration for the current context."""
    return _input_config.get()


def set_input_config(config: InputConfig) -> None:
    """Set the input configuration for the current context."""
    _input_config.set(config)


def reset_input_config() -> None:
    """Reset to the module-level default configuration."""
    _input_config.set(_DEFAULT_CONFIG)


@contextmanager
def input_config_context(config: InputConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with input_config_context(InputConfig(line_comment_chars=";")):
        ...     get_input_config().line_comment_chars
        ';'

    """
    previous = _input_config.get()
    _input_config.set(config)
    try:
        yield
    finally:
        _input_config.set(previous)


__all__ = [
    "BUFFER_SIZE",
    "InputConfig",
    "MultibyteHandling",
    "default_is_end_of_line",
    "get_input_config",
    "input_config_context",
    "reset_input_config",
    "set_input_config",
]
