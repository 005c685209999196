"""asinput ReadAccumulator: opt-in profiling for source reading.

This module provides accumulated metrics while files are read:
- Files opened (and opens that failed)
- Buffers delivered
- Bytes delivered
- Total wall time

Zero overhead when disabled (get_read_accumulator() returns None).

Example:
    from asinput import read_source
    from asinput.profiling import profiled_reads

    with profiled_reads() as metrics:
        data = read_source("foo.s")

    print(metrics.summary())
    # {"total_ms": 0.4, "files_opened": 1, "open_failures": 0, ...}

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class ReadAccumulator:
    """Accumulated metrics while reading sources.

    Attributes:
        start_time: Profiling start timestamp.
        files_opened: Sources successfully opened.
        open_failures: Sources that could not be opened.
        buffers: Non-empty buffers delivered.
        bytes_read: Total bytes delivered to callers.

    """

    start_time: float = field(default_factory=perf_counter)
    files_opened: int = 0
    open_failures: int = 0
    buffers: int = 0
    bytes_read: int = 0

    def record_open(self, ok: bool) -> None:
        """Record an open() attempt."""
        if ok:
            self.files_opened += 1
        else:
            self.open_failures += 1

    def record_buffer(self, size: int) -> None:
        """Record a delivered buffer (size 0 is exhaustion and not counted)."""
        if size:
            self.buffers += 1
            self.bytes_read += size

    @property
    def total_duration_ms(self) -> float:
        """Total profiling duration in milliseconds."""
        return (perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        """Get summary of read metrics."""
        return {
            "total_ms": round(self.total_duration_ms, 2),
            "files_opened": self.files_opened,
            "open_failures": self.open_failures,
            "buffers": self.buffers,
            "bytes_read": self.bytes_read,
        }


_accumulator: ContextVar[ReadAccumulator | None] = ContextVar(
    "read_accumulator",
    default=None,
)


def get_read_accumulator() -> ReadAccumulator | None:
    """Get current accumulator (None if profiling disabled)."""
    return _accumulator.get()


@contextmanager
def profiled_reads() -> Iterator[ReadAccumulator]:
    """Context manager for profiled reading.

    Creates a ReadAccumulator and makes it available via
    get_read_accumulator() for the duration of the with block.

    Yields:
        ReadAccumulator populated by every InputFile in this context.

    """
    acc = ReadAccumulator()
    token: Token[ReadAccumulator | None] = _accumulator.set(acc)
    try:
        yield acc
    finally:
        _accumulator.reset(token)


__all__ = ["ReadAccumulator", "get_read_accumulator", "profiled_reads"]
