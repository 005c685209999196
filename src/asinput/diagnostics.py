"""Diagnostic sinks for input errors and warnings.

The input layer never raises on I/O trouble. It reports through a sink
with printf-style ``error(fmt, *args)`` / ``warning(fmt, *args)`` methods and
carries on; callers poll the InputFile state afterwards.

Two sinks are provided:

- LoggingDiagnostics: forwards to the ``asinput.diagnostics`` logger
- DiagnosticCollector: keeps every Diagnostic in order (tests, tooling)

Example:
    >>> sink = DiagnosticCollector()
    >>> sink.error("can't open %s for reading: %s", "foo.s", "No such file")
    >>> sink.messages
    ["can't open foo.s for reading: No such file"]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from asinput.utils.logger import get_logger


class Severity(Enum):
    """Severity of a reported diagnostic."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single reported problem.

    Attributes:
        severity: ERROR or WARNING
        message: Fully formatted message text

    """

    severity: Severity
    message: str

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.message}"


def _format(fmt: str, args: tuple[object, ...]) -> str:
    return fmt % args if args else fmt


class LoggingDiagnostics:
    """Diagnostics sink backed by the standard library logger.

    Errors are counted so the driver can decide on its exit status.
    """

    __slots__ = ("_logger", "error_count", "warning_count")

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or get_logger("diagnostics")
        self.error_count = 0
        self.warning_count = 0

    @property
    def had_errors(self) -> bool:
        return self.error_count > 0

    def error(self, fmt: str, *args: object) -> None:
        self.error_count += 1
        self._logger.error(fmt, *args)

    def warning(self, fmt: str, *args: object) -> None:
        self.warning_count += 1
        self._logger.warning(fmt, *args)


class DiagnosticCollector:
    """Diagnostics sink that records every report in order.

    Args:
        logger: Optional logger to forward to as well

    """

    __slots__ = ("_logger", "diagnostics")

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger
        self.diagnostics: list[Diagnostic] = []

    def error(self, fmt: str, *args: object) -> None:
        self.diagnostics.append(Diagnostic(Severity.ERROR, _format(fmt, args)))
        if self._logger is not None:
            self._logger.error(fmt, *args)

    def warning(self, fmt: str, *args: object) -> None:
        self.diagnostics.append(Diagnostic(Severity.WARNING, _format(fmt, args)))
        if self._logger is not None:
            self._logger.warning(fmt, *args)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    @property
    def messages(self) -> list[str]:
        return [d.message for d in self.diagnostics]

    @property
    def had_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.diagnostics)

    def clear(self) -> None:
        self.diagnostics.clear()

    def __len__(self) -> int:
        return len(self.diagnostics)


__all__ = [
    "Diagnostic",
    "DiagnosticCollector",
    "LoggingDiagnostics",
    "Severity",
]
