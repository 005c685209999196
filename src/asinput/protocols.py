"""Protocols for the collaborators the input layer consumes.

The input layer does not scrub, scan or report anything itself. It calls
out to these seams; asinput ships simple default implementations
(IdentityScrubber, MultibyteScanner, LoggingDiagnostics) that any object with
the same methods can replace.

Example:
    from asinput.protocols import Scrubber

    def pump(scrubber: Scrubber, supplier: ByteSupplier) -> bytes:
        return scrubber.scrub(supplier, 4096, False)

"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeAlias, runtime_checkable

ByteSupplier: TypeAlias = Callable[[int], bytes]
"""Reads up to n raw bytes from the current source; b"" means no more."""


@runtime_checkable
class Diagnostics(Protocol):
    """Sink for error and warning reports.

    Messages use printf-style formatting, like the logging module.
    Reporting must never raise or alter the caller's control flow.
    """

    def error(self, fmt: str, *args: object) -> None:
        """Report an error."""
        ...

    def warning(self, fmt: str, *args: object) -> None:
        """Report a warning."""
        ...


@runtime_checkable
class Scrubber(Protocol):
    """Token-scrubbing transform applied to preprocessed input.

    The scrubber pulls raw bytes through the supplier as it needs them and
    returns at most ``capacity`` transformed bytes; b"" means the supplier is
    exhausted and nothing is pending.

    save() captures the scrubber's internal state and resets it for a new
    file; restore() reinstates a captured state. The input layer holds the
    saved object without looking inside it.
    """

    def scrub(self, supplier: ByteSupplier, capacity: int, warn_multibyte: bool) -> bytes:
        """Produce the next scrubbed chunk."""
        ...

    def save(self) -> object:
        """Capture and reset internal state; return an opaque token."""
        ...

    def restore(self, state: object) -> None:
        """Reinstate a state previously returned by save()."""
        ...


@runtime_checkable
class MultibyteScan(Protocol):
    """Validity scan over a delivered buffer."""

    def scan(self, data: bytes, *, warn: bool, where: str | None = None) -> bool:
        """Return True if data contains multibyte bytes; warn if asked to."""
        ...


__all__ = [
    "ByteSupplier",
    "Diagnostics",
    "MultibyteScan",
    "Scrubber",
]
