"""Multibyte character scanning.

Assembler sources are expected to be 7-bit ASCII. When multibyte handling is
set to warn, every delivered buffer is scanned and each byte with the high
bit set is reported. After MAX_WARNINGS reports a final notice is issued and
the scanner goes quiet, so a binary file does not flood the output.

Scanning never changes the bytes delivered to the caller.
"""

from __future__ import annotations

from asinput.protocols import Diagnostics

# Reports issued before further multibyte warnings are suppressed
MAX_WARNINGS = 25


def has_multibyte(data: bytes) -> bool:
    """Return True if any byte in data is outside 7-bit ASCII."""
    return not data.isascii()


class MultibyteScanner:
    """Default multibyte scan: warns about non-ASCII bytes.

    The warning count is shared across all files scanned by one instance.

    Args:
        diagnostics: Sink for the warnings
        max_warnings: Reports before suppression kicks in

    """

    __slots__ = ("_diagnostics", "_max_warnings", "warning_count")

    def __init__(self, diagnostics: Diagnostics, max_warnings: int = MAX_WARNINGS) -> None:
        self._diagnostics = diagnostics
        self._max_warnings = max_warnings
        self.warning_count = 0

    @property
    def suppressed(self) -> bool:
        return self.warning_count >= self._max_warnings

    def scan(self, data: bytes, *, warn: bool, where: str | None = None) -> bool:
        """Scan data for multibyte bytes.

        Args:
            data: Bytes just delivered
            warn: Report each offending byte
            where: Display name of the source, for the message

        Returns:
            True if a multibyte byte was seen. Once warnings are suppressed a
            warning scan returns False without looking.
        """
        if not data or (warn and self.suppressed):
            return False
        if has_multibyte(data) and not warn:
            return True

        found = False
        for c in data:
            if c <= 0x7F:
                continue
            found = True
            if where is None:
                self._diagnostics.warning("multibyte character (%#x) encountered in input", c)
            else:
                self._diagnostics.warning("multibyte character (%#x) encountered in %s", c, where)
            self.warning_count += 1
            if self.warning_count == self._max_warnings:
                self._diagnostics.warning("further multibyte character warnings suppressed")
                break
        return found


__all__ = ["MAX_WARNINGS", "MultibyteScanner", "has_multibyte"]
