"""Default scrubber for preprocessed input.

A real scrubber compresses whitespace and strips comments before the
tokenizer sees the text. That transform belongs to the language front end;
asinput only needs something that honours the Scrubber protocol so
preprocessed files can be read without one. IdentityScrubber passes bytes
through unchanged and keeps just enough state (how many bytes it has handed
out) to make save/restore observable across nested includes.
"""

from __future__ import annotations

from collections.abc import Callable

from asinput.protocols import ByteSupplier, MultibyteScan


class IdentityScrubber:
    """Scrubber that returns raw bytes untouched.

    Args:
        scanner: Multibyte scanner used when scrub() is asked to warn
        where: Returns the display name of the file being scrubbed, for
            multibyte warnings. Without it warnings say "in input".

    """

    __slots__ = ("_scanner", "_where", "bytes_out")

    def __init__(
        self,
        scanner: MultibyteScan | None = None,
        *,
        where: Callable[[], str | None] | None = None,
    ) -> None:
        self._scanner = scanner
        self._where = where
        self.bytes_out = 0

    def scrub(self, supplier: ByteSupplier, capacity: int, warn_multibyte: bool) -> bytes:
        data = supplier(capacity)
        if warn_multibyte and data and self._scanner is not None:
            where = self._where() if self._where is not None else None
            self._scanner.scan(data, warn=True, where=where)
        self.bytes_out += len(data)
        return data

    def save(self) -> object:
        state = self.bytes_out
        self.bytes_out = 0
        return state

    def restore(self, state: object) -> None:
        assert isinstance(state, int)
        self.bytes_out = state


__all__ = ["IdentityScrubber"]
