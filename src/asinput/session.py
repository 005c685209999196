"""Session state for the input layer.

FileSession describes the source currently being read. There is exactly one
per InputFile, mutated in place. SavedState is the frozen snapshot push()
hands to the caller so an included file can be read and the outer one
resumed afterwards.

Invariants:
    - stream is either an open SourceStream or None, never a closed one
    - file_name is set whenever stream is set
    - preprocess only changes at open time (directive sniff) or on pop()

"""

from __future__ import annotations

from dataclasses import dataclass

from asinput.sniff import SniffResult
from asinput.stream import SourceStream


@dataclass(slots=True)
class FileSession:
    """The live input source.

    Attributes:
        stream: Open stream, or None when nothing is open
        file_name: Display name for diagnostics ("{standard input}" for stdin)
        preprocess: Pass bytes through the scrubber before delivering them

    """

    stream: SourceStream | None = None
    file_name: str | None = None
    preprocess: bool = False

    @property
    def is_open(self) -> bool:
        return self.stream is not None

    def reset(self) -> None:
        """Forget the current source without closing it."""
        self.stream = None
        self.file_name = None
        self.preprocess = False


@dataclass(frozen=True, slots=True, eq=False)
class SavedState:
    """Snapshot of a FileSession taken by push().

    Compares by identity: each token is distinct and may be popped once.
    The stream and file name are the very objects the session held.

    Attributes:
        stream: The outer file's stream, positioned where reading stopped
        file_name: The outer file's display name
        preprocess: The outer file's preprocess mode
        scrub_state: Scrubber token, captured only when preprocess was set
        sniff_result: How the outer file's first line was classified

    """

    stream: SourceStream | None
    file_name: str | None
    preprocess: bool
    scrub_state: object | None = None
    sniff_result: SniffResult | None = None

    def __repr__(self) -> str:
        return f"SavedState({self.file_name!r}, preprocess={self.preprocess})"


__all__ = ["FileSession", "SavedState"]
