"""First-line directive sniffing.

Compilers that emit assembly mark regions of already-expanded text with
pragma-like comments: ``#APP`` switches preprocessing on, ``#NO_APP``
switches it off. When such a comment is the very first line of a file it
overrides the preprocess mode requested for the whole file.

sniff() runs once, right after a file is opened. It classifies the first
line and pushes back whatever it read, so the stream is positioned as if
nothing happened except for bytes genuinely consumed by the check:

    first bytes         pushed back     left for the reader
    ---------------     -----------     -------------------
    "#NO_APP\\n..."      "\\n"            "\\n..."
    "#APP\\n..."         "\\n"            "\\n..."
    "#\\n..."            "\\n"            "\\n..."
    "#x..."             "#"             "#..."   (the "x" is dropped)
    "mov..."            "m"             "mov..."

The dropped second byte in the "#x" case is long-standing behaviour and is
preserved.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from asinput.config import InputConfig
from asinput.stream import SourceStream
from asinput.utils.logger import get_logger

logger = get_logger(__name__)

# Most bytes read after the comment character and N/A when checking a directive
DIRECTIVE_LINE_MAX = 79

_HASH = 0x23
_NEWLINE = 0x0A


class Directive(Enum):
    """Directive recognized on the first line."""

    NONE = auto()
    APP = auto()  # "#APP": preprocess the file
    NO_APP = auto()  # "#NO_APP": read the file straight in


class SniffStatus(Enum):
    """Outcome of reading the first byte."""

    OK = auto()
    EMPTY = auto()  # end of file before the first byte
    READ_ERROR = auto()  # the first read failed


@dataclass(frozen=True, slots=True)
class SniffResult:
    """Result of sniffing a newly opened stream.

    Attributes:
        status: Whether a first byte could be read
        preprocess: Effective preprocess mode for the file
        directive: Directive that set the mode, if any
        pushed_back: Bytes returned to the stream

    """

    status: SniffStatus
    preprocess: bool
    directive: Directive = Directive.NONE
    pushed_back: bytes = b""

    @property
    def has_content(self) -> bool:
        return self.status is SniffStatus.OK


def is_comment_trigger(c: int, comment_chars: bytes) -> bool:
    """Decide whether byte c starts the sniffable first-line comment.

    When "#" is a line-comment character only a literal "#" triggers; other
    comment characters are left alone. Otherwise any comment character does.
    NUL never triggers.
    """
    if _HASH in comment_chars:
        return c == _HASH
    return c != 0 and c in comment_chars


def _match_directive(line: bytes, keyword: bytes, config: InputConfig) -> bool:
    """True if line starts with keyword immediately followed by end of line."""
    if not line.startswith(keyword):
        return False
    n = len(keyword)
    return config.is_end_of_line(line[n] if n < len(line) else None)


def sniff(stream: SourceStream, preprocess: bool, config: InputConfig) -> SniffResult:
    """Classify the first line of stream and settle its preprocess mode.

    Args:
        stream: Newly opened stream, nothing read yet
        preprocess: Mode requested by the caller
        config: Supplies the comment characters and end-of-line test

    Returns:
        SniffResult. For EMPTY and READ_ERROR the caller closes the stream.
    """
    c = stream.getc()
    if stream.error is not None:
        return SniffResult(SniffStatus.READ_ERROR, preprocess)
    if c is None:
        return SniffResult(SniffStatus.EMPTY, preprocess)

    if not is_comment_trigger(c, config.comment_bytes):
        stream.unread(c)
        return SniffResult(SniffStatus.OK, preprocess, pushed_back=bytes((c,)))

    lead = c
    c2 = stream.getc()
    directive = Directive.NONE

    if c2 == ord("N") or c2 == ord("A"):
        line = stream.readline(DIRECTIVE_LINE_MAX)
        if c2 == ord("N") and _match_directive(line, b"O_APP", config):
            preprocess = False
            directive = Directive.NO_APP
        elif c2 == ord("A") and _match_directive(line, b"PP", config):
            preprocess = True
            directive = Directive.APP
        # A complete line gives back only its newline; a truncated or
        # unterminated one gives back the comment character and loses the rest.
        back = b"\n" if _NEWLINE in line else bytes((lead,))
    elif c2 is not None and config.is_end_of_line(c2):
        back = bytes((c2,))
    else:
        back = bytes((lead,))

    stream.unread(back)
    if directive is not Directive.NONE:
        logger.debug("%s: #%s sets preprocess=%s", stream.name, directive.name, preprocess)
    return SniffResult(SniffStatus.OK, preprocess, directive, back)


__all__ = [
    "DIRECTIVE_LINE_MAX",
    "Directive",
    "SniffResult",
    "SniffStatus",
    "is_comment_trigger",
    "sniff",
]
