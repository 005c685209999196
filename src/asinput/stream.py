"""Byte streams with explicit pushback.

SourceStream wraps an open binary handle and is the only object in asinput
that touches it. Reads that need to be "given back" (the first-line
directive sniff) go into an explicit lookahead buffer that every later read
drains first, so callers never depend on an unget primitive of the
underlying file object.

Error and end-of-file state are sticky, as with C stdio: once a read fails
or reaches end of file, further raw reads return nothing. Bytes pushed back with
unread() are still delivered.

Example:
    >>> import io
    >>> s = SourceStream(io.BytesIO(b"#APP\\n"), "t.s")
    >>> s.getc()
    35
    >>> s.unread(b"#")
    >>> s.read(10)
    b'#APP\\n'
"""

from __future__ import annotations

import os
import sys
from typing import BinaryIO

from asinput.utils.logger import get_logger

logger = get_logger(__name__)

# Display name used in diagnostics when reading standard input
STDIN_NAME = "{standard input}"


class SourceStream:
    """A readable binary source with a pushback buffer.

    Args:
        handle: Open binary file object
        name: Display name for diagnostics (kept by reference)
        owns_handle: Close the handle on close(). False for standard input,
            which is released but left open for the rest of the process.

    """

    __slots__ = ("_handle", "_pushback", "_eof", "_error", "_owns_handle", "name")

    def __init__(self, handle: BinaryIO, name: str, *, owns_handle: bool = True) -> None:
        self._handle: BinaryIO | None = handle
        self._pushback = bytearray()
        self._eof = False
        self._error: OSError | None = None
        self._owns_handle = owns_handle
        self.name = name

    def __repr__(self) -> str:
        state = "closed" if self.closed else "eof" if self.at_eof else "open"
        return f"SourceStream({self.name!r}, {state})"

    @property
    def closed(self) -> bool:
        return self._handle is None

    @property
    def error(self) -> OSError | None:
        """The read error that stopped this stream, if any."""
        return self._error

    @property
    def at_eof(self) -> bool:
        """True when the handle is exhausted and no pushed-back bytes remain."""
        return self._eof and not self._pushback

    @property
    def pending(self) -> bytes:
        """Pushed-back bytes not yet consumed."""
        return bytes(self._pushback)

    # =========================================================================
    # Reading
    # =========================================================================

    def _raw_read(self, n: int) -> bytes:
        if self._handle is None or self._eof or self._error is not None or n <= 0:
            return b""
        out = bytearray()
        # Pipes and other raw handles may return fewer bytes than asked for
        while len(out) < n:
            try:
                data = self._handle.read(n - len(out))
            except OSError as exc:
                self._error = exc
                break
            if not data:
                self._eof = True
                break
            out += data
        return bytes(out)

    def _raw_readline(self, limit: int) -> bytes:
        if self._handle is None or self._eof or self._error is not None or limit <= 0:
            return b""
        out = bytearray()
        while len(out) < limit and not out.endswith(b"\n"):
            try:
                data = self._handle.readline(limit - len(out))
            except OSError as exc:
                self._error = exc
                break
            if not data:
                self._eof = True
                break
            out += data
        return bytes(out)

    def getc(self) -> int | None:
        """Read one byte. Returns None at end of file or after an error."""
        if self._pushback:
            c = self._pushback[0]
            del self._pushback[0]
            return c
        data = self._raw_read(1)
        return data[0] if data else None

    def read(self, n: int) -> bytes:
        """Read up to n bytes, pushed-back bytes first.

        Returns fewer than n bytes only at end of file or after an error.
        """
        if n <= 0:
            return b""
        if not self._pushback:
            return self._raw_read(n)
        head = bytes(self._pushback[:n])
        del self._pushback[:n]
        if len(head) == n:
            return head
        return head + self._raw_read(n - len(head))

    def readline(self, limit: int) -> bytes:
        """Read one line of at most limit bytes, keeping the newline.

        Stops after a newline, after limit bytes, or at end of file, the way
        fgets does. b"" means nothing could be read.
        """
        out = bytearray()
        while self._pushback and len(out) < limit:
            c = self._pushback[0]
            del self._pushback[0]
            out.append(c)
            if c == 0x0A:
                return bytes(out)
        if len(out) < limit:
            out += self._raw_readline(limit - len(out))
        return bytes(out)

    def unread(self, data: bytes | int) -> None:
        """Push bytes back so the next read returns them first.

        Like ungetc, pushing back clears the end-of-file condition for the
        pushed bytes; the underlying handle stays exhausted.
        """
        if isinstance(data, int):
            data = bytes((data,))
        self._pushback[:0] = data

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Release the handle. Idempotent.

        Raises:
            OSError: If the underlying close fails. The stream is released
                regardless.
        """
        handle, self._handle = self._handle, None
        self._pushback.clear()
        self._eof = True
        if handle is None:
            return
        if self._owns_handle:
            handle.close()
        else:
            logger.debug("Released %s without closing the handle", self.name)


def open_source(name: str | os.PathLike[str], *, stdin: BinaryIO | None = None) -> SourceStream:
    """Open a source for reading. The empty name selects standard input.

    Args:
        name: File path, or "" for standard input
        stdin: Binary stream to use for standard input (default sys.stdin.buffer)

    Returns:
        SourceStream positioned at the start of the source

    Raises:
        OSError: If the file cannot be opened
    """
    if isinstance(name, str) and not name:
        return SourceStream(stdin or sys.stdin.buffer, STDIN_NAME, owns_handle=False)
    path = name if isinstance(name, str) else os.fspath(name)
    return SourceStream(open(path, "rb"), path)


__all__ = ["STDIN_NAME", "SourceStream", "open_source"]
