"""InputFile: the single gateway from source files to the front end.

All details of reading source bytes are confined here. The front end opens
a file, pulls fixed-size buffers until one comes back empty, and may
suspend the current file with push() to read an included file before
resuming it with pop().

I/O problems never raise. They are reported through the diagnostics sink
and show up as "no file open" or an empty buffer:

    - can't open:  open() returns False, nothing is open
    - can't read:  reported once, the next buffer is empty
    - can't close: warning only
    - empty file:  silent, the first buffer is empty

Usage:
    >>> f = InputFile()
    >>> f.open("foo.s", preprocess=True)
    True
    >>> for chunk in f.chunks():
    ...     feed(chunk)

Thread Safety:
    InputFile instances are not thread-safe. Use one per thread of work;
    instances share no mutable state.

"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from types import TracebackType
from typing import BinaryIO

from asinput.config import InputConfig, get_input_config
from asinput.diagnostics import LoggingDiagnostics
from asinput.errors import InvalidSourceError, SavedStateError
from asinput.multibyte import MultibyteScanner
from asinput.profiling import get_read_accumulator
from asinput.protocols import Diagnostics, MultibyteScan, Scrubber
from asinput.scrub import IdentityScrubber
from asinput.session import FileSession, SavedState
from asinput.sniff import SniffResult, SniffStatus, sniff
from asinput.stream import STDIN_NAME, open_source
from asinput.utils.logger import get_logger

logger = get_logger(__name__)


def _strerror(exc: OSError) -> str:
    return exc.strerror or str(exc)


class InputFile:
    """Reads source files in chunks, with include nesting.

    Args:
        config: Input configuration (defaults to the context config)
        diagnostics: Error/warning sink (defaults to LoggingDiagnostics)
        scrubber: Transform for preprocessed files (defaults to IdentityScrubber)
        scanner: Multibyte scanner (defaults to MultibyteScanner)
        stdin: Binary stream read when a file is opened by the name ""

    """

    __slots__ = (
        "_config",
        "_diagnostics",
        "_scanner",
        "_scrubber",
        "_stdin",
        "_session",
        "_outstanding",  # SavedState tokens issued by push() and not yet popped
        "_last_sniff",
    )

    def __init__(
        self,
        *,
        config: InputConfig | None = None,
        diagnostics: Diagnostics | None = None,
        scrubber: Scrubber | None = None,
        scanner: MultibyteScan | None = None,
        stdin: BinaryIO | None = None,
    ) -> None:
        self._config = config if config is not None else get_input_config()
        self._diagnostics = diagnostics if diagnostics is not None else LoggingDiagnostics()
        self._scanner = scanner if scanner is not None else MultibyteScanner(self._diagnostics)
        if scrubber is None:
            scrubber = IdentityScrubber(self._scanner, where=lambda: self._session.file_name)
        self._scrubber = scrubber
        self._stdin = stdin
        self._session = FileSession()
        self._outstanding: set[SavedState] = set()
        self._last_sniff: SniffResult | None = None

    def __repr__(self) -> str:
        s = self._session
        return f"InputFile({s.file_name!r}, open={s.is_open}, preprocess={s.preprocess})"

    def __enter__(self) -> InputFile:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # =========================================================================
    # State
    # =========================================================================

    @property
    def config(self) -> InputConfig:
        return self._config

    @property
    def diagnostics(self) -> Diagnostics:
        return self._diagnostics

    @property
    def session(self) -> FileSession:
        """The live session. Treat as read-only; use the methods to change it."""
        return self._session

    @property
    def is_open(self) -> bool:
        return self._session.is_open

    @property
    def file_name(self) -> str | None:
        return self._session.file_name

    @property
    def preprocess(self) -> bool:
        return self._session.preprocess

    @property
    def sniff_result(self) -> SniffResult | None:
        """How the most recently opened file's first line was classified."""
        return self._last_sniff

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    def begin(self) -> None:
        """Reset to "nothing open". Does not close anything; idempotent."""
        self._session.reset()
        self._last_sniff = None

    def end(self) -> None:
        """Close out the current file, if any."""
        self.close()

    def buffer_size(self) -> int:
        """Size of the buffers handed out by next_buffer()."""
        return self._config.buffer_size

    def push(self) -> SavedState:
        """Suspend the current file and start a blank session.

        The returned token must be passed to pop() to resume the file.
        Scrubber state is captured only if the file is being preprocessed.
        """
        s = self._session
        scrub_state = self._scrubber.save() if s.preprocess else None
        saved = SavedState(s.stream, s.file_name, s.preprocess, scrub_state, self._last_sniff)
        self._outstanding.add(saved)
        logger.debug("push %s (depth %d)", s.file_name, len(self._outstanding))
        self.begin()
        return saved

    def pop(self, saved: SavedState) -> None:
        """Close the current file and resume the one captured by push().

        Raises:
            SavedStateError: If saved was already popped or came from another
                InputFile.
        """
        if saved not in self._outstanding:
            raise SavedStateError("saved state was already popped or is not from this input file", saved.file_name)
        self._outstanding.remove(saved)
        self.end()
        s = self._session
        s.stream = saved.stream
        s.file_name = saved.file_name
        s.preprocess = saved.preprocess
        self._last_sniff = saved.sniff_result
        if saved.preprocess:
            self._scrubber.restore(saved.scrub_state)
        logger.debug("pop back to %s (depth %d)", s.file_name, len(self._outstanding))

    def open(self, name: str | os.PathLike[str], preprocess: bool) -> bool:
        """Open a source; "" means standard input.

        The first line is sniffed for #APP / #NO_APP, which override
        preprocess. An empty file is closed straight away.

        Args:
            name: File path, or "" for standard input
            preprocess: Requested preprocess mode

        Returns:
            False if the file could not be opened or its first read failed
            (an error has been reported). True otherwise, even for an empty
            file; check is_open to see whether there is anything to read.

        Raises:
            InvalidSourceError: If name is None
        """
        if name is None:
            raise InvalidSourceError('source name must not be None; use "" for standard input')

        s = self._session
        if s.stream is not None:
            logger.debug("open(%r) replaces %s", name, s.file_name)
            self.close()
        s.preprocess = preprocess
        self._last_sniff = None
        acc = get_read_accumulator()

        try:
            stream = open_source(name, stdin=self._stdin)
        except OSError as exc:
            s.file_name = STDIN_NAME if name == "" else os.fspath(name)
            self._diagnostics.error("can't open %s for reading: %s", s.file_name, _strerror(exc))
            if acc is not None:
                acc.record_open(False)
            return False

        s.stream = stream
        s.file_name = stream.name
        result = sniff(stream, preprocess, self._config)
        self._last_sniff = result
        if acc is not None:
            acc.record_open(stream.error is None)

        # A failure on any read made by the sniff is a failed first read
        if stream.error is not None:
            self._diagnostics.error("can't read from %s: %s", s.file_name, _strerror(stream.error))
            self.close()
            return False
        if result.status is SniffStatus.EMPTY:
            logger.debug("%s is empty", s.file_name)
            self.close()
            return True

        s.preprocess = result.preprocess
        logger.debug("opened %s (preprocess=%s)", s.file_name, s.preprocess)
        return True

    def close(self) -> None:
        """Release the current stream, if any.

        A failing close is reported as a warning; the session is left with
        nothing open either way.
        """
        s = self._session
        stream, s.stream = s.stream, None
        if stream is None:
            return
        try:
            stream.close()
        except OSError as exc:
            self._diagnostics.warning("can't close %s: %s", s.file_name, _strerror(exc))

    # =========================================================================
    # Buffer pump
    # =========================================================================

    def _get(self, n: int) -> bytes:
        """Raw byte supplier for the scrubber and the unscrubbed path."""
        stream = self._session.stream
        if stream is None or stream.at_eof:
            return b""
        had_error = stream.error is not None
        data = stream.read(n)
        if stream.error is not None and not had_error:
            self._diagnostics.error("can't read from %s: %s", self._session.file_name, _strerror(stream.error))
        return data

    def _give_next(self, capacity: int) -> bytes:
        s = self._session
        if s.stream is None:
            return b""

        if s.preprocess:
            data = self._scrubber.scrub(self._get, capacity, self._config.warn_multibyte)
        else:
            data = self._get(capacity)
            if data and self._config.warn_multibyte:
                self._scanner.scan(data, warn=True, where=s.file_name)

        if not data:
            logger.debug("%s exhausted", s.file_name)
            self.close()

        acc = get_read_accumulator()
        if acc is not None:
            acc.record_buffer(len(data))
        return data

    def next_buffer(self) -> bytes:
        """Return the next chunk of at most buffer_size() bytes.

        b"" means the source is exhausted (or nothing is open); the file has
        been closed and every later call returns b"" until the next open()
        or pop().
        """
        return self._give_next(self._config.buffer_size)

    def next_into(self, buffer: bytearray | memoryview) -> int:
        """Fill buffer with the next chunk and return the byte count.

        At most min(len(buffer), buffer_size()) bytes are written.
        0 means exhausted, as for next_buffer().

        Raises:
            ValueError: If buffer is empty
        """
        capacity = min(len(buffer), self._config.buffer_size)
        if capacity <= 0:
            raise ValueError("buffer must have room for at least one byte")
        data = self._give_next(capacity)
        n = len(data)
        buffer[:n] = data
        return n

    def chunks(self) -> Iterator[bytes]:
        """Yield chunks until the current source is exhausted."""
        while chunk := self.next_buffer():
            yield chunk


class IncludeStack:
    """Caller-owned stack of suspended files.

    Wraps push()/open() and pop() so nested includes unwind in order.

    Example:
        >>> stack = IncludeStack(f)
        >>> with stack.nested("macros.inc", preprocess=True) as ok:
        ...     data = b"".join(f.chunks())
        >>> # back in the outer file

    """

    __slots__ = ("_input", "_saved")

    def __init__(self, input_file: InputFile) -> None:
        self._input = input_file
        self._saved: list[SavedState] = []

    @property
    def depth(self) -> int:
        return len(self._saved)

    def __len__(self) -> int:
        return len(self._saved)

    def include(self, name: str | os.PathLike[str], preprocess: bool) -> bool:
        """Suspend the current file and open name in its place.

        Returns open()'s result. The outer file stays suspended even when the
        open fails; call resume() to get back to it.
        """
        self._saved.append(self._input.push())
        return self._input.open(name, preprocess)

    def resume(self) -> None:
        """Drop the included file and resume the most recently suspended one."""
        if not self._saved:
            raise SavedStateError("no suspended file to resume")
        self._input.pop(self._saved.pop())

    def unwind(self) -> None:
        """Resume repeatedly until no suspended files remain."""
        while self._saved:
            self.resume()

    @contextmanager
    def nested(self, name: str | os.PathLike[str], preprocess: bool) -> Iterator[bool]:
        """Read name as an include; always resumes the outer file on exit."""
        ok = self.include(name, preprocess)
        try:
            yield ok
        finally:
            self.resume()


def read_source(
    name: str | os.PathLike[str],
    *,
    preprocess: bool = True,
    config: InputConfig | None = None,
    diagnostics: Diagnostics | None = None,
    scrubber: Scrubber | None = None,
    stdin: BinaryIO | None = None,
) -> bytes:
    """Read a whole source through the input layer.

    Returns exactly the bytes the front end would see: the sniffed first
    line adjustments applied, scrubbed if preprocessing is in effect.
    Returns b"" if the file cannot be opened (the error is reported).
    """
    f = InputFile(config=config, diagnostics=diagnostics, scrubber=scrubber, stdin=stdin)
    f.open(name, preprocess)
    return b"".join(f.chunks())


__all__ = ["IncludeStack", "InputFile", "read_source"]
