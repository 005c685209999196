"""Tests for SourceStream pushback, EOF and error handling."""

from __future__ import annotations

import io
import os
import threading
import time
from pathlib import Path

import pytest
from conftest import FailingReader, TrickleReader

from asinput.stream import STDIN_NAME, SourceStream, open_source


def make_stream(data: bytes) -> SourceStream:
    return SourceStream(io.BytesIO(data), "t.s")


class TestGetcAndUnread:
    """Single-byte reads and pushback."""

    def test_getc_returns_byte_values(self) -> None:
        s = make_stream(b"ab")
        assert s.getc() == ord("a")
        assert s.getc() == ord("b")
        assert s.getc() is None

    def test_unread_byte_is_read_again(self) -> None:
        s = make_stream(b"xyz")
        c = s.getc()
        assert c is not None
        s.unread(c)
        assert s.read(10) == b"xyz"

    def test_unread_bytes_prepend(self) -> None:
        s = make_stream(b"tail")
        s.unread(b"\n")
        s.unread(b"#")
        assert s.pending == b"#\n"
        assert s.read(10) == b"#\ntail"

    def test_unread_after_eof_is_delivered(self) -> None:
        s = make_stream(b"")
        assert s.getc() is None
        assert s.at_eof
        s.unread(b"#")
        assert not s.at_eof
        assert s.getc() == ord("#")
        assert s.at_eof


class TestRead:
    """Bulk reads."""

    def test_short_read_marks_eof(self) -> None:
        s = make_stream(b"abc")
        assert s.read(10) == b"abc"
        assert s.at_eof
        assert s.read(10) == b""

    def test_full_read_does_not_mark_eof(self) -> None:
        s = make_stream(b"abcd")
        assert s.read(4) == b"abcd"
        assert not s.at_eof
        assert s.read(4) == b""
        assert s.at_eof

    def test_read_drains_pushback_first(self) -> None:
        s = make_stream(b"cdef")
        s.unread(b"ab")
        assert s.read(3) == b"abc"
        assert s.read(3) == b"def"

    def test_read_smaller_than_pushback(self) -> None:
        s = make_stream(b"z")
        s.unread(b"abc")
        assert s.read(2) == b"ab"
        assert s.pending == b"c"

    def test_read_zero(self) -> None:
        assert make_stream(b"abc").read(0) == b""


class TestReadline:
    """fgets-style line reads."""

    def test_stops_after_newline(self) -> None:
        s = make_stream(b"PP\nrest")
        assert s.readline(79) == b"PP\n"
        assert s.read(10) == b"rest"

    def test_respects_limit(self) -> None:
        s = make_stream(b"x" * 100)
        assert s.readline(79) == b"x" * 79
        assert not s.at_eof

    def test_unterminated_last_line(self) -> None:
        s = make_stream(b"PP")
        assert s.readline(79) == b"PP"
        assert s.at_eof

    def test_nothing_to_read(self) -> None:
        assert make_stream(b"").readline(79) == b""

    def test_pushback_newline_ends_line(self) -> None:
        s = make_stream(b"more")
        s.unread(b"ab\n")
        assert s.readline(79) == b"ab\n"


class TestShortReads:
    """Short reads from the handle are not end of file."""

    def test_read_keeps_going_until_full(self) -> None:
        s = SourceStream(TrickleReader(b"abcdefgh", step=3), "t.s")
        assert s.read(8) == b"abcdefgh"
        assert not s.at_eof
        assert s.read(8) == b""
        assert s.at_eof

    def test_read_stops_at_real_eof(self) -> None:
        s = SourceStream(TrickleReader(b"abcde", step=2), "t.s")
        assert s.read(10) == b"abcde"
        assert s.at_eof

    def test_readline_across_short_reads(self) -> None:
        s = SourceStream(TrickleReader(b"O_APP\nrest", step=2), "t.s")
        assert s.readline(79) == b"O_APP\n"
        assert not s.at_eof
        assert s.read(10) == b"rest"

    def test_pipe_with_delayed_writer(self) -> None:
        r, w = os.pipe()

        def writer() -> None:
            os.write(w, b"abc")
            time.sleep(0.2)
            os.write(w, b"def\n")
            os.close(w)

        thread = threading.Thread(target=writer)
        thread.start()
        s = SourceStream(io.FileIO(r), STDIN_NAME)
        try:
            assert s.read(100) == b"abcdef\n"
            assert s.at_eof
        finally:
            thread.join()
            s.close()


class TestErrors:
    """Read errors are sticky."""

    def test_error_recorded(self) -> None:
        s = SourceStream(FailingReader(b"abc", fail_after=0), "bad.s")
        assert s.getc() is None
        assert isinstance(s.error, OSError)

    def test_no_reads_after_error(self) -> None:
        s = SourceStream(FailingReader(b"abcdefgh", fail_after=4), "bad.s")
        assert s.read(4) == b"abcd"
        assert s.error is None
        assert s.read(4) == b""
        assert s.error is not None
        assert s.read(4) == b""


class TestClose:
    """Releasing handles."""

    def test_close_closes_owned_handle(self) -> None:
        handle = io.BytesIO(b"abc")
        s = SourceStream(handle, "t.s")
        s.close()
        assert s.closed
        assert handle.closed

    def test_close_is_idempotent(self) -> None:
        s = make_stream(b"abc")
        s.close()
        s.close()
        assert s.closed

    def test_borrowed_handle_left_open(self) -> None:
        handle = io.BytesIO(b"abc")
        s = SourceStream(handle, STDIN_NAME, owns_handle=False)
        s.close()
        assert s.closed
        assert not handle.closed

    def test_close_drops_pushback(self) -> None:
        s = make_stream(b"abc")
        s.unread(b"#")
        s.close()
        assert s.read(10) == b""


class TestOpenSource:
    """open_source() naming and failures."""

    def test_empty_name_is_stdin(self) -> None:
        stdin = io.BytesIO(b"data")
        s = open_source("", stdin=stdin)
        assert s.name == STDIN_NAME
        assert s.read(10) == b"data"
        s.close()
        assert not stdin.closed

    def test_path_keeps_name(self, tmp_path: Path) -> None:
        path = tmp_path / "a.s"
        path.write_bytes(b"nop\n")
        name = str(path)
        s = open_source(name)
        assert s.name is name
        assert s.read(100) == b"nop\n"
        s.close()

    def test_pathlike_accepted(self, tmp_path: Path) -> None:
        path = tmp_path / "a.s"
        path.write_bytes(b"nop\n")
        s = open_source(path)
        assert s.name == str(path)
        s.close()

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            open_source(tmp_path / "missing.s")
