"""Shared fixtures for asinput tests."""

from __future__ import annotations

import errno
import io
from collections.abc import Callable
from pathlib import Path

import pytest

from asinput import DiagnosticCollector, InputConfig, InputFile
from asinput.protocols import ByteSupplier


class FailingReader(io.BytesIO):
    """BytesIO whose reads fail once fail_after bytes have been handed out."""

    def __init__(self, data: bytes = b"", fail_after: int = 0) -> None:
        super().__init__(data)
        self._fail_after = fail_after

    def read(self, n: int | None = -1) -> bytes:
        pos = self.tell()
        if pos >= self._fail_after:
            raise OSError(errno.EIO, "Input/output error")
        if n is None or n < 0:
            n = self._fail_after - pos
        return super().read(min(n, self._fail_after - pos))


class FailingReadline(io.BytesIO):
    """BytesIO whose single-byte reads work but readline() fails."""

    def readline(self, size: int | None = -1) -> bytes:
        raise OSError(errno.EIO, "Input/output error")


class TrickleReader(io.BytesIO):
    """BytesIO that returns at most step bytes per call, like a pipe."""

    def __init__(self, data: bytes = b"", step: int = 1) -> None:
        super().__init__(data)
        self._step = step

    def read(self, n: int | None = -1) -> bytes:
        if n is None or n < 0:
            n = self._step
        return super().read(min(n, self._step))

    def readline(self, size: int | None = -1) -> bytes:
        if size is None or size < 0:
            size = self._step
        return super().readline(min(size, self._step))


class FailingClose(io.BytesIO):
    """BytesIO whose close() reports an I/O error."""

    def close(self) -> None:
        super().close()
        raise OSError(errno.EIO, "Input/output error")


class RecordingScrubber:
    """Scrubber fake: upper-cases what it reads and records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[int, bool]] = []
        self.state = "initial"
        self.saved: list[object] = []
        self.restored: list[object] = []

    def scrub(self, supplier: ByteSupplier, capacity: int, warn_multibyte: bool) -> bytes:
        self.calls.append((capacity, warn_multibyte))
        return supplier(capacity).upper()

    def save(self) -> object:
        token = ("saved", self.state)
        self.saved.append(token)
        self.state = "fresh"
        return token

    def restore(self, state: object) -> None:
        self.restored.append(state)
        self.state = state[1]  # type: ignore[index]


@pytest.fixture
def collector() -> DiagnosticCollector:
    return DiagnosticCollector()


@pytest.fixture
def scrubber() -> RecordingScrubber:
    return RecordingScrubber()


@pytest.fixture
def source_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing bytes to a file under tmp_path."""

    def _write(content: bytes, name: str = "input.s") -> Path:
        path = tmp_path / name
        path.write_bytes(content)
        return path

    return _write


@pytest.fixture
def input_file(collector: DiagnosticCollector) -> InputFile:
    return InputFile(config=InputConfig(), diagnostics=collector)
