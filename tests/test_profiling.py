"""Tests for asinput.profiling: read profiling API."""

from collections.abc import Callable
from pathlib import Path

from asinput import DiagnosticCollector, InputConfig, InputFile, read_source
from asinput.profiling import (
    ReadAccumulator,
    get_read_accumulator,
    profiled_reads,
)


class TestGetReadAccumulator:
    def test_returns_none_when_disabled(self) -> None:
        assert get_read_accumulator() is None

    def test_returns_none_outside_context(self) -> None:
        with profiled_reads():
            pass
        assert get_read_accumulator() is None


class TestProfiledReads:
    def test_yields_accumulator(self) -> None:
        with profiled_reads() as acc:
            assert isinstance(acc, ReadAccumulator)
            assert get_read_accumulator() is acc

    def test_records_file_read(self, source_file: Callable[..., Path]) -> None:
        path = source_file(b"nop\n")
        with profiled_reads() as acc:
            read_source(path, diagnostics=DiagnosticCollector())
        assert acc.files_opened == 1
        assert acc.buffers == 1
        assert acc.bytes_read == 4

    def test_records_open_failure(self, tmp_path: Path) -> None:
        with profiled_reads() as acc:
            read_source(tmp_path / "missing.s", diagnostics=DiagnosticCollector())
        assert acc.files_opened == 0
        assert acc.open_failures == 1

    def test_counts_every_buffer(self, source_file: Callable[..., Path]) -> None:
        path = source_file(b"x" * 10)
        f = InputFile(config=InputConfig(buffer_size=4), diagnostics=DiagnosticCollector())
        with profiled_reads() as acc:
            f.open(path, preprocess=False)
            list(f.chunks())
        assert acc.buffers == 3
        assert acc.bytes_read == 10

    def test_total_duration_non_negative(self) -> None:
        with profiled_reads() as acc:
            pass
        assert acc.total_duration_ms >= 0


class TestSummary:
    def test_empty_summary(self) -> None:
        summary = ReadAccumulator().summary()
        assert summary["files_opened"] == 0
        assert summary["buffers"] == 0
        assert summary["bytes_read"] == 0
        assert "total_ms" in summary

    def test_zero_size_buffer_not_counted(self) -> None:
        acc = ReadAccumulator()
        acc.record_buffer(0)
        acc.record_buffer(5)
        assert acc.summary()["buffers"] == 1
        assert acc.summary()["bytes_read"] == 5
