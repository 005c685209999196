"""
asinput: source byte supply for assembler front ends

Everything an assembler needs to get bytes out of its input files, and
nothing more: open a file (or standard input), honour a leading #APP /
#NO_APP line, deliver the contents in fixed-size buffers (optionally through
a scrubber), and suspend/resume files around nested includes.

Quick Start:
    >>> from asinput import InputFile
    >>> f = InputFile()
    >>> f.open("hello.s", preprocess=True)
    True
    >>> data = b"".join(f.chunks())

    >>> # Or in one call
    >>> from asinput import read_source
    >>> data = read_source("hello.s")

Includes:
    >>> from asinput import IncludeStack
    >>> stack = IncludeStack(f)
    >>> with stack.nested("macros.inc", preprocess=True):
    ...     inner = b"".join(f.chunks())

"""

from asinput.config import (
    BUFFER_SIZE,
    InputConfig,
    MultibyteHandling,
    get_input_config,
    input_config_context,
    reset_input_config,
    set_input_config,
)
from asinput.diagnostics import Diagnostic, DiagnosticCollector, LoggingDiagnostics, Severity
from asinput.errors import AsInputError, InvalidSourceError, SavedStateError
from asinput.input_file import IncludeStack, InputFile, read_source
from asinput.multibyte import MultibyteScanner
from asinput.profiling import ReadAccumulator, get_read_accumulator, profiled_reads
from asinput.protocols import ByteSupplier, Diagnostics, MultibyteScan, Scrubber
from asinput.scrub import IdentityScrubber
from asinput.session import FileSession, SavedState
from asinput.sniff import Directive, SniffResult, SniffStatus, sniff
from asinput.stream import STDIN_NAME, SourceStream, open_source

__version__ = "0.1.0"

__all__ = [
    "BUFFER_SIZE",
    "STDIN_NAME",
    "AsInputError",
    "ByteSupplier",
    "Diagnostic",
    "DiagnosticCollector",
    "Diagnostics",
    "Directive",
    "FileSession",
    "IdentityScrubber",
    "IncludeStack",
    "InputConfig",
    "InputFile",
    "InvalidSourceError",
    "LoggingDiagnostics",
    "MultibyteHandling",
    "MultibyteScan",
    "MultibyteScanner",
    "ReadAccumulator",
    "SavedState",
    "SavedStateError",
    "Scrubber",
    "Severity",
    "SniffResult",
    "SniffStatus",
    "SourceStream",
    "__version__",
    "get_input_config",
    "get_read_accumulator",
    "input_config_context",
    "open_source",
    "profiled_reads",
    "read_source",
    "reset_input_config",
    "set_input_config",
    "sniff",
]
