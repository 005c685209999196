"""Logger namespace and console setup for asinput.

Every module logs under "asinput.<module>"; diagnostics reported to the
default sink go to "asinput.diagnostics". The command line routes all of it
to stderr with configure_logging().

Example:
    >>> from asinput.utils.logger import get_logger
    >>> get_logger("stream").name
    'asinput.stream'
"""

from __future__ import annotations

import logging

NAMESPACE = "asinput"

# Diagnostics read like assembler messages ("warning: ..."); debug output
# from the input layer also names the module it came from.
_DIAGNOSTIC_FORMAT = "%(levelname)s: %(message)s"
_DEBUG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return the logger for name inside the asinput namespace.

    Names already under the namespace (module __name__ values) are used as is.
    """
    if name != NAMESPACE and not name.startswith(NAMESPACE + "."):
        name = f"{NAMESPACE}.{name}"
    return logging.getLogger(name)


def configure_logging(verbose: bool = False) -> None:
    """Send asinput log records to stderr.

    Warnings and errors are always shown. verbose adds the debug trail of
    opens, pushes, pops and exhausted files.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format=_DEBUG_FORMAT if verbose else _DIAGNOSTIC_FORMAT,
    )
    logging.getLogger(NAMESPACE).setLevel(level)


__all__ = ["NAMESPACE", "configure_logging", "get_logger"]
