"""Exception classes for asinput.

I/O failures are never raised: they are reported through the diagnostics
sink and surface as "no file open" or a zero-byte buffer. The exceptions
here are for programming errors made by callers of the API.
"""

from __future__ import annotations


class AsInputError(Exception):
    """Base exception for all asinput errors."""

    pass


class InvalidSourceError(AsInputError, ValueError):
    """Raised when open() is given no source name at all.

    The empty string is valid (it selects standard input); None is not.
    """

    pass


class SavedStateError(AsInputError):
    """Saved input state was reused or handed to the wrong InputFile.

    A SavedState returned by push() may be passed to pop() exactly once,
    and only on the InputFile that issued it.
    """

    def __init__(self, message: str, file_name: str | None = None) -> None:
        """Initialize saved-state error.

        Args:
            message: Description of the misuse
            file_name: Display name captured in the offending token (optional)
        """
        self.file_name = file_name
        if file_name:
            message = f"{message} (saved state for {file_name})"
        super().__init__(message)
