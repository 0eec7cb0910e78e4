"""
Exception hierarchy for pathdoc.

Every error raised by the library derives from PathdocError. Most also
derive from the closest builtin (ValueError, LookupError, IndexError) so
callers that already catch those keep working.

Probe-style operations (Tree.has, Tree.delete, Tree.move, Tree.copy,
DocumentStore.delete) treat a missing path or ID as a non-error; the
assert-style ones (get, edit, merge_update) raise the typed errors below.
"""

from __future__ import annotations

import typing as _typing


class PathdocError(Exception):
    """Base class for all pathdoc errors."""

    pass


# =============================================================================
# Tree / path errors
# =============================================================================


class InvalidPathError(PathdocError, ValueError):
    """Raised when a path string cannot be tokenized."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path {path!r}: {reason}")


class PathNotFoundError(PathdocError, LookupError):
    """Raised when a read walks into a key that does not exist."""

    def __init__(self, path: _typing.Any, key: str | int | None = None) -> None:
        self.path = path
        self.key = key
        message = f"Path not found: {path!r}"
        if key is not None:
            message += f" (missing key {key!r})"
        super().__init__(message)


class IndexOutOfRangeError(PathNotFoundError, IndexError):
    """Raised when a read indexes past the end of a sequence."""

    def __init__(self, path: _typing.Any, index: int, length: int) -> None:
        self.index = index
        self.length = length
        PathdocError.__init__(
            self,
            f"Index {index} out of range for sequence of length {length} at {path!r}",
        )
        self.path = path
        self.key = index


# =============================================================================
# Store errors
# =============================================================================


class DecodeError(PathdocError, ValueError):
    """Raised when the stored collection is not valid structured data."""

    pass


class KeyNotFoundError(PathdocError, LookupError):
    """Raised when an operation requires an existing record ID."""

    def __init__(self, id: str) -> None:  # noqa: A002 - mirrors store vocabulary
        self.id = id
        super().__init__(f"Record {id!r} does not exist")


class RecordNotFoundError(KeyNotFoundError):
    """Raised by merge_update when the record to merge into is absent."""

    pass


class KeyAlreadyExistsError(PathdocError, LookupError):
    """Raised when add() would overwrite an existing record."""

    def __init__(self, id: str) -> None:  # noqa: A002
        self.id = id
        super().__init__(f"Record {id!r} already exists; not adding")


class StaleWriteError(PathdocError):
    """Raised when a versioned save finds the blob changed since it was loaded."""

    def __init__(self, expected: str | None, actual: str | None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Collection changed since it was loaded (expected version {expected!r}, "
            f"found {actual!r})"
        )


# =============================================================================
# Config errors
# =============================================================================


class ConfigFileError(PathdocError):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _typing.Any, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")
