"""
Blob I/O backends for the document store.

A backend moves the encoded collection in and out of storage as one opaque
blob. The store never writes partially: every mutation rewrites the whole
blob.

Concurrency: by default nothing coordinates concurrent writers, and the
last full save wins. Backends can opt into an exchange token: the token
returned by load_versioned() must be handed back to save_versioned(), and
a backend created with verify_writes=True rejects the save with
StaleWriteError if the blob changed in between.
"""

from __future__ import annotations

import abc as _abc
import hashlib as _hashlib
import logging as _logging
import os as _os
import pathlib as _pathlib
import tempfile as _tempfile

import pathdoc.errors as errors

_logger = _logging.getLogger(__name__)


class BlobIO(_abc.ABC):
    """
    Storage for one encoded collection.

    Subclasses implement load_data() and save_data(). The versioned pair
    defaults to ignoring tokens, which reproduces last-writer-wins.
    """

    @_abc.abstractmethod
    def load_data(self) -> bytes:
        """Return the raw encoded collection."""
        ...

    @_abc.abstractmethod
    def save_data(self, data: bytes) -> None:
        """Persist the raw encoded collection in full."""
        ...

    def load_versioned(self) -> tuple[bytes, str | None]:
        """Return (data, token). The default backend has no token."""
        return self.load_data(), None

    def save_versioned(self, data: bytes, token: str | None) -> None:  # noqa: ARG002 - token unused by default
        """Persist data, given the token from the matching load."""
        self.save_data(data)


def _content_token(data: bytes) -> str:
    return _hashlib.sha256(data).hexdigest()


class LocalFileBlob(BlobIO):
    """
    Collection stored in a single local file.

    Writes go to a temp file in the same directory which then replaces the
    target, so readers never see a half-written collection. Parent
    directories are created on first save.

    Args:
        path: Collection file.
        create_missing: Treat a missing file as an empty collection. If
            False, loading a missing file raises FileNotFoundError.
        verify_writes: Reject saves when the file changed since it was
            loaded (token = SHA-256 of the content).
    """

    def __init__(
        self,
        path: _pathlib.Path | str,
        *,
        create_missing: bool = True,
        verify_writes: bool = False,
    ) -> None:
        self.path = _pathlib.Path(path)
        self.create_missing = create_missing
        self.verify_writes = verify_writes

    def __repr__(self) -> str:
        return f"LocalFileBlob({str(self.path)!r})"

    def load_data(self) -> bytes:
        if not self.path.exists():
            if self.create_missing:
                _logger.debug("%s does not exist yet; treating as empty", self.path)
                return b""
            raise FileNotFoundError(f"Collection file does not exist: {self.path}")
        if not self.path.is_file():
            raise IsADirectoryError(f"Collection path is not a file: {self.path}")
        return self.path.read_bytes()

    def save_data(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = _tempfile.mkstemp(
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            dir=self.path.parent,
        )
        try:
            with _os.fdopen(fd, "wb") as handle:
                handle.write(data)
            _os.replace(tmp_name, self.path)
        except BaseException:
            _pathlib.Path(tmp_name).unlink(missing_ok=True)
            raise

    def load_versioned(self) -> tuple[bytes, str | None]:
        data = self.load_data()
        return data, _content_token(data)

    def save_versioned(self, data: bytes, token: str | None) -> None:
        if self.verify_writes:
            current = _content_token(self.load_data())
            if token != current:
                _logger.warning("Rejecting stale write to %s", self.path)
                raise errors.StaleWriteError(token, current)
        self.save_data(data)


class MemoryBlob(BlobIO):
    """
    In-process blob, for tests and throwaway stores.

    The token is a version counter bumped on every save; save_count
    records how many saves happened.
    """

    def __init__(self, initial: bytes = b"", *, verify_writes: bool = False) -> None:
        self._data = initial
        self._version = 0
        self.save_count = 0
        self.verify_writes = verify_writes

    def __repr__(self) -> str:
        return f"MemoryBlob(version={self._version}, size={len(self._data)})"

    @property
    def version(self) -> int:
        return self._version

    def load_data(self) -> bytes:
        return self._data

    def save_data(self, data: bytes) -> None:
        self._data = bytes(data)
        self._version += 1
        self.save_count += 1

    def load_versioned(self) -> tuple[bytes, str | None]:
        return self._data, str(self._version)

    def save_versioned(self, data: bytes, token: str | None) -> None:
        if self.verify_writes and token != str(self._version):
            raise errors.StaleWriteError(token, str(self._version))
        self.save_data(data)
