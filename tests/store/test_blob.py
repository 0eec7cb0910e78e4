"""Tests for blob backends."""

import hashlib as _hashlib
import pathlib as _pathlib

import pytest as _pytest

import pathdoc.errors as errors
import pathdoc.store as store


class TestLocalFileBlob:
    """Tests for LocalFileBlob."""

    def test_missing_file_reads_empty(self, tmp_path: _pathlib.Path) -> None:
        """A missing file is an empty blob by default."""
        blob = store.LocalFileBlob(tmp_path / "missing.json")
        assert blob.load_data() == b""

    def test_missing_file_strict(self, tmp_path: _pathlib.Path) -> None:
        """With create_missing=False a missing file is an error."""
        blob = store.LocalFileBlob(tmp_path / "missing.json", create_missing=False)
        with _pytest.raises(FileNotFoundError):
            blob.load_data()

    def test_directory_rejected(self, tmp_path: _pathlib.Path) -> None:
        """A directory is not a collection file."""
        with _pytest.raises(IsADirectoryError):
            store.LocalFileBlob(tmp_path).load_data()

    def test_save_creates_parents(self, tmp_path: _pathlib.Path) -> None:
        """Parent directories are created on save."""
        path = tmp_path / "a" / "b" / "data.json"
        store.LocalFileBlob(path).save_data(b"{}")
        assert path.read_bytes() == b"{}"

    def test_save_leaves_no_temp_files(self, tmp_path: _pathlib.Path) -> None:
        """The temp file is renamed into place."""
        path = tmp_path / "data.json"
        blob = store.LocalFileBlob(path)
        blob.save_data(b"one")
        blob.save_data(b"two")
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]
        assert blob.load_data() == b"two"

    def test_token_is_content_hash(self, tmp_path: _pathlib.Path) -> None:
        """The exchange token is the SHA-256 of the content."""
        path = tmp_path / "data.json"
        path.write_bytes(b"{}")
        data, token = store.LocalFileBlob(path).load_versioned()
        assert data == b"{}"
        assert token == _hashlib.sha256(b"{}").hexdigest()

    def test_stale_write_rejected(self, tmp_path: _pathlib.Path) -> None:
        """With verify_writes, a save after a concurrent change fails."""
        path = tmp_path / "data.json"
        blob = store.LocalFileBlob(path, verify_writes=True)
        _, token = blob.load_versioned()
        path.write_bytes(b'{"other": 1}')
        with _pytest.raises(errors.StaleWriteError):
            blob.save_versioned(b"{}", token)
        assert path.read_bytes() == b'{"other": 1}'

    def test_fresh_token_accepted(self, tmp_path: _pathlib.Path) -> None:
        """With verify_writes, an unchanged file accepts the save."""
        path = tmp_path / "data.json"
        blob = store.LocalFileBlob(path, verify_writes=True)
        _, token = blob.load_versioned()
        blob.save_versioned(b"{}", token)
        assert path.read_bytes() == b"{}"

    def test_last_writer_wins_by_default(self, tmp_path: _pathlib.Path) -> None:
        """Without verify_writes a stale token is ignored."""
        path = tmp_path / "data.json"
        blob = store.LocalFileBlob(path)
        _, token = blob.load_versioned()
        path.write_bytes(b'{"other": 1}')
        blob.save_versioned(b"{}", token)
        assert path.read_bytes() == b"{}"


class TestMemoryBlob:
    """Tests for MemoryBlob."""

    def test_initial_content(self) -> None:
        """The blob starts with the given bytes."""
        assert store.MemoryBlob(b"abc").load_data() == b"abc"

    def test_version_and_save_count(self) -> None:
        """Each save bumps the version and the save count."""
        blob = store.MemoryBlob()
        blob.save_data(b"1")
        blob.save_data(b"2")
        assert blob.version == 2
        assert blob.save_count == 2
        assert blob.load_versioned() == (b"2", "2")

    def test_stale_write_rejected(self) -> None:
        """With verify_writes, an old token is rejected."""
        blob = store.MemoryBlob(verify_writes=True)
        _, token = blob.load_versioned()
        blob.save_data(b"other")
        with _pytest.raises(errors.StaleWriteError) as exc_info:
            blob.save_versioned(b"mine", token)
        assert exc_info.value.expected == "0"
        assert exc_info.value.actual == "1"
        assert blob.load_data() == b"other"


class TestBlobIODefaults:
    """Tests for the BlobIO base class."""

    def test_default_versioning_ignores_tokens(self) -> None:
        """A minimal backend gets token-free versioned I/O."""

        class _ListBlob(store.BlobIO):
            def __init__(self) -> None:
                self.saved: list[bytes] = []

            def load_data(self) -> bytes:
                return self.saved[-1] if self.saved else b""

            def save_data(self, data: bytes) -> None:
                self.saved.append(data)

        blob = _ListBlob()
        assert blob.load_versioned() == (b"", None)
        blob.save_versioned(b"x", "anything")
        assert blob.saved == [b"x"]

    def test_abstract(self) -> None:
        """BlobIO cannot be instantiated."""
        with _pytest.raises(TypeError):
            store.BlobIO()  # type: ignore[abstract]
