"""
Build stores and table views from Settings.

The store itself never reads global configuration; this module is the one
place that turns Settings into a backend plus a StoreConfig, and the table
section into a TableView delimiter.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import typing as _typing

import pathdoc.store.blob as blob
import pathdoc.store.store as store
import pathdoc.store.table as table

if _typing.TYPE_CHECKING:
    import pathdoc.config as config

_logger = _logging.getLogger(__name__)


def open_blob(settings: config.Settings, base_dir: _pathlib.Path | None = None) -> blob.BlobIO:
    """
    Create the blob backend named by settings.backend.kind.

    Args:
        settings: Effective settings.
        base_dir: Directory that relative file paths resolve against.
            Defaults to the current working directory.

    Raises:
        ValueError: If the backend kind is unknown.
    """
    backend = settings.backend
    if backend.kind == "file":
        path = _pathlib.Path(backend.path).expanduser()
        if not path.is_absolute():
            path = (base_dir or _pathlib.Path.cwd()) / path
        _logger.debug("Using file backend at %s", path)
        return blob.LocalFileBlob(
            path,
            create_missing=backend.create_missing,
            verify_writes=backend.verify_writes,
        )
    if backend.kind == "memory":
        return blob.MemoryBlob(verify_writes=backend.verify_writes)
    raise ValueError(f"Unknown backend kind: {backend.kind!r}")


def open_store(
    settings: config.Settings | None = None,
    base_dir: _pathlib.Path | None = None,
) -> store.DocumentStore:
    """
    Create a DocumentStore from settings (loaded from the environment if omitted).
    """
    if settings is None:
        import pathdoc.config as config

        settings = config.Settings()
    return store.DocumentStore(open_blob(settings, base_dir), settings.store)


def open_table(
    columns: _typing.Sequence[table.Column],
    *,
    key_path: str,
    settings: config.Settings | None = None,
    base_dir: _pathlib.Path | None = None,
) -> table.TableView:
    """
    Create a TableView over the configured store.

    Column names and row keys use settings.table.delimiter.

    Args:
        columns: Columns shown by the view.
        key_path: Path (table delimiter) holding each record's ID.
        settings: Effective settings; loaded from the environment if omitted.
        base_dir: Directory that relative file paths resolve against.
    """
    if settings is None:
        import pathdoc.config as config

        settings = config.Settings()
    return table.TableView(
        open_store(settings, base_dir),
        columns,
        key_path=key_path,
        delimiter=settings.table.delimiter,
    )
