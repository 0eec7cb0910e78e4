"""
ID-keyed document store.

The store holds a collection (record ID -> tree value) inside a single
blob. There is no in-memory cache: every call loads and decodes the whole
collection, and every mutation re-encodes and saves the whole collection.

Record lifecycle:
    absent --add--> present --edit/merge_update--> present --delete--> absent

Known limitation: without verify_writes on the backend, two writers racing
on the same blob can lose updates (the last full save wins).
"""

from __future__ import annotations

import copy as _copy
import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import pathdoc.config.types as config_types
import pathdoc.errors as errors
import pathdoc.merge as merge
import pathdoc.store.blob as blob
import pathdoc.store.codec as codec
import pathdoc.tree as tree

_logger = _logging.getLogger(__name__)

Collection: _typing.TypeAlias = codec.Collection

_MISSING = object()


@_dataclasses.dataclass
class Snapshot:
    """A decoded collection plus the exchange token it was loaded with."""

    collection: Collection
    token: str | None


def _plain(record: _typing.Any) -> _typing.Any:
    """Accept a Tree or plain data."""
    return record.data if isinstance(record, tree.Tree) else record


class DocumentStore:
    """
    CRUD over a collection of tree values stored in one blob.

    Args:
        blob_io: Backend holding the encoded collection.
        config: Delimiter/codec settings. Defaults to StoreConfig().

    Example:
        >>> store = DocumentStore(MemoryBlob())
        >>> store.add("u1", {"name": "Sally", "age": 27})
        ('u1', {'name': 'Sally', 'age': 27})
        >>> store.merge_update("u1", {"age": 28})
        {'name': 'Sally', 'age': 28}
    """

    def __init__(
        self,
        blob_io: blob.BlobIO,
        config: config_types.StoreConfig | None = None,
    ) -> None:
        self.blob = blob_io
        self.config = config or config_types.StoreConfig()
        self.codec = codec.get_codec(self.config.codec, self.config.indent)

    def __repr__(self) -> str:
        return f"DocumentStore({self.blob!r}, codec={self.codec.name!r})"

    @property
    def delimiter(self) -> str:
        return self.config.delimiter

    # -------------------------------------------------------------------------
    # Load / save
    # -------------------------------------------------------------------------

    def load(self) -> Snapshot:
        """
        Load and decode the collection along with its exchange token.

        Raises:
            DecodeError: If the blob is not a valid encoded collection.
        """
        raw, token = self.blob.load_versioned()
        collection = self.codec.loads(raw)
        _logger.debug("Loaded %d records from %r", len(collection), self.blob)
        return Snapshot(collection, token)

    def _save(self, snapshot: Snapshot) -> None:
        data = self.codec.dumps(snapshot.collection)
        self.blob.save_versioned(data, snapshot.token)
        _logger.debug("Saved %d records to %r", len(snapshot.collection), self.blob)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list(self) -> Collection:
        """
        Return the whole collection (freshly decoded, safe to mutate).

        Raises:
            DecodeError: If the blob is not a valid encoded collection.
        """
        return self.load().collection

    def ids(self) -> list[str]:
        return list(self.list())

    def exists(self, id: str) -> bool:  # noqa: A002
        return id in self.list()

    def get(self, id: str) -> _typing.Any:  # noqa: A002
        """
        Return one record.

        Raises:
            KeyNotFoundError: If no record has this ID.
        """
        collection = self.list()
        if id not in collection:
            raise errors.KeyNotFoundError(id)
        return collection[id]

    def get_tree(self, id: str) -> tree.Tree:  # noqa: A002
        """Return one record wrapped in a Tree using the store delimiter."""
        return tree.Tree(self.get(id), self.delimiter)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def add(self, id: str, record: _typing.Any) -> tuple[str, _typing.Any]:  # noqa: A002
        """
        Insert a new record.

        Returns:
            (id, stored record). The record returned is a copy.

        Raises:
            KeyAlreadyExistsError: If the ID is taken; nothing is written.
        """
        snapshot = self.load()
        if id in snapshot.collection:
            raise errors.KeyAlreadyExistsError(id)

        snapshot.collection[id] = _copy.deepcopy(_plain(record))
        self._save(snapshot)
        _logger.info("Added record %r", id)
        return id, _copy.deepcopy(snapshot.collection[id])

    def delete(self, id: str) -> _typing.Any:  # noqa: A002
        """
        Remove a record.

        Deleting an absent ID is a no-op: it returns None and writes nothing.
        A stored null record also comes back as None; use pop() to tell the
        two apart.

        Returns:
            The removed record, or None.
        """
        return self.pop(id, None)

    def pop(self, id: str, default: _typing.Any = _MISSING) -> _typing.Any:  # noqa: A002
        """
        Remove a record and return it, like dict.pop().

        Presence is decided on the same snapshot that is saved, so there is
        one load per call.

        Raises:
            KeyNotFoundError: If the ID is absent and no default is given.
                Nothing is written for an absent ID.
        """
        snapshot = self.load()
        if id not in snapshot.collection:
            _logger.debug("Delete of absent record %r ignored", id)
            if default is _MISSING:
                raise errors.KeyNotFoundError(id)
            return default

        removed = snapshot.collection.pop(id)
        self._save(snapshot)
        _logger.info("Deleted record %r", id)
        return removed

    def edit(
        self,
        existing_id: str,
        record: _typing.Any,
        new_id: str | None = None,
    ) -> _typing.Any:
        """
        Replace a record wholesale, optionally under a new ID.

        With new_id, the old entry is removed and the record stored under
        new_id (overwriting any record already there).

        Returns:
            The stored record (a copy).

        Raises:
            KeyNotFoundError: If existing_id is absent.
        """
        snapshot = self.load()
        if existing_id not in snapshot.collection:
            raise errors.KeyNotFoundError(existing_id)

        stored = _copy.deepcopy(_plain(record))
        self._store_under(snapshot.collection, existing_id, new_id, stored)
        self._save(snapshot)
        _logger.info("Edited record %r%s", existing_id, f" -> {new_id!r}" if new_id else "")
        return _copy.deepcopy(stored)

    def merge_update(
        self,
        existing_id: str,
        delta: _typing.Any,
        delimiter: str | None = None,
        new_id: str | None = None,
    ) -> _typing.Any:
        """
        Merge delta into a record by leaf path (see pathdoc.merge).

        Fields of the record that delta does not mention are kept.

        Args:
            existing_id: Record to update.
            delta: Tree or plain data with the fields to change.
            delimiter: Delimiter for the merge paths. Defaults to the
                store's; it only matters for keys containing the delimiter.
            new_id: Store the merged record under this ID instead.

        Returns:
            The merged record (a copy).

        Raises:
            RecordNotFoundError: If existing_id is absent.
        """
        snapshot = self.load()
        if existing_id not in snapshot.collection:
            raise errors.RecordNotFoundError(existing_id)

        if delimiter is None:
            delimiter = delta.delimiter if isinstance(delta, tree.Tree) else self.delimiter

        collection = _copy.deepcopy(snapshot.collection)
        merged = merge.merge_into(collection[existing_id], _plain(delta), delimiter)
        self._store_under(collection, existing_id, new_id, merged)
        self._save(Snapshot(collection, snapshot.token))
        _logger.info("Merged into record %r%s", existing_id, f" -> {new_id!r}" if new_id else "")
        return _copy.deepcopy(merged)

    def merge_field(
        self,
        existing_id: str,
        path: str,
        value: _typing.Any,
        delimiter: str | None = None,
    ) -> _typing.Any:
        """Merge a single value at path into a record (see merge_update)."""
        delimiter = delimiter or self.delimiter
        delta = tree.set_path({}, tree.parse_path(path, delimiter), value)
        return self.merge_update(existing_id, delta, delimiter)

    @staticmethod
    def _store_under(
        collection: Collection,
        existing_id: str,
        new_id: str | None,
        record: _typing.Any,
    ) -> None:
        if new_id is not None and new_id != existing_id:
            del collection[existing_id]
            collection[new_id] = record
        else:
            collection[existing_id] = record
