"""
Column-oriented views over a document store.

Table UIs and CSV exports want one flat row per record with a fixed set of
columns. A column is a flattened path into the record, written with the
table delimiter (``owner__name``, ``tags[0]``) so it can double as a form
field name.

TableView adds batch create/update/delete on top of DocumentStore. Batch
operations never raise for per-row problems (duplicate IDs, missing
records); they report a message for that row and carry on.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import pathdoc.constants as constants
import pathdoc.errors as errors
import pathdoc.store.store as store
import pathdoc.tree as tree

_logger = _logging.getLogger(__name__)

Row: _typing.TypeAlias = dict[str, _typing.Any]


@_dataclasses.dataclass(frozen=True)
class Column:
    """A table column: flat path, display title, visibility."""

    name: str
    title: str
    hidden: bool = False


def column_metadata(
    columns: _typing.Mapping[str, str] | _typing.Iterable[Column],
    hidden: _typing.Collection[str] = (),
) -> list[dict[str, _typing.Any]]:
    """
    Describe columns for a table widget.

    Args:
        columns: Either Column objects or a name -> title mapping.
        hidden: Extra column names to mark hidden.

    Returns:
        One {"title", "data", "isHidden"} dict per column, in order.
    """
    if isinstance(columns, _typing.Mapping):
        columns = [Column(name, title) for name, title in columns.items()]

    return [
        {
            "title": column.title,
            "data": column.name,
            "isHidden": column.hidden or column.name in hidden,
        }
        for column in columns
    ]


def flatten_fill(
    collection: _typing.Mapping[str, _typing.Any],
    columns: _typing.Iterable[str],
    delimiter: str = constants.TABLE_DELIMITER,
) -> list[Row]:
    """
    Flatten each record and keep only the given columns.

    Columns a record lacks are filled with an empty string.
    """
    names = list(columns)
    rows: list[Row] = []
    for record in collection.values():
        flat = tree.flatten(record, delimiter)
        rows.append({name: flat.get(name, constants.EMPTY_CELL) for name in names})
    return rows


class TableView:
    """
    Flat-row CRUD over a DocumentStore.

    Args:
        store: Backing store.
        columns: Columns shown by rows().
        key_path: Path (table delimiter) holding each record's ID.
        delimiter: Delimiter used in column names and row keys.

    Subclasses can override before_insert() and before_update() to fill
    generated fields or validate rows.
    """

    def __init__(
        self,
        store: store.DocumentStore,
        columns: _typing.Sequence[Column],
        *,
        key_path: str,
        delimiter: str = constants.TABLE_DELIMITER,
    ) -> None:
        self.store = store
        self.columns = list(columns)
        self.key_path = key_path
        self.delimiter = delimiter

    def metadata(self) -> list[dict[str, _typing.Any]]:
        return column_metadata(self.columns)

    def rows(self) -> list[Row]:
        return flatten_fill(self.store.list(), [c.name for c in self.columns], self.delimiter)

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def before_insert(self, record: tree.Tree) -> tuple[str, tree.Tree]:
        """Return (id, record) for a new row. Reads the ID from key_path."""
        return str(record.get(self.key_path)), record

    def before_update(self, record: tree.Tree) -> tree.Tree:
        return record

    # -------------------------------------------------------------------------
    # Batch operations
    # -------------------------------------------------------------------------

    def create(self, rows: _typing.Mapping[_typing.Any, _typing.Mapping[str, _typing.Any]]) -> dict[_typing.Any, _typing.Any]:
        """
        Insert one record per flat row.

        Returns:
            For each row key: the stored record, or an error message.
        """
        results: dict[_typing.Any, _typing.Any] = {}
        for index, row in rows.items():
            record = tree.Tree.from_flat(row, self.delimiter)
            record_id: str | None = None
            try:
                record_id, record = self.before_insert(record)
                _, stored = self.store.add(record_id, record.data)
            except errors.KeyAlreadyExistsError:
                results[index] = f"Record [ {record_id} ] already exists."
            except errors.PathNotFoundError:
                results[index] = f"Row has no value at {self.key_path!r} to use as ID."
            except errors.PathdocError as e:
                _logger.warning("Could not create row %r: %s", index, e)
                results[index] = str(e)
            else:
                _logger.info("Created record %r from row %r", record_id, index)
                results[index] = stored
        return results

    def update(self, rows: _typing.Mapping[str, _typing.Mapping[str, _typing.Any]]) -> dict[str, _typing.Any]:
        """
        Merge each flat row into the record with the same ID.

        Returns:
            For each ID: the merged record, or an error message.
        """
        results: dict[str, _typing.Any] = {}
        for existing_id, row in rows.items():
            record = self.before_update(tree.Tree.from_flat(row, self.delimiter))
            try:
                results[existing_id] = self.store.merge_update(existing_id, record.data, self.delimiter)
            except errors.RecordNotFoundError:
                results[existing_id] = f"Record [ {existing_id} ] could not be found."
        return results

    def delete(self, ids: _typing.Iterable[str]) -> dict[str, str]:
        """
        Delete records by ID.

        Returns:
            Messages for IDs that were not present (empty if all deleted).
        """
        failed: dict[str, str] = {}
        for record_id in ids:
            try:
                self.store.pop(record_id)
            except errors.KeyNotFoundError:
                failed[record_id] = f"Record [ {record_id} ] could not be deleted: not found."
        return failed
