"""
Tree: a tree value bundled with the delimiter used to address it.

Example:
    >>> tree = Tree({"sales": [{"firstName": "Sally", "age": 27}]})
    >>> tree.get("sales[0].firstName")
    'Sally'
    >>> tree.set("sales[0].age", 28).get("sales[0].age")
    28
    >>> tree.flatten()
    {'sales[0].firstName': 'Sally', 'sales[0].age': 28}

Mutators return the Tree itself so calls can be chained. The wrapped data
is mutated in place where possible; when the root changes kind (a mapping
becoming a sequence, say) the Tree swaps in the new root, so always read
the result through ``tree.data`` rather than a reference taken earlier.
"""

from __future__ import annotations

import copy as _copy
import json as _json
import typing as _typing

import pathdoc.constants as constants
import pathdoc.errors as errors
import pathdoc.tree._flatten as _flatten
import pathdoc.tree._ops as _ops
import pathdoc.tree._path as _path


class Tree:
    """
    A path-addressable tree of mappings, sequences and scalars.

    Args:
        data: Root value. None means an empty mapping.
        delimiter: Path delimiter for every operation on this tree.
    """

    __slots__ = ("_data", "_delimiter")

    def __init__(
        self,
        data: _typing.Any = None,
        delimiter: str = constants.DEFAULT_DELIMITER,
    ) -> None:
        if not delimiter:
            raise errors.InvalidPathError("", "delimiter must not be empty")
        self._data: _typing.Any = {} if data is None else data
        self._delimiter = delimiter

    @classmethod
    def from_json(cls, text: str | bytes, delimiter: str = constants.DEFAULT_DELIMITER) -> Tree:
        """
        Parse a JSON document into a Tree.

        Raises:
            DecodeError: If text is not valid JSON.
        """
        try:
            data = _json.loads(text)
        except ValueError as e:
            raise errors.DecodeError(f"invalid JSON: {e}") from e
        return cls(data, delimiter)

    @classmethod
    def from_flat(
        cls,
        flat: _typing.Mapping[str, _typing.Any],
        delimiter: str = constants.DEFAULT_DELIMITER,
    ) -> Tree:
        """Build a Tree from a FlatView (path -> leaf value)."""
        return cls(_flatten.unflatten(flat, delimiter), delimiter)

    @property
    def data(self) -> _typing.Any:
        """The wrapped root value (live, not a copy)."""
        return self._data

    @property
    def delimiter(self) -> str:
        return self._delimiter

    def _tokens(self, path: str) -> _path.Tokens:
        return _path.parse_path(path, self._delimiter)

    # -------------------------------------------------------------------------
    # Path access
    # -------------------------------------------------------------------------

    def get(self, path: str) -> _typing.Any:
        """
        Return the node at path.

        Raises:
            PathNotFoundError: If a mapping key on the path is missing.
            IndexOutOfRangeError: If a sequence index is past the end.
        """
        return _ops.get_path(self._data, self._tokens(path), label=path)

    def has(self, path: str) -> bool:
        return _ops.has_path(self._data, self._tokens(path))

    def set(self, path: str, value: _typing.Any) -> Tree:
        """Assign value at path, creating missing mappings on the way."""
        self._data = _ops.set_path(self._data, self._tokens(path), value)
        return self

    def delete(self, path: str) -> Tree:
        """Remove the node at path; a missing path is a no-op."""
        self._data = _ops.delete_path(self._data, self._tokens(path))
        return self

    def copy(self, src: str, dst: str) -> Tree:
        """Copy the node at src to dst (deep copy). No-op if src is missing."""
        if self.has(src):
            self.set(dst, _copy.deepcopy(self.get(src)))
        return self

    def move(self, src: str, dst: str) -> Tree:
        """Copy src to dst, then delete src. No-op if src is missing."""
        if not self.has(src):
            return self
        return self.copy(src, dst).delete(src)

    def swap(self, path_a: str, path_b: str) -> Tree:
        """
        Exchange the nodes at two paths.

        Both values are read before either write, so overlapping paths
        are well defined (the second write wins where they overlap).

        Raises:
            PathNotFoundError: If either path is missing.
        """
        value_a = _copy.deepcopy(self.get(path_a))
        value_b = _copy.deepcopy(self.get(path_b))
        self.set(path_a, value_b)
        self.set(path_b, value_a)
        return self

    # -------------------------------------------------------------------------
    # Flat views
    # -------------------------------------------------------------------------

    def flatten(self) -> _flatten.FlatView:
        return _flatten.flatten(self._data, self._delimiter)

    def paths(self) -> list[str]:
        """All leaf paths, in depth-first order."""
        return list(self.flatten())

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self.paths())

    def has_prefix(self, prefix: str) -> bool:
        """True if any leaf path starts with prefix (plain string match)."""
        return bool(self.get_prefixes(prefix))

    def get_prefixes(self, prefix: str) -> list[str]:
        """Leaf paths that start with prefix (plain string match)."""
        if prefix.startswith(self._delimiter):
            prefix = prefix[len(self._delimiter):]
        return [path for path in self.flatten() if path.startswith(prefix)]

    def conform(
        self,
        keys: _typing.Iterable[str],
        default: _typing.Any = constants.EMPTY_CELL,
    ) -> dict[str, _typing.Any]:
        """
        Project the tree onto a list of paths.

        Paths present in the tree are copied, missing ones get default.
        Paths not listed are left out. Output follows the order of keys.
        """
        return {key: (self.get(key) if self.has(key) else default) for key in keys}

    # -------------------------------------------------------------------------
    # Merging
    # -------------------------------------------------------------------------

    def merge(self, path: str, value: _typing.Any) -> Tree:
        """Leaf-path merge of a single value at path (see pathdoc.merge)."""
        import pathdoc.merge.engine as merge_engine

        self._data = merge_engine.merge_fields(self._data, path, value, self._delimiter)
        return self

    def merge_tree(self, other: Tree | _typing.Any) -> Tree:
        """Leaf-path merge of another tree into this one; other wins on collisions."""
        import pathdoc.merge.engine as merge_engine

        delta = other.data if isinstance(other, Tree) else other
        self._data = merge_engine.merge_into(self._data, delta, self._delimiter)
        return self

    # -------------------------------------------------------------------------
    # Misc
    # -------------------------------------------------------------------------

    def clone(self) -> Tree:
        """Independent deep copy."""
        return Tree(_copy.deepcopy(self._data), self._delimiter)

    def to_json(self, indent: int | None = constants.DEFAULT_INDENT) -> str:
        return _json.dumps(self._data, indent=indent, ensure_ascii=False)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Tree):
            return bool(self._data == other._data)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Tree({self._data!r}, delimiter={self._delimiter!r})"
