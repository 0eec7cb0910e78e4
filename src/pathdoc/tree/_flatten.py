"""
Flat views of trees.

flatten() walks a tree depth-first and produces a FlatView: a dict mapping
each leaf's full path to its value. Leaves are scalars and empty
containers; an empty container is emitted as a fresh {} or [] so it
survives the trip back through unflatten().

    >>> flatten({"sales": [{"name": "Sally"}], "engineering": []})
    {'sales[0].name': 'Sally', 'engineering': []}

unflatten() rebuilds the tree by setting every path in order into an empty
mapping, so sequences come back through the key-contiguity rule in _ops.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import pathdoc.constants as constants
import pathdoc.tree._ops as _ops
import pathdoc.tree._path as _path

_logger = _logging.getLogger(__name__)

FlatView: _typing.TypeAlias = dict[str, _typing.Any]
"""Mapping of full path -> leaf value (scalar, {} or [])."""

ROOT_PATH = ""
"""Flat key under which an empty or scalar root is stored."""


def flatten(root: _typing.Any, delimiter: str = constants.DEFAULT_DELIMITER) -> FlatView:
    """
    Flatten a tree into path -> leaf pairs, depth first.

    Values that are neither scalars nor containers (file handles, arbitrary
    objects) are skipped: flattening is a lossy passthrough for them.

    Args:
        root: Tree to flatten.
        delimiter: Delimiter joining mapping keys.

    Returns:
        FlatView in traversal order.
    """
    flat: FlatView = {}
    _flatten_into(flat, root, ROOT_PATH, delimiter)
    return flat


def _flatten_into(
    flat: FlatView,
    node: _typing.Any,
    prefix: str,
    delimiter: str,
) -> None:
    if isinstance(node, dict):
        if not node:
            flat[prefix] = {}
            return
        for key, value in node.items():
            _flatten_into(flat, value, _path.join_path(prefix, key, delimiter), delimiter)
    elif isinstance(node, (list, tuple)):
        if not node:
            flat[prefix] = []
            return
        for index, value in enumerate(node):
            child = _path.join_path(prefix, index, delimiter, index=True)
            _flatten_into(flat, value, child, delimiter)
    elif _ops.is_scalar(node):
        flat[prefix] = node
    else:
        _logger.warning(
            "Skipping unrepresentable %s at %r while flattening",
            type(node).__name__,
            prefix,
        )


def unflatten(flat: _typing.Mapping[str, _typing.Any], delimiter: str = constants.DEFAULT_DELIMITER) -> _typing.Any:
    """
    Rebuild a tree from a FlatView.

    Entries are applied in insertion order, so a later entry overwrites an
    earlier one that shares its path or a prefix of it. The root path ("")
    replaces the root itself. Paths are split with split_flat_path(), so
    empty keys and keys with surrounding whitespace come back unchanged.

    Args:
        flat: Path -> value pairs.
        delimiter: Delimiter used in the paths.

    Returns:
        The rebuilt tree (a mapping unless the paths describe a sequence).
    """
    root: _typing.Any = {}
    for path, value in flat.items():
        tokens = _path.split_flat_path(path, delimiter)
        if not tokens:
            root = value
            continue
        root = _ops.set_path(root, tokens, value)
    return root
