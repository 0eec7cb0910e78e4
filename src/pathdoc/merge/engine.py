"""
Leaf-path merge of tree values.

merge_into() flattens both trees, overlays the delta's leaves onto the
base's by path and rebuilds a tree from the result:

- paths only in base are kept unchanged
- paths only in delta are added
- on a collision the delta wins

This is not a recursive object merge. Sequences are merged element by
element through their positional paths (``tags[0]``, ``tags[1]``...), so a
longer delta sequence adds trailing elements and a shorter one leaves the
base's trailing elements in place:

    >>> merge_into({"tags": ["a", "b", "c"]}, {"tags": ["x"]})
    {'tags': ['x', 'b', 'c']}

A leaf in the delta replaces a whole subtree in the base when it sits at
the subtree's path, including an empty {} or [] marker.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import pathdoc.constants as constants
import pathdoc.tree as tree

_logger = _logging.getLogger(__name__)


def merge_flat(
    base_flat: _typing.Mapping[str, _typing.Any],
    delta_flat: _typing.Mapping[str, _typing.Any],
) -> tree.FlatView:
    """
    Overlay one FlatView onto another.

    Keys keep the base's order; keys new in the delta are appended in the
    delta's order. A delta that is nothing but an empty root marker
    contributes no paths.

    Returns:
        A new FlatView; neither input is modified.
    """
    merged = dict(base_flat)
    for path, value in delta_flat.items():
        if path == tree.ROOT_PATH and tree.is_container(value) and not value:
            continue
        merged[path] = value
    return merged


def merge_into(
    base: _typing.Any,
    delta: _typing.Any,
    delimiter: str = constants.DEFAULT_DELIMITER,
) -> _typing.Any:
    """
    Merge delta into base by leaf path.

    Args:
        base: Existing tree value.
        delta: Tree value holding the paths to update.
        delimiter: Delimiter used for the intermediate flat paths. Keys
            containing it do not survive the round trip.

    Returns:
        A new tree value; base and delta are left untouched.
    """
    base_flat = tree.flatten(base, delimiter)
    delta_flat = tree.flatten(delta, delimiter)
    merged = merge_flat(base_flat, delta_flat)

    _logger.debug(
        "Merging %d delta paths into %d base paths (%d result paths)",
        len(delta_flat),
        len(base_flat),
        len(merged),
    )

    return tree.unflatten(merged, delimiter)


def merge_fields(
    base: _typing.Any,
    path: str,
    value: _typing.Any,
    delimiter: str = constants.DEFAULT_DELIMITER,
) -> _typing.Any:
    """
    Merge a single value at path into base.

    The value may itself be nested; it is flattened under path, so
    ``merge_fields(t, "owner", {"name": "Sally"})`` updates owner.name and
    keeps owner's other fields.

    Returns:
        A new tree value.
    """
    delta = tree.set_path({}, tree.parse_path(path, delimiter), value)
    return merge_into(base, delta, delimiter)
