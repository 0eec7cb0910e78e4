"""
Structural operations on tree values.

A tree value is plain JSON-shaped data: dicts (mappings), lists or tuples
(sequences) and str/int/float/bool/None scalars. The functions here take a
root and a tuple of path tokens (see _path.parse_path).

Container kinds are inferred from keys, the way the stored format has
always done it: a mapping whose keys are exactly "0".."n-1" in order is a
sequence. Mutations keep that rule on every container they touch:

- Writing index n into a sequence of length n appends.
- Writing a non-numeric key, or an index past the end, turns the sequence
  into a mapping with string index keys.
- Deleting any element but the last turns the sequence into a mapping of
  the remaining indices, so deleting the same path twice is a no-op.
- A mapping that ends up with contiguous "0".."n-1" keys becomes a list.

Mappings created on the fly (auto-vivification) start as dicts and are
converted by the last rule once they qualify.
"""

from __future__ import annotations

import typing as _typing

import pathdoc.errors as errors
import pathdoc.tree._path as _path

_SEQUENCE_TYPES = (list, tuple)


class _MissingType:
    """Sentinel for lookups that found nothing."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"


_MISSING = _MissingType()


def is_container(value: _typing.Any) -> bool:
    """True for mappings and sequences."""
    return isinstance(value, (dict, *_SEQUENCE_TYPES))


def is_scalar(value: _typing.Any) -> bool:
    """True for the leaf types a stored document can hold."""
    return value is None or isinstance(value, (str, bool, int, float))


def _index_of(token: _path.Token) -> int | None:
    """Interpret a token as a sequence index, if it is one."""
    if isinstance(token, int):
        return token if token >= 0 else None
    # Only canonical decimal strings count: "01" stays a mapping key
    if token.isdigit() and str(int(token)) == token:
        return int(token)
    return None


def _child(node: _typing.Any, token: _path.Token) -> _typing.Any:
    """Return node[token], or _MISSING."""
    if isinstance(node, dict):
        key = str(token)
        if key in node:
            return node[key]
        if token in node:
            return node[token]
        return _MISSING
    if isinstance(node, _SEQUENCE_TYPES):
        index = _index_of(token)
        if index is None or index >= len(node):
            return _MISSING
        return node[index]
    return _MISSING


def _as_mapping(node: _typing.Any) -> dict[str, _typing.Any]:
    """View any node as a mutable mapping (scalars and None become {})."""
    if isinstance(node, dict):
        return node
    if isinstance(node, _SEQUENCE_TYPES):
        return {str(i): value for i, value in enumerate(node)}
    return {}


def _natural(mapping: dict[str, _typing.Any]) -> dict[str, _typing.Any] | list[_typing.Any]:
    """Turn a mapping with keys "0".."n-1" (in order) into a list."""
    if mapping and all(key == str(i) for i, key in enumerate(mapping)):
        return list(mapping.values())
    return mapping


def _label(tokens: _path.Tokens, label: str | None) -> str:
    return label if label is not None else _path.format_path(tokens)


# =============================================================================
# Reads
# =============================================================================


def get_path(
    root: _typing.Any,
    tokens: _path.Tokens,
    *,
    label: str | None = None,
) -> _typing.Any:
    """
    Return the node at a path.

    Args:
        root: Tree root.
        tokens: Parsed path.
        label: Path string to report in errors (defaults to the formatted tokens).

    Raises:
        IndexOutOfRangeError: If an integer index runs past a sequence.
        PathNotFoundError: If a key is missing or the walk hits a scalar.
    """
    node = root
    for token in tokens:
        child = _child(node, token)
        if child is _MISSING:
            if isinstance(node, _SEQUENCE_TYPES) and isinstance(token, int):
                raise errors.IndexOutOfRangeError(_label(tokens, label), token, len(node))
            raise errors.PathNotFoundError(_label(tokens, label), token)
        node = child
    return node


def has_path(root: _typing.Any, tokens: _path.Tokens) -> bool:
    """Check whether a path resolves, without raising."""
    node = root
    for token in tokens:
        node = _child(node, token)
        if node is _MISSING:
            return False
    return True


# =============================================================================
# Writes
# =============================================================================


def set_path(root: _typing.Any, tokens: _path.Tokens, value: _typing.Any) -> _typing.Any:
    """
    Assign value at a path, creating intermediate mappings as needed.

    Whatever sits at the path (or on the way to it) is overwritten with no
    type check: a scalar met halfway is replaced by a mapping.

    Returns:
        The root, which is a new object when the root itself changed kind
        (e.g. {} became [value] after setting "0").
    """
    if not tokens:
        return value
    return _set_in(root, tokens, value)


def _set_in(node: _typing.Any, tokens: _path.Tokens, value: _typing.Any) -> _typing.Any:
    token, rest = tokens[0], tokens[1:]

    # Fast path: in-range write or append on a real list keeps the list
    if isinstance(node, list):
        index = _index_of(token)
        if index is not None and index <= len(node):
            if rest:
                child = node[index] if index < len(node) else None
                new_value = _set_in(child, rest, value)
            else:
                new_value = value
            if index == len(node):
                node.append(new_value)
            else:
                node[index] = new_value
            return node

    mapping = _as_mapping(node)
    key = str(token)
    if rest:
        mapping[key] = _set_in(mapping.get(key), rest, value)
    else:
        mapping[key] = value
    return _natural(mapping)


def delete_path(root: _typing.Any, tokens: _path.Tokens) -> _typing.Any:
    """
    Remove the node at a path. Missing paths are a no-op.

    Returns:
        The root (a new object if the root changed kind).
    """
    if not tokens:
        return root
    return _delete_in(root, tokens)


def _delete_in(node: _typing.Any, tokens: _path.Tokens) -> _typing.Any:
    token, rest = tokens[0], tokens[1:]

    if isinstance(node, _SEQUENCE_TYPES):
        index = _index_of(token)
        if index is None or index >= len(node):
            return node
        if rest:
            child = node[index]
            new_child = _delete_in(child, rest)
            if new_child is not child:
                if isinstance(node, tuple):
                    node = list(node)
                node[index] = new_child
            return node
        if index == len(node) - 1:
            return list(node[:-1]) if isinstance(node, tuple) else _pop(node)
        # Removing from the middle leaves a gap: the sequence becomes a mapping
        mapping = _as_mapping(node)
        del mapping[str(index)]
        return mapping

    if isinstance(node, dict):
        key: _typing.Any = str(token)
        if key not in node:
            if token not in node:
                return node
            key = token
        if rest:
            child = node[key]
            new_child = _delete_in(child, rest)
            if new_child is not child:
                node[key] = new_child
            return node
        del node[key]
        return _natural(node)

    return node


def _pop(node: list[_typing.Any]) -> list[_typing.Any]:
    node.pop()
    return node
