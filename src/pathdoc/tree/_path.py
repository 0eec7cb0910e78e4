"""
Path addressing for trees.

A path is a delimiter-joined list of segments. A segment is either a bare
mapping key or a mapping key immediately followed by one or more sequence
indices:

    a.b.c          -> ("a", "b", "c")
    a.b[2].c       -> ("a", "b", 2, "c")
    grid[1][0]     -> ("grid", 1, 0)
    .a.b           -> ("a", "b")        (one leading delimiter is ignored)

Mapping keys are strings, sequence indices are non-negative ints.
"""

from __future__ import annotations

import functools as _functools
import re as _re
import typing as _typing

import pathdoc.constants as constants
import pathdoc.errors as errors

Token: _typing.TypeAlias = str | int
"""A single path token: mapping key (str) or sequence index (int)."""

Tokens: _typing.TypeAlias = tuple[Token, ...]

# name followed by one or more [index] groups, no delimiter in between
_INDEXED_SEGMENT = _re.compile(r"^(?P<name>[^\[\]]+)(?P<indices>(?:\[\d+\])+)$")
_INDEX = _re.compile(r"\[(\d+)\]")
# flattened paths may index into an empty key, e.g. ".[0]" for {"": [...]}
_FLAT_SEGMENT = _re.compile(r"^(?P<name>[^\[\]]*)(?P<indices>(?:\[\d+\])+)$")


@_functools.lru_cache(maxsize=4096)
def parse_path(path: str, delimiter: str = constants.DEFAULT_DELIMITER) -> Tokens:
    """
    Split a path string into mapping keys and sequence indices.

    This is the parser for paths people type. Whitespace around the whole
    path is trimmed, so a key with leading or trailing spaces cannot be
    addressed through it; flatten() output is read with split_flat_path().

    Args:
        path: The path to parse, e.g. ``"a.b[2].c"``.
        delimiter: Segment delimiter. Must be non-empty.

    Returns:
        Tuple of tokens, e.g. ``("a", "b", 2, "c")``.

    Raises:
        InvalidPathError: If the delimiter is empty, or any segment is
            empty after trimming whitespace.
    """
    if not delimiter:
        raise errors.InvalidPathError(path, "delimiter must not be empty")

    text = path.strip()
    if text.startswith(delimiter):
        text = text[len(delimiter):]
    if not text.strip():
        raise errors.InvalidPathError(path, "path is empty")

    tokens: list[Token] = []
    for segment in text.split(delimiter):
        if not segment.strip():
            raise errors.InvalidPathError(path, "empty segment")

        match = _INDEXED_SEGMENT.match(segment)
        if match is None:
            tokens.append(segment)
            continue

        tokens.append(match.group("name"))
        tokens.extend(int(i) for i in _INDEX.findall(match.group("indices")))

    return tuple(tokens)


@_functools.lru_cache(maxsize=4096)
def split_flat_path(path: str, delimiter: str = constants.DEFAULT_DELIMITER) -> Tokens:
    """
    Split a path written by flatten() back into tokens.

    Unlike parse_path(), nothing is trimmed and empty segments are kept as
    empty mapping keys, so every key flatten() can emit comes back intact.
    The empty path is the root and yields no tokens.

    Raises:
        InvalidPathError: If the delimiter is empty.
    """
    if not delimiter:
        raise errors.InvalidPathError(path, "delimiter must not be empty")
    if not path:
        return ()

    # A top-level "" key is written as a lone leading delimiter
    text = path[len(delimiter):] if path.startswith(delimiter) else path

    tokens: list[Token] = []
    for segment in text.split(delimiter):
        match = _FLAT_SEGMENT.match(segment)
        if match is None:
            tokens.append(segment)
            continue
        tokens.append(match.group("name"))
        tokens.extend(int(i) for i in _INDEX.findall(match.group("indices")))

    return tuple(tokens)


def join_path(
    prefix: str,
    key: Token,
    delimiter: str = constants.DEFAULT_DELIMITER,
    *,
    index: bool = False,
) -> str:
    """
    Extend a flattened path by one child.

    Mapping children are joined with the delimiter; sequence children use
    the bracket form with no delimiter before it. At the root (empty
    prefix) there is nothing to attach a bracket to, so sequence elements
    are addressed by their bare index. An empty top-level key is written
    as the bare delimiter so it cannot be mistaken for the root.

    Args:
        prefix: Path of the parent ("" for the root).
        key: Child key or index.
        delimiter: Segment delimiter.
        index: True if the parent is a sequence.
    """
    if not prefix:
        return str(key) or delimiter
    if index:
        return f"{prefix}[{key}]"
    return f"{prefix}{delimiter}{key}"


def format_path(tokens: _typing.Iterable[Token], delimiter: str = constants.DEFAULT_DELIMITER) -> str:
    """Render tokens back into the path wire format (inverse of parse_path)."""
    path = ""
    for token in tokens:
        path = join_path(path, token, delimiter, index=isinstance(token, int))
    return path
