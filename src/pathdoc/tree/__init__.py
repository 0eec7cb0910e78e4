"""
Tree values with path addressing.

A tree is nested dicts/lists of JSON scalars. Paths address nodes inside
it (``a.b[2].c``); flatten()/unflatten() convert between a tree and its
FlatView (full path -> leaf).

Example:
    >>> from pathdoc.tree import Tree
    >>> tree = Tree()
    >>> tree.set("owner.name", "Sally").set("tags[0]", "vip").data
    {'owner': {'name': 'Sally'}, 'tags': ['vip']}
"""

from pathdoc.tree._core import Tree
from pathdoc.tree._flatten import ROOT_PATH, FlatView, flatten, unflatten
from pathdoc.tree._ops import delete_path, get_path, has_path, is_container, is_scalar, set_path
from pathdoc.tree._path import Token, Tokens, format_path, join_path, parse_path, split_flat_path

__all__ = [
    "FlatView",
    "ROOT_PATH",
    "Token",
    "Tokens",
    "Tree",
    "delete_path",
    "flatten",
    "format_path",
    "get_path",
    "has_path",
    "is_container",
    "is_scalar",
    "join_path",
    "parse_path",
    "set_path",
    "split_flat_path",
    "unflatten",
]
