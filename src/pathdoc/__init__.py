"""
pathdoc - path-addressed documents.

A semi-structured document model (nested mappings, sequences and scalars
addressed by dotted paths) with a leaf-path merge and a small ID-keyed
document store built on top of it.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("pathdoc")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "pathdoc Contributors"

from pathdoc.merge import merge_fields, merge_into  # noqa: E402
from pathdoc.store import DocumentStore, open_store  # noqa: E402
from pathdoc.tree import Tree, parse_path  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "DocumentStore",
    "Tree",
    "merge_fields",
    "merge_into",
    "open_store",
    "parse_path",
]
