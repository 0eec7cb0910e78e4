"""
Leaf-path merging of tree values (patch semantics).

Example:
    >>> from pathdoc.merge import merge_into
    >>> merge_into({"name": "Sally", "age": 27}, {"age": 28})
    {'name': 'Sally', 'age': 28}
"""

from pathdoc.merge.engine import merge_fields, merge_flat, merge_into

__all__ = ["merge_fields", "merge_flat", "merge_into"]
