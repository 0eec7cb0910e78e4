"""
Shared constants for pathdoc.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

DEFAULT_DELIMITER = "."
"""Default path delimiter (``a.b[2].c``)."""

TABLE_DELIMITER = "__"
"""Delimiter used by column-oriented projections (``owner__name``).

Flat table rows travel through HTML forms and CSV headers where a dot is
awkward, so table views address fields with a double underscore.
"""

DEFAULT_CODEC = "json"
"""Default encoding for the stored collection."""

DEFAULT_INDENT = 2
"""Indentation used when pretty-printing the collection."""

DEFAULT_STORE_FILE = "pathdoc.json"
"""Default collection file for the local file backend."""

EMPTY_CELL = ""
"""Fill value for columns a record does not have."""
