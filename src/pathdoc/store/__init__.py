"""
ID-keyed document store over tree values.

Each call loads the whole collection from a blob backend; each mutation
saves the whole collection back.
"""

from pathdoc.store.blob import BlobIO, LocalFileBlob, MemoryBlob
from pathdoc.store.codec import Codec, JsonCodec, YamlCodec, get_codec
from pathdoc.store.factory import open_blob, open_store, open_table
from pathdoc.store.store import Collection, DocumentStore, Snapshot
from pathdoc.store.table import Column, TableView, column_metadata, flatten_fill

__all__ = [
    "BlobIO",
    "Codec",
    "Collection",
    "Column",
    "DocumentStore",
    "JsonCodec",
    "LocalFileBlob",
    "MemoryBlob",
    "Snapshot",
    "TableView",
    "YamlCodec",
    "column_metadata",
    "flatten_fill",
    "get_codec",
    "open_blob",
    "open_store",
    "open_table",
]
