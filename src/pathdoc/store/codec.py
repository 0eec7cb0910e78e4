"""
Encodings for the stored collection.

The collection is a mapping of record ID -> tree value. Both codecs keep
empty containers as explicit {} / [] and preserve key order.
"""

from __future__ import annotations

import abc as _abc
import json as _json
import typing as _typing

import yaml as _yaml

import pathdoc.constants as constants
import pathdoc.errors as errors

Collection: _typing.TypeAlias = dict[str, _typing.Any]


class Codec(_abc.ABC):
    """Encode/decode a whole collection."""

    name: _typing.ClassVar[str]

    @_abc.abstractmethod
    def dumps(self, collection: Collection) -> bytes: ...

    @_abc.abstractmethod
    def _loads(self, text: str) -> _typing.Any: ...

    def loads(self, data: bytes) -> Collection:
        """
        Decode a blob into a collection.

        An empty (or whitespace-only) blob is an empty collection.

        Raises:
            DecodeError: If the blob is not valid for this codec, or its top
                level is not a mapping.
        """
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise errors.DecodeError(f"collection is not UTF-8: {e}") from e

        if not text.strip():
            return {}

        parsed = self._loads(text)
        if not isinstance(parsed, dict):
            raise errors.DecodeError(
                f"collection must be a mapping of id -> record, got {type(parsed).__name__}"
            )
        return parsed


class JsonCodec(Codec):
    """Pretty-printed JSON."""

    name = "json"

    def __init__(self, indent: int | None = constants.DEFAULT_INDENT) -> None:
        self.indent = indent

    def dumps(self, collection: Collection) -> bytes:
        text = _json.dumps(collection, indent=self.indent, ensure_ascii=False)
        return (text + "\n").encode("utf-8")

    def _loads(self, text: str) -> _typing.Any:
        try:
            return _json.loads(text)
        except ValueError as e:
            raise errors.DecodeError(f"invalid JSON: {e}") from e


class YamlCodec(Codec):
    """Block-style YAML (safe loader/dumper)."""

    name = "yaml"

    def __init__(self, indent: int | None = constants.DEFAULT_INDENT) -> None:
        self.indent = indent

    def dumps(self, collection: Collection) -> bytes:
        text = _yaml.safe_dump(
            collection,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=self.indent,
        )
        return text.encode("utf-8")

    def _loads(self, text: str) -> _typing.Any:
        try:
            return _yaml.safe_load(text)
        except _yaml.YAMLError as e:
            raise errors.DecodeError(f"invalid YAML: {e}") from e


_CODECS: dict[str, type[Codec]] = {
    JsonCodec.name: JsonCodec,
    YamlCodec.name: YamlCodec,
}


def get_codec(name: str, indent: int | None = constants.DEFAULT_INDENT) -> Codec:
    """
    Look up a codec by name.

    Raises:
        ValueError: If the name is unknown.
    """
    try:
        codec_cls = _CODECS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown codec {name!r} (expected one of: {', '.join(sorted(_CODECS))})"
        ) from None
    return codec_cls(indent)
