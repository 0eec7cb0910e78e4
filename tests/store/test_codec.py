"""Tests for collection codecs."""

import pytest as _pytest

import pathdoc.errors as errors
import pathdoc.store as store

COLLECTION = {
    "u1": {"name": "Sälly", "tags": [], "meta": {}, "age": 27},
    "u0": {"name": "Jim", "active": True, "score": None},
}


class TestJsonCodec:
    """Tests for JsonCodec."""

    def test_round_trip(self) -> None:
        """Decoding the encoding gives back the collection."""
        codec = store.JsonCodec()
        assert codec.loads(codec.dumps(COLLECTION)) == COLLECTION

    def test_keeps_key_order(self) -> None:
        """Record IDs keep their insertion order."""
        codec = store.JsonCodec()
        assert list(codec.loads(codec.dumps(COLLECTION))) == ["u1", "u0"]

    def test_output_format(self) -> None:
        """Output is indented UTF-8 with a trailing newline."""
        data = store.JsonCodec(indent=2).dumps({"a": {"b": "ä"}})
        assert data == '{\n  "a": {\n    "b": "ä"\n  }\n}\n'.encode("utf-8")

    @_pytest.mark.parametrize("blob", [b"", b"   \n"])
    def test_empty_blob_is_empty_collection(self, blob: bytes) -> None:
        """Nothing stored yet means no records."""
        assert store.JsonCodec().loads(blob) == {}

    def test_invalid_json(self) -> None:
        """Malformed data raises DecodeError."""
        with _pytest.raises(errors.DecodeError):
            store.JsonCodec().loads(b"{not json")

    def test_top_level_must_be_mapping(self) -> None:
        """A list at the top level is not a collection."""
        with _pytest.raises(errors.DecodeError):
            store.JsonCodec().loads(b"[1, 2]")

    def test_invalid_utf8(self) -> None:
        """Undecodable bytes raise DecodeError."""
        with _pytest.raises(errors.DecodeError):
            store.JsonCodec().loads(b"\xff\xfe{")


class TestYamlCodec:
    """Tests for YamlCodec."""

    def test_round_trip(self) -> None:
        """Decoding the encoding gives back the collection."""
        codec = store.YamlCodec()
        assert codec.loads(codec.dumps(COLLECTION)) == COLLECTION

    def test_block_style_unsorted(self) -> None:
        """Keys are written in insertion order."""
        text = store.YamlCodec().dumps({"b": 1, "a": 2}).decode("utf-8")
        assert text == "b: 1\na: 2\n"

    def test_invalid_yaml(self) -> None:
        """Malformed data raises DecodeError."""
        with _pytest.raises(errors.DecodeError):
            store.YamlCodec().loads(b"a: [unclosed")

    def test_scalar_top_level_rejected(self) -> None:
        """A bare scalar is not a collection."""
        with _pytest.raises(errors.DecodeError):
            store.YamlCodec().loads(b"just text")


class TestGetCodec:
    """Tests for get_codec()."""

    def test_lookup_by_name(self) -> None:
        """Names are case-insensitive."""
        assert isinstance(store.get_codec("json"), store.JsonCodec)
        assert isinstance(store.get_codec("YAML"), store.YamlCodec)

    def test_indent_passed_through(self) -> None:
        """The indent reaches the codec."""
        assert store.get_codec("json", 4).indent == 4

    def test_unknown_codec(self) -> None:
        """Unknown names raise ValueError."""
        with _pytest.raises(ValueError, match="Unknown codec"):
            store.get_codec("xml")
