"""Tests for structural tree operations and container-kind inference."""

import pytest as _pytest

import pathdoc.errors as errors
import pathdoc.tree as tree


class TestGetPath:
    """Tests for get_path() and has_path()."""

    def test_nested_lookup(self) -> None:
        """Keys and indices walk mappings and sequences."""
        root = {"a": {"b": [10, {"c": "x"}]}}
        assert tree.get_path(root, ("a", "b", 1, "c")) == "x"

    def test_numeric_string_indexes_sequence(self) -> None:
        """A canonical numeric string addresses a sequence element."""
        assert tree.get_path({"t": ["x", "y"]}, ("t", "1")) == "y"

    def test_missing_key(self) -> None:
        """A missing mapping key raises PathNotFoundError."""
        with _pytest.raises(errors.PathNotFoundError) as exc_info:
            tree.get_path({"a": {}}, ("a", "b"))
        assert exc_info.value.key == "b"

    def test_index_out_of_range(self) -> None:
        """An index past the end raises IndexOutOfRangeError."""
        with _pytest.raises(errors.IndexOutOfRangeError) as exc_info:
            tree.get_path({"t": ["x"]}, ("t", 5))
        assert exc_info.value.index == 5
        assert exc_info.value.length == 1

    def test_index_error_is_path_not_found(self) -> None:
        """IndexOutOfRangeError is both a PathNotFoundError and an IndexError."""
        with _pytest.raises(errors.PathNotFoundError):
            tree.get_path(["x"], (3,))
        with _pytest.raises(IndexError):
            tree.get_path(["x"], (3,))

    def test_walk_through_scalar(self) -> None:
        """Descending into a scalar is a missing path."""
        with _pytest.raises(errors.PathNotFoundError):
            tree.get_path({"a": 1}, ("a", "b"))

    def test_has_path(self) -> None:
        """has_path never raises."""
        root = {"a": [{"b": None}]}
        assert tree.has_path(root, ("a", 0, "b"))
        assert not tree.has_path(root, ("a", 1, "b"))
        assert not tree.has_path(root, ("a", 0, "b", "c"))

    def test_empty_tokens_return_root(self) -> None:
        """The empty path addresses the root."""
        root = {"a": 1}
        assert tree.get_path(root, ()) is root


class TestSetPath:
    """Tests for set_path()."""

    def test_auto_vivifies_mappings(self) -> None:
        """Missing intermediates are created as mappings."""
        assert tree.set_path({}, ("a", "b", "c"), 1) == {"a": {"b": {"c": 1}}}

    def test_replaces_scalar_on_the_way(self) -> None:
        """A scalar met halfway is replaced by a mapping."""
        assert tree.set_path({"a": 1}, ("a", "b"), 2) == {"a": {"b": 2}}

    def test_overwrites_without_type_check(self) -> None:
        """The last segment is overwritten whatever it held."""
        assert tree.set_path({"a": {"b": 1}}, ("a",), "x") == {"a": "x"}

    def test_in_place_on_mappings(self) -> None:
        """Mapping roots are updated in place."""
        root = {"a": 1}
        result = tree.set_path(root, ("b",), 2)
        assert result is root
        assert root == {"a": 1, "b": 2}

    def test_index_creates_sequence(self) -> None:
        """Setting index 0 under a missing key creates a list."""
        assert tree.set_path({}, ("tags", 0), "vip") == {"tags": ["vip"]}

    def test_append_at_length(self) -> None:
        """Writing index len(seq) appends."""
        assert tree.set_path({"t": ["x"]}, ("t", 1), "y") == {"t": ["x", "y"]}

    def test_overwrite_in_range(self) -> None:
        """Writing an existing index replaces the element."""
        assert tree.set_path({"t": ["x", "y"]}, ("t", 0), "z") == {"t": ["z", "y"]}

    def test_index_past_end_becomes_mapping(self) -> None:
        """A gap turns the sequence into a mapping with string keys."""
        assert tree.set_path({"t": ["x"]}, ("t", 3), "y") == {"t": {"0": "x", "3": "y"}}

    def test_non_numeric_key_on_sequence_becomes_mapping(self) -> None:
        """A named key on a sequence turns it into a mapping."""
        assert tree.set_path({"t": ["x"]}, ("t", "k"), "y") == {"t": {"0": "x", "k": "y"}}

    def test_contiguous_keys_become_sequence(self) -> None:
        """Filling "0".."n-1" into a mapping yields a list."""
        root = tree.set_path({}, ("t", "0"), "a")
        root = tree.set_path(root, ("t", "1"), "b")
        assert root == {"t": ["a", "b"]}

    def test_root_can_change_kind(self) -> None:
        """The returned root replaces the old one when its kind changes."""
        assert tree.set_path({}, ("0",), "a") == ["a"]

    def test_empty_tokens_replace_root(self) -> None:
        """Setting the empty path returns the value itself."""
        assert tree.set_path({"a": 1}, (), [1, 2]) == [1, 2]

    def test_nested_write_into_sequence_element(self) -> None:
        """Writes can go through sequence elements."""
        root = {"people": [{"name": "Sally"}]}
        tree.set_path(root, ("people", 0, "age"), 27)
        assert root == {"people": [{"name": "Sally", "age": 27}]}


class TestDeletePath:
    """Tests for delete_path()."""

    def test_delete_key(self) -> None:
        """A mapping key is removed."""
        assert tree.delete_path({"a": 1, "b": 2}, ("a",)) == {"b": 2}

    def test_missing_path_is_noop(self) -> None:
        """Deleting a missing path changes nothing."""
        root = {"a": {"b": 1}}
        assert tree.delete_path(root, ("a", "x", "y")) == {"a": {"b": 1}}
        assert tree.delete_path(root, ("z",)) == {"a": {"b": 1}}

    def test_delete_last_element(self) -> None:
        """Removing the last element keeps a list."""
        assert tree.delete_path({"t": ["a", "b"]}, ("t", 1)) == {"t": ["a"]}

    def test_delete_only_element_leaves_empty_list(self) -> None:
        """Emptying a sequence leaves []."""
        assert tree.delete_path({"t": ["a"]}, ("t", 0)) == {"t": []}

    def test_delete_middle_element_leaves_mapping(self) -> None:
        """A gap turns the sequence into a mapping of the remaining indices."""
        assert tree.delete_path({"t": ["a", "b", "c"]}, ("t", 1)) == {"t": {"0": "a", "2": "c"}}

    def test_delete_is_idempotent(self) -> None:
        """Deleting the same element twice is the same as once."""
        root = tree.delete_path({"t": ["a", "b", "c"]}, ("t", 0))
        again = tree.delete_path(root, ("t", 0))
        assert again == {"t": {"1": "b", "2": "c"}}

    def test_delete_renaturalizes_mapping(self) -> None:
        """Removing the only named key can leave a sequence."""
        assert tree.delete_path({"0": "a", "x": 1}, ("x",)) == ["a"]

    def test_delete_inside_sequence_element(self) -> None:
        """Deletes can go through sequence elements."""
        root = {"people": [{"name": "Sally", "age": 27}]}
        assert tree.delete_path(root, ("people", 0, "age")) == {"people": [{"name": "Sally"}]}

    def test_delete_through_scalar_is_noop(self) -> None:
        """A scalar on the way means nothing to delete."""
        assert tree.delete_path({"a": 1}, ("a", "b")) == {"a": 1}


class TestKinds:
    """Tests for is_container() and is_scalar()."""

    def test_containers(self) -> None:
        """dict, list and tuple are containers."""
        assert tree.is_container({})
        assert tree.is_container([])
        assert tree.is_container(())
        assert not tree.is_container("abc")

    def test_scalars(self) -> None:
        """JSON leaf types are scalars."""
        for value in (None, True, 1, 1.5, "x"):
            assert tree.is_scalar(value)
        assert not tree.is_scalar(object())
        assert not tree.is_scalar([])
