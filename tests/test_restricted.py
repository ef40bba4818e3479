"""Tests for the restricted view over generated responses."""

from __future__ import annotations

from enum import Enum

import pytest

from chaski.errors import InvalidMergeTargetError, UndefinedKeyError
from chaski.restricted import RestrictedView


class Field(Enum):
    A = "a"


@pytest.fixture
def view():
    return RestrictedView({"a": 1, "b": {"c": 2, "d": 3}})


class TestGetSet:
    def test_get_defined_key(self, view):
        assert view.get("a") == 1

    def test_get_undefined_key(self, view):
        with pytest.raises(UndefinedKeyError) as exc_info:
            view.get("z")
        assert exc_info.value.key == "z"
        assert str(exc_info.value) == "'z' is not defined in stub response"

    def test_set_then_get(self, view):
        view.set("a", 5)
        assert view.get("a") == 5

    def test_nested_get(self, view):
        assert view.get("b").get("c") == 2

    def test_nested_is_restricted(self, view):
        with pytest.raises(UndefinedKeyError):
            view.get("b").get("z")

    def test_set_undefined_key(self, view):
        with pytest.raises(UndefinedKeyError):
            view.set("z", 1)
        assert "z" not in view

    def test_relaxed_set_makes_key_visible(self, view):
        view.set("z", 1, allow_undefined_keys=True)
        assert view.get("z") == 1
        view.set("z", 2)
        assert view.get("z") == 2

    def test_relaxed_get_of_missing_key(self, view):
        assert view.get("z", allow_undefined_keys=True) is None

    def test_item_access(self, view):
        view["a"] = 7
        assert view["a"] == 7
        assert view["b"]["c"] == 2
        with pytest.raises(UndefinedKeyError):
            view["z"] = 1

    def test_undefined_key_is_key_error(self, view):
        with pytest.raises(KeyError):
            view["z"]

    def test_enum_and_string_keys_are_the_same(self, view):
        view[Field.A] = 9
        assert view["a"] == 9
        assert Field.A in view

    def test_non_string_keys_are_normalized(self):
        view = RestrictedView({1: "one"})
        assert view["1"] == "one"
        assert view[1] == "one"

    def test_assigned_mapping_is_restricted(self, view):
        view.set("z", {"x": 1}, allow_undefined_keys=True)
        with pytest.raises(UndefinedKeyError):
            view["z"]["y"] = 2

    def test_mappings_in_lists_are_restricted(self):
        view = RestrictedView({"data": [{"id": "ch_1"}]})
        view["data"][0]["id"] = "ch_2"
        with pytest.raises(UndefinedKeyError):
            view["data"][0]["amount"] = 1
        assert view.unwrap() == {"data": [{"id": "ch_2"}]}

    def test_wrapping_does_not_touch_source(self):
        source = {"a": 1, "b": {"c": 2}}
        view = RestrictedView(source)
        view["a"] = 5
        view["b"]["c"] = 6
        assert source == {"a": 1, "b": {"c": 2}}

    def test_len_and_iteration(self, view):
        assert len(view) == 2
        assert sorted(view) == ["a", "b"]
        assert sorted(view.keys()) == ["a", "b"]


class TestDeepMerge:
    def test_merges_nested_value(self, view):
        view.deep_merge({"b": {"c": 9}})
        assert view.unwrap() == {"a": 1, "b": {"c": 9, "d": 3}}

    def test_merges_scalars(self, view):
        view.deep_merge({"a": 4})
        assert view.get("a") == 4

    def test_mapping_onto_scalar_fails(self, view):
        with pytest.raises(InvalidMergeTargetError) as exc_info:
            view.deep_merge({"a": {"x": 1}})
        assert exc_info.value.key == "a"
        assert isinstance(exc_info.value, ValueError)
        assert view.get("a") == 1

    def test_mapping_onto_scalar_relaxed_overwrites(self, view):
        view.deep_merge({"a": {"x": 1}}, allow_undefined_keys=True)
        assert view.unwrap() == {"a": {"x": 1}, "b": {"c": 2, "d": 3}}

    def test_mapping_onto_scalar_fails_after_prior_relaxation(self, view):
        view.set("z", 1, allow_undefined_keys=True)
        with pytest.raises(InvalidMergeTargetError):
            view.deep_merge({"z": {"x": 1}})

    def test_undefined_scalar_key_fails(self, view):
        with pytest.raises(UndefinedKeyError):
            view.deep_merge({"z": 1})

    def test_undefined_nested_key_fails(self, view):
        with pytest.raises(UndefinedKeyError):
            view.deep_merge({"b": {"z": 1}})

    def test_undefined_mapping_key_fails(self, view):
        with pytest.raises(InvalidMergeTargetError):
            view.deep_merge({"z": {"x": 1}})

    def test_relaxed_merge_creates_missing_keys(self, view):
        view.deep_merge({"z": {"x": 1}, "a": 4}, allow_undefined_keys=True)
        assert view.unwrap() == {"a": 4, "b": {"c": 2, "d": 3}, "z": {"x": 1}}

    def test_relaxation_does_not_reach_nested_merges(self, view):
        with pytest.raises(UndefinedKeyError) as exc_info:
            view.deep_merge({"b": {"e": 4}}, allow_undefined_keys=True)
        assert exc_info.value.key == "e"
        assert view.unwrap() == {"a": 1, "b": {"c": 2, "d": 3}}

    def test_relaxed_nested_merge_of_defined_keys(self, view):
        view.deep_merge({"b": {"c": 7}}, allow_undefined_keys=True)
        assert view.unwrap() == {"a": 1, "b": {"c": 7, "d": 3}}

    def test_lists_are_replaced_not_merged(self):
        view = RestrictedView({"data": [1, 2, 3]})
        view.deep_merge({"data": [4]})
        assert view.get("data") == [4]


class TestUnwrap:
    def test_plain_structure(self, view):
        view["a"] = 5
        view.deep_merge({"b": {"d": 8}})
        result = view.unwrap()
        assert result == {"a": 5, "b": {"c": 2, "d": 8}}
        assert type(result) is dict
        assert type(result["b"]) is dict

    def test_no_wrappers_left_in_lists(self):
        view = RestrictedView({"data": [{"id": "ch_1", "card": {"last4": "4242"}}]})
        result = view.unwrap()
        assert type(result["data"][0]) is dict
        assert type(result["data"][0]["card"]) is dict

    def test_assigned_view_is_unwrapped(self, view):
        view["b"] = RestrictedView({"c": 1})
        assert view.unwrap() == {"a": 1, "b": {"c": 1}}
