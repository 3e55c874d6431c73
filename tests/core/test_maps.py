"""Tests for essentials.core.maps module."""

import pytest

from essentials.core.maps import compact, compact_blank, compact_nil, renake


class TestRenake:
    def test_keeps_and_renames(self):
        user = {"name": "Alice", "age": 30, "email": "alice@example.com"}
        assert renake(user, ["name", ("age", "years")]) == {"name": "Alice", "years": 30}

    def test_transform_receives_target_key_and_value(self):
        seen = []

        def transform(item):
            seen.append(item)
            return item[1] * 2

        result = renake({"price": 100, "discount": 10}, ["price", ("discount", "off")], transform)
        assert result == {"price": 200, "off": 20}
        assert seen == [("price", 100), ("off", 10)]

    def test_missing_key_maps_to_none_without_transform(self):
        calls = []
        result = renake({"a": 1}, ["a", ("b", "bee")], lambda item: calls.append(item) or item[1])
        assert result == {"a": 1, "bee": None}
        assert calls == [("a", 1)]

    def test_none_value_skips_transform(self):
        assert renake({"a": None}, ["a"], lambda item: "never") == {"a": None}

    def test_falsy_values_are_kept(self):
        assert renake({"a": 0, "b": False}, ["a", "b"]) == {"a": 0, "b": False}

    def test_rejects_non_mapping(self):
        with pytest.raises(TypeError):
            renake([("a", 1)], ["a"])

    def test_rejects_non_list_keys(self):
        with pytest.raises(TypeError):
            renake({"a": 1}, "a")


class TestCompact:
    def test_compact_nil(self):
        assert compact_nil({"a": 1, "b": None, "c": "text"}) == {"a": 1, "c": "text"}

    def test_compact_nil_keeps_blank(self):
        assert compact_nil({"a": "", "b": []}) == {"a": "", "b": []}

    def test_compact_blank(self):
        assert compact_blank({"a": "", "b": [], "c": {}, "d": 42}) == {"d": 42}

    def test_compact_blank_keeps_none_and_falsy_scalars(self):
        assert compact_blank({"a": None, "b": 0, "c": False}) == {"a": None, "b": 0, "c": False}

    def test_compact(self):
        assert compact({"a": None, "b": "", "c": [], "d": {}, "e": "keep"}) == {"e": "keep"}

    def test_does_not_mutate_input(self):
        original = {"a": None, "b": 1}
        compact(original)
        assert original == {"a": None, "b": 1}

    @pytest.mark.parametrize("fn", [compact, compact_blank, compact_nil])
    def test_rejects_non_mapping(self, fn):
        with pytest.raises(TypeError):
            fn(["a"])
