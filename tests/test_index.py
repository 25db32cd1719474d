"""Tests for toru.index: name multimap and id-or-name lookup."""

from __future__ import annotations

import pytest

from toru.errors import AmbiguousNameError, NotFoundError, RecordError
from toru.index import NameIndex, parse_id


class TestInsertRemove:

    def test_create_groups_by_name(self, make_task):
        index = NameIndex.create([
            make_task(0, "groceries"),
            make_task(1, "laundry"),
            make_task(2, "groceries"),
        ])
        assert index.to_dict() == {"groceries": [0, 2], "laundry": [1]}

    def test_insert_creates_bucket(self):
        index = NameIndex()
        index.insert("a", 4)
        index.insert("a", 9)
        assert index.ids("a") == [4, 9]

    def test_remove_drops_empty_bucket(self):
        index = NameIndex({"a": [4]})
        index.remove("a", 4)
        assert "a" not in index
        assert index.to_dict() == {}

    def test_remove_keeps_other_ids(self):
        index = NameIndex({"a": [1, 2, 3]})
        index.remove("a", 1)
        assert sorted(index.ids("a")) == [2, 3]

    def test_remove_missing_is_noop(self):
        index = NameIndex({"a": [1]})
        index.remove("a", 2)
        index.remove("b", 1)
        assert index.to_dict() == {"a": [1]}


class TestLookup:

    def test_numeric_token_is_an_id(self):
        """Numeric tokens never consult the index."""
        index = NameIndex({"42": [7]})
        assert index.lookup("42") == 42

    def test_numeric_token_for_unknown_task(self):
        assert NameIndex().lookup("3") == 3

    def test_single_match(self):
        assert NameIndex({"laundry": [5]}).lookup("laundry") == 5

    def test_not_found_names_token(self):
        with pytest.raises(NotFoundError, match="laundry"):
            NameIndex().lookup("laundry")

    def test_ambiguous_lists_every_id(self):
        """Two tasks named groceries (3 and 7)."""
        index = NameIndex({"groceries": [7, 3]})
        with pytest.raises(AmbiguousNameError) as exc:
            index.lookup("groceries")
        assert exc.value.ids == [3, 7]
        assert "3, 7" in str(exc.value)
        assert index.lookup("3") == 3

    def test_parse_id(self):
        assert parse_id("0") == 0
        assert parse_id("18446744073709551615") == 2**64 - 1
        assert parse_id("-1") is None
        assert parse_id("1.5") is None
        assert parse_id("") is None
        assert parse_id("x1") is None


class TestSerialization:

    def test_from_dict_rejects_non_mapping(self):
        with pytest.raises(RecordError):
            NameIndex.from_dict([1, 2])

    def test_from_dict_skips_empty_buckets(self):
        assert NameIndex.from_dict({"a": [], "b": [1]}).to_dict() == {"b": [1]}
