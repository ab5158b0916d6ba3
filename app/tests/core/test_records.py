# python -m pytest app/tests/core/test_records.py -v

"""Tests for row decoding."""

import pytest

from app.core.records import decode, decode_rows, encode, new_record


def test_decode_normalizes_per_kind(catalog):
    items = catalog.require("items")

    record = decode(items.fields, (1, b"title", "desc", 5, None))

    assert record == {"id": 1, "title": "title", "description": "desc", "price": 5.0, "updated": None}
    assert isinstance(record["price"], float)
    assert list(record) == ["id", "title", "description", "price", "updated"]


def test_decode_keeps_null(catalog):
    users = catalog.require("users")
    assert decode(users.fields, (1, "Alice", None)) == {"id": 1, "name": "Alice", "age": None}


def test_decode_width_mismatch_is_a_bug(catalog):
    with pytest.raises(ValueError):
        decode(catalog.require("users").fields, (1, "Alice"))


def test_decode_rows(catalog):
    users = catalog.require("users")
    records = decode_rows(users.fields, [(1, "a", 1), (2, "b", None)])
    assert [r["id"] for r in records] == [1, 2]


def test_encode_returns_ordered_pairs():
    names, values = encode({"name": "Alice", "age": None})
    assert names == ["name", "age"]
    assert values == ["Alice", None]


def test_new_record():
    assert new_record(["id"], [7]) == {"id": 7}
    with pytest.raises(ValueError):
        new_record(["id", "name"], [7])
