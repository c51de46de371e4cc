"""
Unit tests for ObjectId helpers.
"""

import os
from datetime import timezone

import pytest
from bson import ObjectId

from mdb_lite.exceptions import InvalidObjectIdError, MongoLiteError
from mdb_lite.utils import from_hex, generation_time, is_valid_hex, new_object_id, to_hex


class TestNewObjectId:
    def test_returns_object_id(self):
        assert isinstance(new_object_id(), ObjectId)

    def test_two_calls_differ(self):
        assert new_object_id() != new_object_id()

    def test_many_calls_are_unique(self):
        ids = {new_object_id() for _ in range(1000)}
        assert len(ids) == 1000


class TestHexRoundTrip:
    def test_to_hex_is_24_lowercase_chars(self):
        text = to_hex(new_object_id())
        assert len(text) == 24
        assert text == text.lower()
        assert all(c in "0123456789abcdef" for c in text)

    def test_round_trip_random_bytes(self):
        for _ in range(50):
            oid = ObjectId(os.urandom(12))
            assert from_hex(to_hex(oid)) == oid

    def test_round_trip_edge_bytes(self):
        for raw in (b"\x00" * 12, b"\xff" * 12):
            oid = ObjectId(raw)
            assert from_hex(to_hex(oid)).binary == raw

    def test_to_hex_matches_str(self):
        oid = new_object_id()
        assert to_hex(oid) == str(oid)

    def test_from_hex_accepts_uppercase(self):
        oid = from_hex("507F1F77BCF86CD799439011")
        assert to_hex(oid) == "507f1f77bcf86cd799439011"


class TestIsValidHex:
    @pytest.mark.parametrize(
        "value",
        [
            "507f1f77bcf86cd799439011",
            "000000000000000000000000",
            "ABCDEFabcdef012345678901",
        ],
    )
    def test_valid(self, value):
        assert is_valid_hex(value) is True

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "507f1f77bcf86cd79943901",  # 23 chars
            "507f1f77bcf86cd7994390111",  # 25 chars
            "507f1f77bcf86cd79943901g",  # non-hex
            "507f1f77 cf86cd799439011",  # whitespace
            "０07f1f77bcf86cd799439011",  # non-ASCII digits
            None,
            12345,
            b"507f1f77bcf86cd799439011",
            ObjectId("507f1f77bcf86cd799439011"),
        ],
    )
    def test_invalid(self, value):
        assert is_valid_hex(value) is False

    def test_valid_iff_from_hex_succeeds(self):
        candidates = [
            "507f1f77bcf86cd799439011",
            "507f1f77bcf86cd79943901z",
            "xyz",
            "5" * 24,
            "5" * 26,
        ]
        for value in candidates:
            try:
                from_hex(value)
                parsed = True
            except InvalidObjectIdError:
                parsed = False
            assert is_valid_hex(value) is parsed


class TestFromHex:
    def test_invalid_raises_typed_error(self):
        with pytest.raises(InvalidObjectIdError) as exc_info:
            from_hex("not-an-object-id")
        assert exc_info.value.value == "not-an-object-id"

    def test_invalid_is_value_error(self):
        with pytest.raises(ValueError):
            from_hex("zz")

    def test_invalid_is_library_error(self):
        with pytest.raises(MongoLiteError):
            from_hex(None)


class TestGenerationTime:
    def test_generation_time_is_utc(self):
        created = generation_time(ObjectId("507f1f77bcf86cd799439011"))
        assert created.tzinfo is not None
        assert created.utcoffset() == timezone.utc.utcoffset(None)
        assert created.year == 2012
