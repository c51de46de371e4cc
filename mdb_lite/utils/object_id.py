"""
ObjectId helpers for MDB_LITE.

Thin functions over ``bson.ObjectId``: generate a new identifier, render it
as 24 lowercase hex characters, validate and parse that text form.

Example:
    ```python
    from mdb_lite.utils import from_hex, is_valid_hex, new_object_id, to_hex

    oid = new_object_id()
    text = to_hex(oid)          # "65f0c1d2e3a4b5c6d7e8f901"
    assert is_valid_hex(text)
    assert from_hex(text) == oid
    ```
"""

import string
from datetime import datetime
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

from ..constants import OBJECT_ID_HEX_LENGTH
from ..exceptions import InvalidObjectIdError

_HEX_DIGITS = frozenset(string.hexdigits)


def new_object_id() -> ObjectId:
    """Return a new unique ObjectId (timestamp + random value + counter)."""
    return ObjectId()


def to_hex(oid: ObjectId) -> str:
    """Return the 24-character lowercase hex form of ``oid``."""
    return oid.binary.hex()


def is_valid_hex(value: Any) -> bool:
    """
    Check whether ``value`` is the hex form of an ObjectId.

    True only for a ``str`` of exactly 24 hex digits. Never raises.
    """
    if not isinstance(value, str) or len(value) != OBJECT_ID_HEX_LENGTH:
        return False
    return all(ch in _HEX_DIGITS for ch in value)


def from_hex(value: str) -> ObjectId:
    """
    Parse the hex form of an ObjectId.

    Args:
        value: 24 hex characters (either case)

    Returns:
        The parsed ObjectId

    Raises:
        InvalidObjectIdError: If ``value`` is not valid ObjectId hex
    """
    if not is_valid_hex(value):
        raise InvalidObjectIdError(value)
    try:
        return ObjectId(value)
    except InvalidId as e:
        raise InvalidObjectIdError(value) from e


def generation_time(oid: ObjectId) -> datetime:
    """Return the UTC creation time encoded in ``oid``."""
    return oid.generation_time
