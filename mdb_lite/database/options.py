"""
Find options for ``read_many``.

An options mapping carries up to three keys: ``Sort``, ``Limit`` and
``Skip`` (``sort``, ``limit`` and ``skip`` are accepted too). Keys are
checked for presence, values are validated against a JSON schema, and a
mistyped value raises ``InvalidOptionsError`` instead of being dropped.

Example:
    ```python
    options = parse_find_options({"Sort": ["-age", "name"], "Limit": 2, "Skip": 1})
    cursor = options.apply(collection.find({}))
    ```
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pymongo
from jsonschema import Draft7Validator

from ..constants import (
    ASCENDING_PREFIX,
    DESCENDING_PREFIX,
    LIMIT_OPTION,
    SKIP_OPTION,
    SORT_OPTION,
)
from ..exceptions import InvalidOptionsError

logger = logging.getLogger(__name__)

FIND_OPTIONS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        SORT_OPTION: {
            "anyOf": [
                {"type": "string", "minLength": 1},
                {"type": "array", "items": {"type": "string", "minLength": 1}},
            ]
        },
        LIMIT_OPTION: {"type": "integer", "minimum": 0},
        SKIP_OPTION: {"type": "integer", "minimum": 0},
    },
}

_ALIASES = {
    "sort": SORT_OPTION,
    "limit": LIMIT_OPTION,
    "skip": SKIP_OPTION,
}

_validator = Draft7Validator(FIND_OPTIONS_SCHEMA)


@dataclass(frozen=True)
class FindOptions:
    """Validated Sort/Limit/Skip settings for a find cursor."""

    sort: list[tuple[str, int]] | None = None
    limit: int | None = None
    skip: int | None = None

    def apply(self, cursor: Any) -> Any:
        """Apply the options to a PyMongo cursor and return it."""
        if self.sort:
            cursor = cursor.sort(self.sort)
        if self.limit is not None:
            cursor = cursor.limit(self.limit)
        if self.skip is not None:
            cursor = cursor.skip(self.skip)
        return cursor


def parse_sort_fields(fields: list[str]) -> list[tuple[str, int]]:
    """
    Convert field names into a PyMongo sort specification.

    A leading ``-`` sorts descending; a leading ``+`` or no prefix sorts
    ascending.

    Raises:
        InvalidOptionsError: If a field name is empty once its prefix is removed
    """
    spec: list[tuple[str, int]] = []
    for field in fields:
        direction = pymongo.ASCENDING
        name = field
        if field.startswith(DESCENDING_PREFIX):
            direction = pymongo.DESCENDING
            name = field[1:]
        elif field.startswith(ASCENDING_PREFIX):
            name = field[1:]
        if not name:
            raise InvalidOptionsError(
                f"Sort field {field!r} has no field name",
                error_paths=[SORT_OPTION],
            )
        spec.append((name, direction))
    return spec


def _normalize(options: Mapping[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in options.items():
        canonical = _ALIASES.get(key, key)
        if canonical not in (SORT_OPTION, LIMIT_OPTION, SKIP_OPTION):
            logger.debug(f"Ignoring unrecognized find option: {key!r}")
            continue
        if value is None:
            continue
        if canonical in normalized:
            raise InvalidOptionsError(
                f"Find option {canonical} given more than once",
                error_paths=[canonical],
            )
        # JSON schema arrays are lists only
        if isinstance(value, tuple):
            value = list(value)
        normalized[canonical] = value
    return normalized


def parse_find_options(options: Mapping[str, Any] | None) -> FindOptions:
    """
    Validate an options mapping and build ``FindOptions``.

    Args:
        options: Mapping with optional Sort, Limit and Skip keys, or None

    Returns:
        FindOptions with only the present keys set

    Raises:
        InvalidOptionsError: If a present key has the wrong type or range
    """
    if not options:
        return FindOptions()
    if not isinstance(options, Mapping):
        raise InvalidOptionsError(
            f"Find options must be a mapping, got {type(options).__name__}"
        )

    normalized = _normalize(options)

    errors = sorted(_validator.iter_errors(normalized), key=lambda e: list(e.absolute_path))
    if errors:
        error_paths = []
        for error in errors:
            path = ".".join(str(p) for p in error.absolute_path) or "root"
            if path not in error_paths:
                error_paths.append(path)
        messages = "; ".join(f"{'.'.join(map(str, e.absolute_path))}: {e.message}" for e in errors)
        raise InvalidOptionsError(f"Invalid find options: {messages}", error_paths=error_paths)

    sort = normalized.get(SORT_OPTION)
    if isinstance(sort, str):
        sort = [sort]
    limit = normalized.get(LIMIT_OPTION)
    skip = normalized.get(SKIP_OPTION)

    return FindOptions(
        sort=parse_sort_fields(sort) if sort else None,
        limit=int(limit) if limit is not None else None,
        skip=int(skip) if skip is not None else None,
    )
