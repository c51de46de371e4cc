"""
Normalized write results.
"""

from dataclasses import dataclass
from typing import Any

from pymongo.results import UpdateResult


@dataclass(frozen=True)
class ChangeInfo:
    """Counts reported by the server for a write."""

    matched: int = 0
    updated: int = 0
    removed: int = 0
    upserted_id: Any = None

    @classmethod
    def from_update_result(cls, result: UpdateResult) -> "ChangeInfo":
        return cls(
            matched=result.matched_count,
            updated=result.modified_count,
            upserted_id=result.upserted_id,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ``Matched``/``Updated``/``Removed``/``UpsertedId`` mapping."""
        return {
            "Matched": self.matched,
            "Updated": self.updated,
            "Removed": self.removed,
            "UpsertedId": self.upserted_id,
        }
