"""
Utility functions and helpers for MDB Lite.

This module provides the ObjectId helpers used across the MDB Lite codebase.
"""

from .object_id import from_hex, generation_time, is_valid_hex, new_object_id, to_hex

__all__ = ["new_object_id", "to_hex", "is_valid_hex", "from_hex", "generation_time"]
