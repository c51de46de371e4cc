"""
Database layer.

Provides the client handle, connection helpers, find options and
normalized write results.
"""

from .client import MongoClientHandle
from .connection import (
    close_default_client,
    connect,
    connect_default,
    extract_host,
    get_default_client,
    ping,
)
from .options import FindOptions, parse_find_options, parse_sort_fields
from .results import ChangeInfo

__all__ = [
    # Client
    "MongoClientHandle",
    "ChangeInfo",
    # Connection
    "connect",
    "connect_default",
    "get_default_client",
    "close_default_client",
    "extract_host",
    "ping",
    # Options
    "FindOptions",
    "parse_find_options",
    "parse_sort_fields",
]
