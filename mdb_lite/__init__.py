"""
MDB_LITE - MongoDB helpers

A thin synchronous layer over PyMongo: one client handle with a sticky
connection error, CRUD and aggregation helpers addressed by
(database, collection), and ObjectId utilities.
"""

from .config import ClientConfig
from .database import (
    ChangeInfo,
    FindOptions,
    MongoClientHandle,
    close_default_client,
    connect,
    connect_default,
    get_default_client,
    ping,
)
from .exceptions import (
    ConfigurationError,
    ConnectionFailedError,
    InvalidObjectIdError,
    InvalidOptionsError,
    MongoLiteError,
    NotFoundError,
)
from .utils import from_hex, generation_time, is_valid_hex, new_object_id, to_hex

__version__ = "0.1.0"

__all__ = [
    # Connection
    "connect",
    "connect_default",
    "get_default_client",
    "close_default_client",
    "ping",
    "MongoClientHandle",
    "ClientConfig",
    # Results and options
    "ChangeInfo",
    "FindOptions",
    # Identifiers
    "new_object_id",
    "to_hex",
    "is_valid_hex",
    "from_hex",
    "generation_time",
    # Errors
    "MongoLiteError",
    "ConnectionFailedError",
    "NotFoundError",
    "InvalidObjectIdError",
    "ConfigurationError",
    "InvalidOptionsError",
]
