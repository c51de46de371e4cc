"""
Configuration management for MDB_LITE.

Values come from explicit arguments first, then environment variables,
then the defaults in ``constants``. ``connect()`` accepts a ``ClientConfig``
but works without one.
"""

import os

from .constants import (
    DEFAULT_APP_NAME,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
    DEFAULT_SOCKET_TIMEOUT_MS,
)
from .exceptions import ConfigurationError


class ClientConfig:
    """
    Client connection configuration.

    Example:
        # Using environment variables
        config = ClientConfig()
        client = connect(config.mongo_uri, config=config)

        # Or using direct parameters
        config = ClientConfig(mongo_uri="mongodb://localhost:27017", app_name="reports")
    """

    def __init__(
        self,
        mongo_uri: str | None = None,
        socket_timeout_ms: int | None = None,
        server_selection_timeout_ms: int | None = None,
        app_name: str | None = None,
    ):
        """
        Initialize configuration.

        Args:
            mongo_uri: MongoDB connection URI (defaults to MONGO_URI env var)
            socket_timeout_ms: Socket timeout in ms (defaults to 24 hours or
                MONGO_SOCKET_TIMEOUT_MS)
            server_selection_timeout_ms: Server selection timeout in ms
                (defaults to 10000 or MONGO_SERVER_SELECTION_TIMEOUT_MS)
            app_name: Application name sent to the server (defaults to
                "mdb-lite" or MONGO_APP_NAME)
        """
        self.mongo_uri = mongo_uri or os.getenv("MONGO_URI", "")
        if socket_timeout_ms is None:
            socket_timeout_ms = _int_from_env("MONGO_SOCKET_TIMEOUT_MS", DEFAULT_SOCKET_TIMEOUT_MS)
        self.socket_timeout_ms = socket_timeout_ms
        if server_selection_timeout_ms is None:
            server_selection_timeout_ms = _int_from_env(
                "MONGO_SERVER_SELECTION_TIMEOUT_MS", DEFAULT_SERVER_SELECTION_TIMEOUT_MS
            )
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.app_name = app_name or os.getenv("MONGO_APP_NAME", DEFAULT_APP_NAME)

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if self.socket_timeout_ms < 1:
            raise ConfigurationError(
                f"socket_timeout_ms must be >= 1, got {self.socket_timeout_ms}",
                config_key="socket_timeout_ms",
                config_value=self.socket_timeout_ms,
            )

        if self.server_selection_timeout_ms < 1:
            raise ConfigurationError(
                f"server_selection_timeout_ms must be >= 1, got "
                f"{self.server_selection_timeout_ms}",
                config_key="server_selection_timeout_ms",
                config_value=self.server_selection_timeout_ms,
            )

        if not self.app_name:
            raise ConfigurationError("app_name must not be empty", config_key="app_name")

    def client_kwargs(self) -> dict:
        """Keyword arguments for ``pymongo.MongoClient``."""
        return {
            "socketTimeoutMS": self.socket_timeout_ms,
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
            "appname": self.app_name,
        }


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer", config_key=name, config_value=raw
        ) from e
