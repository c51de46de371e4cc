"""
Client handle and query/mutation helpers.

A ``MongoClientHandle`` wraps one long-lived ``pymongo.MongoClient`` and a
sticky connection error. Every helper follows the same protocol:

1. Raise the sticky ``ConnectionFailedError`` if one is recorded; the
   driver is not touched.
2. Start a scoped ``ClientSession`` and bind ``database[collection]``.
3. Make exactly one driver call inside that session.
4. End the session on every exit path.
5. Report "nothing matched" as ``NotFoundError``; every other driver
   error propagates unchanged.

Usage:
    from mdb_lite import connect

    client = connect("mongodb://localhost:27017")
    client.ping()
    client.insert("app", "users", {"name": "ada", "age": 36})
    user = client.read_one("app", "users", {"name": "ada"})
"""

import logging
import threading
import time
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.client_session import ClientSession
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..config import ClientConfig
from ..constants import OPERATION_PREFIX, PING_COMMAND
from ..exceptions import ConnectionFailedError, NotFoundError
from ..observability import get_logger as get_contextual_logger
from ..observability import log_operation, operation_context, record_operation
from .options import parse_find_options
from .results import ChangeInfo

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)

Document = Mapping[str, Any]


def _decode(doc: dict[str, Any], model: type[BaseModel] | None) -> Any:
    if model is None:
        return doc
    return model.model_validate(doc)


class MongoClientHandle:
    """
    A MongoDB client plus a sticky connection error.

    Handles are created by ``connect()``. A handle whose connection attempt
    failed carries the error and raises it from every method; create a new
    handle to retry.
    """

    def __init__(
        self,
        host: str,
        client: MongoClient | None = None,
        error: ConnectionFailedError | None = None,
        uri: str | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        """
        Initialize the handle.

        Args:
            host: Host portion of the connection string, used in error messages
            client: Connected MongoClient (None when the connection failed)
            error: Sticky connection error (None when connected)
            uri: Connection string the handle was created from
            config: Client configuration the handle was created with
        """
        if client is None and error is None:
            error = ConnectionFailedError(host, "no client available")
        self.host = host
        self.uri = uri
        self.config = config
        self._client = client
        self._error = error
        self._error_lock = threading.Lock()

    def __repr__(self) -> str:
        state = "failed" if self._error is not None else "connected"
        return f"<MongoClientHandle host={self.host!r} {state}>"

    def __enter__(self) -> "MongoClientHandle":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def error(self) -> ConnectionFailedError | None:
        """The sticky connection error, or None."""
        return self._error

    @property
    def client(self) -> MongoClient | None:
        """The underlying MongoClient, or None if the connection failed."""
        return self._client

    def close(self) -> None:
        """Close the underlying MongoClient."""
        if self._client is not None:
            self._client.close()
            logger.info(f"MongoDB client closed (host={self.host})")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _raise_if_failed(self) -> None:
        if self._error is not None:
            raise self._error

    def _record_failure(self, exc: Exception) -> ConnectionFailedError:
        with self._error_lock:
            if self._error is None:
                self._error = ConnectionFailedError(
                    self.host, str(exc), context={"error_type": type(exc).__name__}
                )
                contextual_logger.error(
                    "MongoDB connection lost",
                    extra={"host": self.host, "error": str(exc)},
                )
            return self._error

    @contextmanager
    def _operation(
        self, operation: str, database: str | None = None, collection: str | None = None
    ) -> Iterator[ClientSession]:
        self._raise_if_failed()

        tags = {}
        if database is not None:
            tags["database"] = database
        if collection is not None:
            tags["collection"] = collection

        start_time = time.perf_counter()
        success = True
        with operation_context(operation, database, collection):
            try:
                with self._client.start_session() as session:
                    yield session
            except Exception:
                success = False
                raise
            finally:
                duration_ms = (time.perf_counter() - start_time) * 1000
                record_operation(f"{OPERATION_PREFIX}.{operation}", duration_ms, success, **tags)
                log_operation(
                    contextual_logger, operation, success=success, duration_ms=duration_ms
                )

    def _collection(self, database: str, collection: str) -> Collection:
        return self._client[database][collection]

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def ping(self) -> None:
        """
        Check that the server is reachable.

        Raises:
            ConnectionFailedError: The sticky error, or a new one recorded
                because the ping failed
        """
        self._raise_if_failed()
        try:
            with self._operation("ping") as session:
                self._client.admin.command(PING_COMMAND, session=session)
        except PyMongoError as e:
            raise self._record_failure(e) from e

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read_one(
        self,
        database: str,
        collection: str,
        query: Document | None = None,
        model: type[BaseModel] | None = None,
    ) -> Any:
        """
        Return the first document matching ``query``.

        Args:
            database: Database name
            collection: Collection name
            query: Filter document (None matches everything)
            model: Optional pydantic model to decode the document into

        Raises:
            NotFoundError: If no document matches
        """
        with self._operation("read_one", database, collection) as session:
            doc = self._collection(database, collection).find_one(query or {}, session=session)
        if doc is None:
            raise NotFoundError(database=database, collection=collection)
        return _decode(doc, model)

    def read_many(
        self,
        database: str,
        collection: str,
        query: Document | None = None,
        fields: Document | None = None,
        options: Mapping[str, Any] | None = None,
        model: type[BaseModel] | None = None,
    ) -> list[Any]:
        """
        Return all documents matching ``query``.

        Args:
            database: Database name
            collection: Collection name
            query: Filter document (None matches everything)
            fields: Projection document (None returns every field)
            options: Mapping with optional ``Sort``, ``Limit`` and ``Skip``
            model: Optional pydantic model to decode each document into

        Raises:
            InvalidOptionsError: If ``options`` holds a mistyped value
        """
        with self._operation("read_many", database, collection) as session:
            find_options = parse_find_options(options)
            cursor = self._collection(database, collection).find(
                query or {}, projection=fields or None, session=session
            )
            docs = list(find_options.apply(cursor))
        return [_decode(doc, model) for doc in docs]

    def count(self, database: str, collection: str, query: Document | None = None) -> int:
        """Return the number of documents matching ``query``."""
        with self._operation("count", database, collection) as session:
            return self._collection(database, collection).count_documents(
                query or {}, session=session
            )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, database: str, collection: str, *docs: Any) -> None:
        """Insert one or more documents."""
        with self._operation("insert", database, collection) as session:
            self._collection(database, collection).insert_many(list(docs), session=session)

    def update(self, database: str, collection: str, selector: Document, update: Document) -> None:
        """
        Update the first document matching ``selector``.

        Raises:
            NotFoundError: If no document matches
        """
        with self._operation("update", database, collection) as session:
            result = self._collection(database, collection).update_one(
                selector, update, session=session
            )
        if result.matched_count == 0:
            raise NotFoundError(database=database, collection=collection)

    def update_all(
        self, database: str, collection: str, selector: Document, update: Document
    ) -> ChangeInfo:
        """Update every document matching ``selector``."""
        with self._operation("update_all", database, collection) as session:
            result = self._collection(database, collection).update_many(
                selector, update, session=session
            )
        return ChangeInfo.from_update_result(result)

    def upsert(
        self, database: str, collection: str, selector: Document, update: Document
    ) -> ChangeInfo:
        """
        Update the first document matching ``selector``, or insert one.

        ``upserted_id`` on the result is set only when a document was inserted.
        """
        with self._operation("upsert", database, collection) as session:
            result = self._collection(database, collection).update_one(
                selector, update, upsert=True, session=session
            )
        return ChangeInfo.from_update_result(result)

    def remove(self, database: str, collection: str, selector: Document) -> None:
        """
        Delete the first document matching ``selector``.

        Raises:
            NotFoundError: If no document matches
        """
        with self._operation("remove", database, collection) as session:
            result = self._collection(database, collection).delete_one(selector, session=session)
        if result.deleted_count == 0:
            raise NotFoundError(database=database, collection=collection)

    def remove_all(self, database: str, collection: str, selector: Document) -> int:
        """Delete every document matching ``selector`` and return the count."""
        with self._operation("remove_all", database, collection) as session:
            result = self._collection(database, collection).delete_many(selector, session=session)
        return result.deleted_count

    def find_and_modify(
        self,
        database: str,
        collection: str,
        selector: Document,
        update: Document,
        upsert: bool = False,
        model: type[BaseModel] | None = None,
    ) -> tuple[int, Any]:
        """
        Atomically update a document and return it as it is after the update.

        Args:
            database: Database name
            collection: Collection name
            selector: Filter document
            update: Update document
            upsert: Insert a document when nothing matches
            model: Optional pydantic model to decode the document into

        Returns:
            Tuple of (number of existing documents updated, updated document)

        Raises:
            NotFoundError: If nothing matched and ``upsert`` is False
        """
        command = {
            "findAndModify": collection,
            "query": selector,
            "update": update,
            "upsert": upsert,
            "new": True,
        }
        with self._operation("find_and_modify", database, collection) as session:
            response = self._client[database].command(command, session=session)

        value = response.get("value")
        if value is None:
            raise NotFoundError(database=database, collection=collection)
        last_error = response.get("lastErrorObject") or {}
        updated = last_error.get("n", 0) if last_error.get("updatedExisting") else 0
        return updated, _decode(value, model)

    def find_and_remove(
        self,
        database: str,
        collection: str,
        selector: Document,
        model: type[BaseModel] | None = None,
    ) -> tuple[int, Any]:
        """
        Atomically delete a document and return it.

        Returns:
            Tuple of (number of documents removed, removed document)

        Raises:
            NotFoundError: If nothing matched
        """
        command = {
            "findAndModify": collection,
            "query": selector,
            "remove": True,
        }
        with self._operation("find_and_remove", database, collection) as session:
            response = self._client[database].command(command, session=session)

        value = response.get("value")
        if value is None:
            raise NotFoundError(database=database, collection=collection)
        last_error = response.get("lastErrorObject") or {}
        return last_error.get("n", 0), _decode(value, model)

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def aggregate_one(
        self,
        database: str,
        collection: str,
        pipeline: Sequence[Document],
        model: type[BaseModel] | None = None,
    ) -> Any:
        """
        Run an aggregation pipeline and return its first result.

        Raises:
            NotFoundError: If the pipeline produced no results
        """
        with self._operation("aggregate_one", database, collection) as session:
            with self._collection(database, collection).aggregate(
                list(pipeline), session=session
            ) as cursor:
                doc = next(cursor, None)
        if doc is None:
            raise NotFoundError(database=database, collection=collection)
        return _decode(doc, model)

    def aggregate_many(
        self,
        database: str,
        collection: str,
        pipeline: Sequence[Document],
        model: type[BaseModel] | None = None,
    ) -> list[Any]:
        """Run an aggregation pipeline and return all results."""
        with self._operation("aggregate_many", database, collection) as session:
            docs = list(
                self._collection(database, collection).aggregate(list(pipeline), session=session)
            )
        return [_decode(doc, model) for doc in docs]
