# ==============================================
# MongoClient
# ==============================================
#
# PURPOSE:
#   Manages the MongoDB connection shared by every request.
#   Inserts normalized log documents into a caller-chosen
#   database and collection, preserving nested structure.
#
# CLASS: MongoClient
# ------------------
#   Stateful — holds one pymongo client. pymongo clients are
#   thread-safe and pool their own connections, so a single
#   instance serves all request threads without extra locking.
#
#   Constructor:
#   ------------
#   - __init__(uri, connect_timeout=10.0, write_timeout=5.0)
#
#   Methods:
#   --------
#   - connect() -> None
#       Create the pymongo client and ping it.
#
#   - disconnect() -> None
#       Close connection.
#
#   - ping(timeout: float) -> None
#       Round-trip to the server within `timeout` seconds.
#
#   - insert_one(database, collection, document) -> Any
#       Insert single document. Return inserted_id.
#
#   - insert_many(database, collection, documents) -> int
#       Insert a batch in one round-trip. Return count inserted.
#
#   Every pymongo or BSON encoding failure is re-raised as StorageError.
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with MongoClient(...) as db:` usage.
#
# ==============================================

import logging
from typing import Any, Optional

import pymongo
from bson.errors import BSONError
from pymongo import MongoClient as PyMongoClient
from pymongo.errors import PyMongoError

from fluentbridge.errors import StorageError

logger = logging.getLogger(__name__)

# BSON encoding runs client-side before the write and raises outside PyMongoError
WRITE_ERRORS = (PyMongoError, BSONError, OverflowError, UnicodeEncodeError)


class MongoClient:
    def __init__(self, uri: str, connect_timeout: float = 10.0, write_timeout: float = 5.0):
        # Store connection params. Don't connect yet.
        self.uri = uri
        self.connect_timeout = connect_timeout
        self.write_timeout = write_timeout
        self.client: Optional[PyMongoClient] = None

    @classmethod
    def from_config(cls, mongo_config) -> "MongoClient":
        return cls(
            mongo_config.uri,
            connect_timeout=mongo_config.connect_timeout_seconds,
            write_timeout=mongo_config.write_timeout_seconds,
        )

    def connect(self) -> None:
        # Establish connection to MongoDB and verify it answers.
        timeout_ms = int(self.connect_timeout * 1000)
        try:
            self.client = PyMongoClient(
                self.uri,
                serverSelectionTimeoutMS=timeout_ms,
                connectTimeoutMS=timeout_ms,
                tz_aware=True,
            )
        except PyMongoError as e:
            logger.error("Failed to connect to MongoDB: %s", e)
            raise StorageError(f"failed to connect to MongoDB: {e}") from e

        self.ping(self.connect_timeout)
        logger.info("Connected to MongoDB successfully")

    def disconnect(self) -> None:
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")
            self.client = None

    def ping(self, timeout: float) -> None:
        client = self._require_client()
        try:
            with pymongo.timeout(timeout):
                client.admin.command("ping")
        except PyMongoError as e:
            raise StorageError(f"failed to ping MongoDB: {e}") from e

    def insert_one(self, database: str, collection: str, document: dict) -> Any:
        client = self._require_client()
        try:
            with pymongo.timeout(self.write_timeout):
                result = client[database][collection].insert_one(document)
        except WRITE_ERRORS as e:
            raise StorageError(f"failed to insert log: {e}") from e
        return result.inserted_id

    def insert_many(self, database: str, collection: str, documents: list[dict]) -> int:
        client = self._require_client()
        try:
            with pymongo.timeout(self.write_timeout):
                result = client[database][collection].insert_many(documents)
        except WRITE_ERRORS as e:
            # An ordered insert_many may already have written a prefix of the batch
            raise StorageError(f"failed to insert logs: {e}") from e
        return len(result.inserted_ids)

    def _require_client(self) -> PyMongoClient:
        if self.client is None:
            raise StorageError("not connected to MongoDB")
        return self.client

    def __enter__(self):
        # For `with MongoClient(...) as db:` usage.
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
