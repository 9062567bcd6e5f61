"""
MongoDB backend for the LifeTunes key-value store.

This module provides:
- Connection management (singleton client with certifi CA bundle)
- MongoKeyValueStore: one document per key in the 'app_state' collection
"""

import os
import logging
from datetime import datetime
from typing import Optional

import pymongo
from pymongo import MongoClient
from pymongo.errors import ServerSelectionTimeoutError, OperationFailure, PyMongoError
import certifi

from lifetunes.adapters.repositories.store import KeyValueStore

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

DATABASE_NAME = "lifetunes"
STATE_COLLECTION_NAME = "app_state"

CONNECTION_TIMEOUT_MS = 10000


# ============================================================================
# EXCEPTIONS
# ============================================================================

class MongoDBConnectionError(Exception):
    """Raised when MongoDB connection fails."""
    pass


class MongoDBOperationError(Exception):
    """Raised when database operations fail."""
    pass


# ============================================================================
# DATABASE CONNECTION
# ============================================================================

class DatabaseConfig:
    """Encapsulates MongoDB connection configuration."""

    def __init__(self, uri: Optional[str] = None):
        """
        Args:
            uri: MongoDB connection URI (defaults to MONGODB_URI env var)

        Raises:
            ValueError: If URI not provided and env var not set
        """
        self.uri = uri or os.environ.get("MONGODB_URI")
        if not self.uri:
            raise ValueError("MONGODB_URI environment variable not set")

    def get_client(self) -> MongoClient:
        """
        Creates a MongoDB client with TLS configured from certifi.

        Raises:
            MongoDBConnectionError: If connection fails.
        """
        try:
            client = MongoClient(
                self.uri,
                tlsCAFile=certifi.where(),
                serverSelectionTimeoutMS=CONNECTION_TIMEOUT_MS,
                connectTimeoutMS=CONNECTION_TIMEOUT_MS
            )
            client.admin.command('ping')
            logger.info("[OK] MongoDB connected successfully")
            return client

        except ServerSelectionTimeoutError:
            logger.error("MongoDB connection timeout")
            raise MongoDBConnectionError("Connection timeout") from None
        except OperationFailure as e:
            logger.error(f"MongoDB authentication failed: {e}")
            raise MongoDBConnectionError(f"Authentication failed: {e}") from None
        except PyMongoError as e:
            logger.error(f"MongoDB connection failed: {e}")
            raise MongoDBConnectionError(str(e)) from e


class DatabaseConnection:
    """Singleton connection manager for MongoDB."""

    _instance: Optional['DatabaseConnection'] = None
    _client: Optional[MongoClient] = None

    def __new__(cls) -> 'DatabaseConnection':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_client(self) -> MongoClient:
        """
        Gets or creates the MongoDB client.

        Raises:
            MongoDBConnectionError: If connection fails.
        """
        if self._client is None:
            try:
                config = DatabaseConfig()
                self._client = config.get_client()
            except ValueError as e:
                logger.error(str(e))
                raise MongoDBConnectionError(str(e)) from e

        return self._client

    def get_database(self) -> pymongo.database.Database:
        client = self.get_client()
        return client[DATABASE_NAME]

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None
            logger.info("MongoDB connection closed")


# ============================================================================
# KEY-VALUE STORE
# ============================================================================

class MongoKeyValueStore(KeyValueStore):
    """
    Stores each key as {"_id": key, "value": blob, "updated_at": iso}.
    Writes are upserts, so a key always maps to exactly one document.
    """

    def __init__(self, collection: pymongo.collection.Collection):
        self.collection = collection

    def get(self, key: str) -> Optional[str]:
        try:
            doc = self.collection.find_one({"_id": key})
        except PyMongoError as e:
            logger.warning(f"Failed to read '{key}' from MongoDB: {e}")
            return None
        if not doc:
            return None
        value = doc.get("value")
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """
        Raises:
            MongoDBOperationError: If the upsert fails.
        """
        try:
            result = self.collection.replace_one(
                {"_id": key},
                {"_id": key, "value": value, "updated_at": datetime.now().isoformat()},
                upsert=True
            )
            if result.upserted_id:
                logger.debug(f"[OK] Inserted state key '{key}'")
        except PyMongoError as e:
            logger.error(f"Failed to save '{key}': {e}")
            raise MongoDBOperationError(f"Save failed: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.collection.delete_one({"_id": key})
        except PyMongoError as e:
            logger.error(f"Failed to delete '{key}': {e}")
            raise MongoDBOperationError(f"Delete failed: {e}") from e


# ============================================================================
# PUBLIC API
# ============================================================================

def get_database() -> pymongo.database.Database:
    """
    Main entry point for database access.

    Raises:
        MongoDBConnectionError: If connection fails.
    """
    try:
        conn = DatabaseConnection()
        return conn.get_database()
    except MongoDBConnectionError as e:
        logger.error(f"Database connection failed: {e}")
        raise


def get_state_store() -> MongoKeyValueStore:
    """Builds a key-value store on the default state collection."""
    db = get_database()
    return MongoKeyValueStore(db[STATE_COLLECTION_NAME])
