"""MongoDB connection and document store.

Provides:
- Client lifecycle management (Motor)
- ``DocumentStore``: collection-scoped find/insert/update/increment/delete
  with driver errors translated to ``StorageError``
- Index initialization (unique keys per collection)
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorClientSession,
    AsyncIOMotorDatabase,
)
from pymongo import IndexModel
from pymongo.errors import DuplicateKeyError, PyMongoError

from src.auth.models import USERS_COLLECTION, USERS_INDEXES
from src.config.settings import get_settings
from src.contact.models import CONTACTS_COLLECTION, CONTACTS_INDEXES
from src.core.exceptions import StorageError
from src.courses.models import COURSES_COLLECTION, COURSES_INDEXES
from src.enrollments.models import ENROLLMENTS_COLLECTION, ENROLLMENTS_INDEXES


logger = structlog.get_logger(__name__)

Document = dict[str, Any]

COLLECTION_INDEXES: dict[str, list[IndexModel]] = {
    USERS_COLLECTION: USERS_INDEXES,
    COURSES_COLLECTION: COURSES_INDEXES,
    ENROLLMENTS_COLLECTION: ENROLLMENTS_INDEXES,
    CONTACTS_COLLECTION: CONTACTS_INDEXES,
}


class DuplicateDocumentError(StorageError):
    """Insert or update violated a unique index."""

    code = "duplicate_document"

    def __init__(self, collection: str):
        super().__init__(f"Duplicate document in {collection}")
        self.collection = collection


def to_object_id(value: str | ObjectId) -> ObjectId | None:
    """Parse a storage id, returning None when it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class DocumentStore:
    """Collection-scoped operations over a Motor database.

    Only single-document atomicity is assumed. ``transaction()`` groups
    writes into a MongoDB transaction when ``use_transactions`` is set
    (requires a replica set) and yields ``None`` otherwise.
    """

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        client: AsyncIOMotorClient | None = None,
        use_transactions: bool = False,
    ):
        self.database = database
        self.client = client
        self.use_transactions = use_transactions and client is not None

    def _error(
        self, operation: str, collection: str, error: PyMongoError
    ) -> StorageError:
        logger.error(
            "storage_operation_failed",
            operation=operation,
            collection=collection,
            error=str(error),
            error_type=type(error).__name__,
        )
        return StorageError(f"Storage {operation} on {collection} failed")

    async def find_one(
        self,
        collection: str,
        query: Document,
        projection: Document | None = None,
        session: AsyncIOMotorClientSession | None = None,
    ) -> Document | None:
        try:
            return await self.database[collection].find_one(
                query, projection, session=session
            )
        except PyMongoError as e:
            raise self._error("find_one", collection, e) from e

    async def find_all(
        self,
        collection: str,
        query: Document | None = None,
        projection: Document | None = None,
        sort: list[tuple[str, int]] | None = None,
        session: AsyncIOMotorClientSession | None = None,
    ) -> list[Document]:
        try:
            cursor = self.database[collection].find(
                query or {}, projection, session=session
            )
            if sort:
                cursor = cursor.sort(sort)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            raise self._error("find_all", collection, e) from e

    async def insert_one(
        self,
        collection: str,
        document: Document,
        session: AsyncIOMotorClientSession | None = None,
    ) -> str:
        """Insert a document and return its storage id as a string."""
        try:
            result = await self.database[collection].insert_one(
                document, session=session
            )
        except DuplicateKeyError as e:
            raise DuplicateDocumentError(collection) from e
        except PyMongoError as e:
            raise self._error("insert_one", collection, e) from e
        return str(result.inserted_id)

    async def update_one(
        self,
        collection: str,
        query: Document,
        fields: Document,
        session: AsyncIOMotorClientSession | None = None,
    ) -> bool:
        """Set ``fields`` on the first matching document. True if one matched."""
        try:
            result = await self.database[collection].update_one(
                query, {"$set": fields}, session=session
            )
        except DuplicateKeyError as e:
            raise DuplicateDocumentError(collection) from e
        except PyMongoError as e:
            raise self._error("update_one", collection, e) from e
        return result.matched_count > 0

    async def increment(
        self,
        collection: str,
        query: Document,
        field: str,
        amount: int = 1,
        session: AsyncIOMotorClientSession | None = None,
    ) -> bool:
        """Atomically add ``amount`` to a numeric field. True if one matched."""
        try:
            result = await self.database[collection].update_one(
                query, {"$inc": {field: amount}}, session=session
            )
        except PyMongoError as e:
            raise self._error("increment", collection, e) from e
        return result.matched_count > 0

    async def delete_one(
        self,
        collection: str,
        query: Document,
        session: AsyncIOMotorClientSession | None = None,
    ) -> bool:
        try:
            result = await self.database[collection].delete_one(query, session=session)
        except PyMongoError as e:
            raise self._error("delete_one", collection, e) from e
        return result.deleted_count > 0

    async def delete_all(
        self,
        collection: str,
        session: AsyncIOMotorClientSession | None = None,
    ) -> int:
        try:
            result = await self.database[collection].delete_many({}, session=session)
        except PyMongoError as e:
            raise self._error("delete_all", collection, e) from e
        return result.deleted_count

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncIOMotorClientSession | None]:
        """Run the enclosed writes in one transaction when supported."""
        if not self.use_transactions:
            yield None
            return

        try:
            async with await self.client.start_session() as session:
                async with session.start_transaction():
                    yield session
        except PyMongoError as e:
            raise self._error("transaction", "*", e) from e

    async def ping(self) -> bool:
        """Check the server is reachable."""
        try:
            await self.database.command("ping")
        except PyMongoError:
            logger.warning("mongodb_ping_failed")
            return False
        return True


class MongoConnection:
    """MongoDB client manager."""

    _client: AsyncIOMotorClient | None = None

    @classmethod
    def connect(cls) -> AsyncIOMotorClient:
        """Create the Motor client (connections are opened lazily)."""
        if cls._client is not None:
            return cls._client

        settings = get_settings()
        cls._client = AsyncIOMotorClient(
            settings.mongodb_url,
            serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
            tz_aware=True,
        )
        logger.info("mongodb_client_created", database=settings.mongodb_database)
        return cls._client

    @classmethod
    def disconnect(cls) -> None:
        if cls._client is not None:
            cls._client.close()
            cls._client = None
            logger.info("mongodb_client_closed")


async def init_indexes(database: AsyncIOMotorDatabase) -> None:
    """Create the unique indexes every collection relies on."""
    for collection, indexes in COLLECTION_INDEXES.items():
        if indexes:
            await database[collection].create_indexes(indexes)
        logger.info("mongodb_indexes_created", collection=collection)


async def init_mongo() -> DocumentStore:
    """Connect, verify the server and create indexes.

    Raises:
        ConnectionError: If the server cannot be reached
    """
    settings = get_settings()
    client = MongoConnection.connect()
    database = client[settings.mongodb_database]

    try:
        await database.command("ping")
        await init_indexes(database)
    except PyMongoError as e:
        logger.error("mongodb_connection_failed", error=str(e))
        msg = f"Failed to connect to MongoDB: {e}"
        raise ConnectionError(msg) from e

    logger.info("mongodb_initialized", database=settings.mongodb_database)

    return DocumentStore(
        database,
        client=client,
        use_transactions=settings.mongodb_use_transactions,
    )


async def shutdown_mongo() -> None:
    MongoConnection.disconnect()
