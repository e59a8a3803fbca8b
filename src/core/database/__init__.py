"""Database connection module."""

from src.core.database.mongo import (
    DocumentStore,
    DuplicateDocumentError,
    MongoConnection,
    init_mongo,
    shutdown_mongo,
    to_object_id,
)


__all__ = [
    "DocumentStore",
    "DuplicateDocumentError",
    "MongoConnection",
    "init_mongo",
    "shutdown_mongo",
    "to_object_id",
]
