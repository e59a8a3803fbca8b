"""In-memory stand-in for ``DocumentStore`` used by the service and API tests.

Supports equality queries and $set updates on dotted paths, exclusion
projections, sorting and the unique keys of the real indexes. ``fail_on``
makes chosen operations raise ``StorageError`` the way a dropped connection
would.
"""

import copy
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from bson import ObjectId

from src.core.database import DuplicateDocumentError
from src.core.exceptions import StorageError


UNIQUE_KEYS: dict[str, list[tuple[str, ...]]] = {
    "users": [("email",)],
    "courses": [("external_id",)],
    "enrollments": [("email", "course_id")],
}


_MISSING = object()


def _get_path(doc: Any, path: str) -> Any:
    """Resolve a dotted path such as ``modules.0.lessons.1.id``."""
    value = doc
    for part in path.split("."):
        if isinstance(value, list) and part.isdigit() and int(part) < len(value):
            value = value[int(part)]
        elif isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return _MISSING
    return value


def _set_path(doc: dict[str, Any], path: str, value: Any) -> None:
    *parents, last = path.split(".")
    target: Any = doc
    for part in parents:
        target = target[int(part)] if isinstance(target, list) else target[part]
    if isinstance(target, list):
        target[int(last)] = value
    else:
        target[last] = value


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(_get_path(doc, key) == value for key, value in query.items())


class FakeSession:
    """Stands in for a client session inside ``transaction()``."""


class InMemoryDocumentStore:
    def __init__(self, use_transactions: bool = False) -> None:
        self.use_transactions = use_transactions
        self.collections: dict[str, list[dict[str, Any]]] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self.healthy = True

    def fail_on(self, *operations: str) -> None:
        self.failing.update(operations)

    def documents(self, collection: str) -> list[dict[str, Any]]:
        return self.collections.setdefault(collection, [])

    def _check(self, operation: str, collection: str) -> None:
        self.calls.append((operation, collection))
        if operation in self.failing:
            raise StorageError(f"Storage {operation} on {collection} failed")

    def _check_unique(
        self, collection: str, candidate: dict[str, Any], ignore: Any = None
    ) -> None:
        for keys in UNIQUE_KEYS.get(collection, []):
            for doc in self.documents(collection):
                if doc["_id"] == ignore:
                    continue
                if all(doc.get(k) == candidate.get(k) for k in keys):
                    raise DuplicateDocumentError(collection)

    def _find(self, collection: str, query: dict[str, Any]) -> dict[str, Any] | None:
        return next(
            (doc for doc in self.documents(collection) if _matches(doc, query)), None
        )

    @staticmethod
    def _project(
        doc: dict[str, Any], projection: dict[str, Any] | None
    ) -> dict[str, Any]:
        result = copy.deepcopy(doc)
        for key, include in (projection or {}).items():
            if not include:
                result.pop(key, None)
        return result

    async def find_one(self, collection, query, projection=None, session=None):
        self._check("find_one", collection)
        doc = self._find(collection, query)
        return self._project(doc, projection) if doc else None

    async def find_all(
        self, collection, query=None, projection=None, sort=None, session=None
    ):
        self._check("find_all", collection)
        docs = [
            self._project(doc, projection)
            for doc in self.documents(collection)
            if _matches(doc, query or {})
        ]
        for key, direction in reversed(sort or []):
            docs.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return docs

    async def insert_one(self, collection, document, session=None):
        self._check("insert_one", collection)
        doc = copy.deepcopy(document)
        doc.setdefault("_id", ObjectId())
        self._check_unique(collection, doc)
        self.documents(collection).append(doc)
        return str(doc["_id"])

    async def update_one(self, collection, query, fields, session=None):
        self._check("update_one", collection)
        doc = self._find(collection, query)
        if doc is None:
            return False
        candidate = copy.deepcopy(doc)
        for path, value in fields.items():
            _set_path(candidate, path, copy.deepcopy(value))
        self._check_unique(collection, candidate, ignore=doc["_id"])
        doc.clear()
        doc.update(candidate)
        return True

    async def increment(self, collection, query, field, amount=1, session=None):
        self._check("increment", collection)
        doc = self._find(collection, query)
        if doc is None:
            return False
        doc[field] = doc.get(field, 0) + amount
        return True

    async def delete_one(self, collection, query, session=None):
        self._check("delete_one", collection)
        doc = self._find(collection, query)
        if doc is None:
            return False
        self.documents(collection).remove(doc)
        return True

    async def delete_all(self, collection, session=None):
        self._check("delete_all", collection)
        count = len(self.documents(collection))
        self.collections[collection] = []
        return count

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[FakeSession | None]:
        yield FakeSession() if self.use_transactions else None

    async def ping(self) -> bool:
        return self.healthy
