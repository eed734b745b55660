"""Fixtures for API tests.

The views build their repository as ``ProductMongoRepository()``; the
``product_repository`` fixture swaps that name for an in-memory
implementation of ``IProductRepository`` so the full HTTP stack runs
without a MongoDB server.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository


class InMemoryProductRepository(IProductRepository):
    """Dict-backed repository following the Mongo repository's contract."""

    def __init__(self) -> None:
        self._documents: Dict[str, Dict[str, Any]] = {}
        self.failure: Optional[Exception] = None

    def _check(self) -> None:
        if self.failure is not None:
            raise self.failure

    def _product(self, id: str) -> Optional[Product]:
        document = self._documents.get(id)
        return Product.from_document(document) if document else None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        self._check()
        filters = filters or {}
        category = filters.get("category")
        search = (filters.get("search") or "").casefold()
        matches = []
        for document in reversed(list(self._documents.values())):
            if category and document["category"] != category:
                continue
            if search and not (
                search in document["name"].casefold()
                or search in document["description"].casefold()
            ):
                continue
            matches.append(Product.from_document(document))
        return matches

    def get_by_id(self, id: str) -> Optional[Product]:
        self._check()
        return self._product(id)

    def exists(self) -> bool:
        self._check()
        return bool(self._documents)

    def save(self, entity: Product) -> Product:
        self._check()
        now = datetime.now(timezone.utc)
        entity.id = str(ObjectId())
        entity.created_at = entity.updated_at = now
        self._documents[entity.id] = {"_id": entity.id, **entity.to_document()}
        return entity

    def update(self, id: str, changes: Dict[str, Any]) -> Optional[Product]:
        self._check()
        if id not in self._documents:
            return None
        self._documents[id].update(changes, updated_at=datetime.now(timezone.utc))
        return self._product(id)

    def delete(self, id: str) -> bool:
        self._check()
        return self._documents.pop(id, None) is not None


@pytest.fixture()
def product_repository(monkeypatch, connection):
    repository = InMemoryProductRepository()
    monkeypatch.setattr(
        "modules.products.views.ProductMongoRepository", lambda: repository
    )
    return repository
