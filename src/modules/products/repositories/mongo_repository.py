"""MongoDB implementation of the Product repository.

Satisfies ``IProductRepository`` with one pymongo call per operation.
Error handling follows the Null Object pattern for missing entities
(``None`` / ``False``); driver failures are translated into storage
exceptions by ``translate_driver_errors``.

Every call is bounded by ``PRODUCTS_QUERY_TIMEOUT_MS``: reads through a
server-side ``maxTimeMS``, writes through a ``pymongo.timeout`` block.
A timeout of 0 leaves calls unbounded.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pymongo
import structlog
from bson import ObjectId
from bson.errors import InvalidId
from django.conf import settings
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from modules.core.database import get_connection, translate_driver_errors
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

LIST_SORT = [("created_at", DESCENDING), ("_id", DESCENDING)]


def _parse_object_id(id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(id)
    except (InvalidId, TypeError):
        return None


def _now() -> datetime:
    # MongoDB keeps millisecond precision; truncate so responses match reads.
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def build_list_query(filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Translate list filters into a MongoDB query document."""
    filters = filters or {}
    query: Dict[str, Any] = {}
    if filters.get("category"):
        query["category"] = filters["category"]
    if filters.get("search"):
        pattern = {"$regex": re.escape(filters["search"]), "$options": "i"}
        query["$or"] = [{"name": pattern}, {"description": pattern}]
    return query


class ProductMongoRepository(IProductRepository):
    """Concrete Product repository backed by a pymongo collection."""

    def __init__(
        self,
        collection: Optional[Collection] = None,
        timeout_ms: Optional[int] = None,
    ) -> None:
        self._collection = collection
        if timeout_ms is None:
            timeout_ms = settings.PRODUCTS_QUERY_TIMEOUT_MS
        self._timeout_ms = timeout_ms

    @property
    def collection(self) -> Collection:
        if self._collection is None:
            self._collection = get_connection().collection(settings.PRODUCTS_COLLECTION)
        return self._collection

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        query = build_list_query(filters)
        with translate_driver_errors("products.list", filters=filters or {}):
            cursor = self.collection.find(query).sort(LIST_SORT).max_time_ms(self._timeout_ms)
            return [Product.from_document(document) for document in cursor]

    def get_by_id(self, id: str) -> Optional[Product]:
        """Returns ``None`` for non-existent or malformed IDs."""
        object_id = _parse_object_id(id)
        if object_id is None:
            return None
        with translate_driver_errors("products.get", product_id=id):
            document = self.collection.find_one(
                {"_id": object_id}, max_time_ms=self._timeout_ms
            )
        return Product.from_document(document) if document else None

    def exists(self) -> bool:
        """``True`` when at least one product is stored; counts at most one."""
        with translate_driver_errors("products.exists"):
            count = self.collection.count_documents({}, limit=1, maxTimeMS=self._timeout_ms)
        return count > 0

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def save(self, entity: Product) -> Product:
        """Insert a new product, or apply its fields to an existing one."""
        if entity.id is not None:
            updated = self.update(entity.id, entity.to_document())
            return updated if updated is not None else entity

        now = _now()
        entity.created_at = now
        entity.updated_at = now
        with translate_driver_errors("products.insert"), pymongo.timeout(self._timeout_s):
            result = self.collection.insert_one(entity.to_document())
        entity.id = str(result.inserted_id)
        logger.info("product.saved", product_id=entity.id)
        return entity

    def update(self, id: str, changes: Dict[str, Any]) -> Optional[Product]:
        object_id = _parse_object_id(id)
        if object_id is None:
            return None
        changes = {k: v for k, v in changes.items() if k not in ("_id", "created_at")}
        changes["updated_at"] = _now()
        with translate_driver_errors("products.update", product_id=id), pymongo.timeout(
            self._timeout_s
        ):
            document = self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        return Product.from_document(document) if document else None

    def delete(self, id: str) -> bool:
        """Hard-delete a product; ``False`` if nothing matched."""
        object_id = _parse_object_id(id)
        if object_id is None:
            return False
        with translate_driver_errors("products.delete", product_id=id), pymongo.timeout(
            self._timeout_s
        ):
            document = self.collection.find_one_and_delete({"_id": object_id})
        return document is not None

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def ensure_indexes(self) -> List[str]:
        """Create the indexes backing the default ordering and category filter."""
        with translate_driver_errors("products.ensure_indexes"):
            return [
                self.collection.create_index(LIST_SORT, name="products_created_at_desc"),
                self.collection.create_index("category", name="products_category"),
            ]

    @property
    def _timeout_s(self) -> Optional[float]:
        # 0 disables the bound, matching maxTimeMS=0 on reads.
        return self._timeout_ms / 1000 if self._timeout_ms else None
