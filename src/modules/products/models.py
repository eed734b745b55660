"""Product entity and its document mapping.

Products are stored as MongoDB documents in the ``products`` collection::

    {
        "_id": ObjectId,
        "name": str,
        "description": str,
        "category": str,
        "price": Decimal128 (absent when no price was given),
        "created_at": datetime (UTC),
        "updated_at": datetime (UTC),
    }

``id`` is the hex form of ``_id``; it is ``None`` until the product has
been persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

DOCUMENT_FIELDS = ("name", "description", "category", "price", "created_at", "updated_at")


@dataclass
class Product:
    name: str
    category: str
    price: Optional[Decimal] = None
    description: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> Product:
        price = document.get("price")
        if price is not None and not isinstance(price, Decimal):
            price = Decimal(str(price))
        return cls(
            id=str(document["_id"]),
            name=document.get("name", ""),
            description=document.get("description", ""),
            category=document.get("category", ""),
            price=price,
            created_at=document.get("created_at"),
            updated_at=document.get("updated_at"),
        )

    def to_document(self) -> Dict[str, Any]:
        """Document body without ``_id``; unset price and timestamps are left out."""
        document = {name: getattr(self, name) for name in DOCUMENT_FIELDS}
        return {key: value for key, value in document.items() if value is not None}

    def __str__(self) -> str:
        return f"{self.name} ({self.category})"
