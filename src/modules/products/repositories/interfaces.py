"""Product repository interface.

Extends ``IRepository[Product]`` with the atomic partial update the
update use case needs.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate.

    Implementations raise ``StorageUnavailable`` / ``StorageError`` on
    infrastructure failures and return ``None`` / ``False`` for identifiers
    that match nothing, malformed identifiers included.
    """

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List products, newest first.

        Supported filters: ``category`` (exact) and ``search``
        (case-insensitive substring of name or description).
        """

    @abstractmethod
    def exists(self) -> bool:
        """Whether any product is stored, without loading the catalogue."""

    @abstractmethod
    def update(self, id: str, changes: Dict[str, Any]) -> Optional[Product]:
        """Atomically set ``changes`` on a product and return the result."""
