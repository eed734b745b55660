"""Product service layer (Use Cases).

Orchestrates the catalogue use cases, delegating persistence to the
injected ``IProductRepository``.  Input arrives already validated as
DTOs; this layer decides what "not found" means and logs each change.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog

from modules.products.exceptions import ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import (
        CreateProductDTO,
        ProductListQueryDTO,
        UpdateProductDTO,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = ("name", "description", "category", "price")


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, dto: CreateProductDTO) -> Product:
        product = Product(
            name=dto.name,
            description=dto.description,
            category=dto.category,
            price=dto.price,
        )
        product = self._repo.save(product)
        logger.info("product.created", product_id=product.id, category=product.category)
        return product

    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Apply the supplied fields of ``dto`` to an existing product.

        An update without any field returns the product unchanged.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        changes: Dict[str, Any] = {}
        for field in UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                changes[field] = value

        if not changes:
            return self.get_product(id)

        product = self._repo.update(id, changes)
        if product is None:
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.updated", product_id=id, fields=sorted(changes))
        return product

    def delete_product(self, id: str) -> None:
        """Raises ``ProductNotFound`` if the product does not exist."""
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.deleted", product_id=id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, query: Optional[ProductListQueryDTO] = None) -> List[Product]:
        """Return products newest first, optionally filtered."""
        filters = query.as_filters() if query is not None else None
        return self._repo.list(filters)

    def has_products(self) -> bool:
        return self._repo.exists()

    def get_product(self, id: str) -> Product:
        product = self._repo.get_by_id(id)
        if product is None:
            raise ProductNotFound(f"Product {id} not found.")
        return product
