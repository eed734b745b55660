"""Product DTOs: the validation contract for the catalogue.

Framework-agnostic data transfer objects using Pydantic v2.  They are
the only place field rules live; the storage layer persists whatever a
validated DTO hands it.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
- ``ProductListQueryDTO``: query-string filters for the list operation.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

NAME_MAX_LENGTH = 200
CATEGORY_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 2000
QUERY_MAX_LENGTH = 200
PRICE_MAX = Decimal("999999999.99")

_CENTS = Decimal("0.01")


def _required_text(value: str, label: str, max_length: int) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} must not be empty.")
    if len(value) > max_length:
        raise ValueError(f"{label} must be at most {max_length} characters.")
    return value


def _description(value: str) -> str:
    if len(value) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(
            f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters."
        )
    return value


def _price(value: Decimal) -> Decimal:
    if not value.is_finite():
        raise ValueError("Price must be a finite number.")
    if value < 0:
        raise ValueError("Price cannot be negative.")
    if value > PRICE_MAX:
        raise ValueError(f"Price must not exceed {PRICE_MAX}.")
    return value.quantize(_CENTS)


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` and ``category`` are non-empty after trimming.
    - ``price``, when given, is finite and non-negative; stored with two
      decimal places.
    - ``description`` stays within its length limit.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    category: str
    price: Optional[Decimal] = None
    description: str = ""

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        return _required_text(v, "Name", NAME_MAX_LENGTH)

    @field_validator("category")
    @classmethod
    def category_must_not_be_empty(cls, v: str) -> str:
        return _required_text(v, "Category", CATEGORY_MAX_LENGTH)

    @field_validator("price")
    @classmethod
    def price_must_be_valid(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return None if v is None else _price(v)

    @field_validator("description")
    @classmethod
    def description_within_limit(cls, v: str) -> str:
        return _description(v)


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied, non-null fields are updated.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _required_text(v, "Name", NAME_MAX_LENGTH)

    @field_validator("category")
    @classmethod
    def category_must_not_be_empty(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _required_text(v, "Category", CATEGORY_MAX_LENGTH)

    @field_validator("price")
    @classmethod
    def price_must_be_valid(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return None if v is None else _price(v)

    @field_validator("description")
    @classmethod
    def description_within_limit(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _description(v)


class ProductListQueryDTO(BaseModel):
    """Filters accepted by the list operation.

    Blank values are treated as absent, so ``?category=`` lists everything.
    """

    model_config = ConfigDict(frozen=True)

    category: Optional[str] = None
    search: Optional[str] = None

    @field_validator("category", "search")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if len(v) > QUERY_MAX_LENGTH:
            raise ValueError(f"Must be at most {QUERY_MAX_LENGTH} characters.")
        return v

    def as_filters(self) -> dict:
        return self.model_dump(exclude_none=True)
