"""Query specification and paging primitives for the product repository.

A listing request is described once by ``ProductQuery`` (optional owner scope,
optional name search, optional inclusive price range) and translated into SQLAlchemy
``WHERE`` clauses, so every filter combination is pushed down to the store as
a single statement.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

from sqlalchemy import ColumnElement, UnaryExpression

from ..core.exceptions import ProductValidationError
from ..models.product import Product

T = TypeVar("T")

SORTABLE_FIELDS: Dict[str, Any] = {
    "id": Product.id,
    "name": Product.name,
    "description": Product.description,
    "price": Product.price,
    "quantity": Product.quantity,
    "ownerId": Product.owner_id,
    "owner_id": Product.owner_id,
}


@dataclass(frozen=True)
class ProductQuery:
    owner_id: Optional[str] = None
    search: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None

    @property
    def search_text(self) -> Optional[str]:
        if self.search is None or not self.search.strip():
            return None
        return self.search

    @property
    def has_price_range(self) -> bool:
        return self.min_price is not None and self.max_price is not None

    def conditions(self) -> List[ColumnElement[bool]]:
        """Translate the specification into SQLAlchemy filter clauses."""
        clauses: List[ColumnElement[bool]] = []
        if self.owner_id is not None:
            clauses.append(Product.owner_id == self.owner_id)
        if self.search_text is not None:
            clauses.append(Product.name.icontains(self.search_text, autoescape=True))
        # a lone bound is ignored; the range applies only when both are given
        if self.has_price_range:
            clauses.append(Product.price.between(self.min_price, self.max_price))
        return clauses


@dataclass(frozen=True)
class PageRequest:
    page: int = 0
    size: int = 10
    sort_by: str = "name"
    sort_dir: str = "asc"

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ProductValidationError("Page index must not be less than zero")
        if self.size < 1:
            raise ProductValidationError("Page size must not be less than one")
        if self.sort_by not in SORTABLE_FIELDS:
            raise ProductValidationError(f"Cannot sort products by '{self.sort_by}'")

    @property
    def descending(self) -> bool:
        return (self.sort_dir or "").strip().lower() == "desc"

    @property
    def offset(self) -> int:
        return self.page * self.size

    def order_by(self) -> List[UnaryExpression[Any]]:
        column = SORTABLE_FIELDS[self.sort_by]
        primary = column.desc() if self.descending else column.asc()
        # id breaks ties so that consecutive pages never overlap
        return [primary, Product.id.asc()]


@dataclass
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0

    @property
    def is_last(self) -> bool:
        return self.page + 1 >= self.total_pages
