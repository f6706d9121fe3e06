"""Repository layer for Product Service"""

from .product_repository import ProductRepository
from .specifications import Page, PageRequest, ProductQuery

__all__ = [
    "ProductRepository",
    "ProductQuery",
    "PageRequest",
    "Page",
]
