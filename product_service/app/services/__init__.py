"""Service layer for Product Service"""

from .product_service import ProductService

__all__ = [
    "ProductService",
]
