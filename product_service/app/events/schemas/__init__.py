"""
Product service event schemas.
"""

from .event_schemas import PRODUCT_DELETED, ProductDeletedEventData, ProductEventData

__all__ = [
    "PRODUCT_DELETED",
    "ProductEventData",
    "ProductDeletedEventData",
]
