from .base import ProductServiceBase, ProductServiceBaseModel, generate_product_id
from .product import Product

"""Product Service Models"""

__all__ = [
    "ProductServiceBase",
    "ProductServiceBaseModel",
    "Product",
    "generate_product_id",
]
