"""
Authentication middleware for Product Service.
"""

from .auth_middleware import (
    AuthenticatedUser,
    ProductServiceAuthMiddleware,
    seller_user,
    setup_product_auth_middleware,
)
from .identity import (
    CallerIdentity,
    HeaderIdentityResolver,
    IdentityResolver,
    JWTIdentityResolver,
    build_identity_resolver,
)

__all__ = [
    "ProductServiceAuthMiddleware",
    "AuthenticatedUser",
    "setup_product_auth_middleware",
    "seller_user",
    "CallerIdentity",
    "IdentityResolver",
    "HeaderIdentityResolver",
    "JWTIdentityResolver",
    "build_identity_resolver",
]
