"""
Authentication middleware for Product Service.
Resolves the caller identity and exposes it on ``request.state``.
"""

from typing import Any, Awaitable, Callable, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ...core.setting import get_settings
from ...utils.logging import setup_product_logging
from .identity import CallerIdentity, IdentityResolver, build_identity_resolver

logger = setup_product_logging("product_service_auth")


class ProductServiceAuthMiddleware(BaseHTTPMiddleware):
    """
    Authentication middleware for Product Service.

    Catalog reads are public, so the middleware never rejects a request: it
    only records who the caller is. Route dependencies decide whether an
    identity (and which role) is required.
    """

    def __init__(
        self,
        app: Any,
        resolver: Optional[IdentityResolver] = None,
        exclude_paths: Optional[list[str]] = None,
    ):
        super().__init__(app)
        self.resolver = resolver or build_identity_resolver(get_settings())
        self.exclude_paths = exclude_paths or [
            "/health",
            "/docs",
            "/redoc",
            "/openapi.json",
        ]

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request.state.user_id = None
        request.state.user_role = None
        request.state.is_seller = False

        if self._should_skip_auth(request.url.path):
            return await call_next(request)

        identity = self.resolver.resolve(request)
        if identity is not None:
            request.state.user_id = identity.user_id
            request.state.user_role = identity.role
            request.state.is_seller = identity.is_seller

            logger.debug(
                "Request authenticated",
                extra={
                    "correlation_id": request.headers.get("X-Correlation-ID"),
                    "user_id": identity.user_id,
                    "user_role": identity.role,
                    "token_source": identity.source,
                    "path": request.url.path,
                    "method": request.method,
                    "event_type": "auth_success",
                },
            )

        return await call_next(request)

    def _should_skip_auth(self, path: str) -> bool:
        return any(path.startswith(exclude) for exclude in self.exclude_paths)


class AuthenticatedUser:
    """
    Dependency class for FastAPI route authentication.
    Returns the caller identity; ``require_seller`` enforces the seller role.
    """

    def __init__(self, require_seller: bool = False):
        self.require_seller = require_seller

    async def __call__(self, request: Request) -> CallerIdentity:
        user_id = getattr(request.state, "user_id", None)
        if not user_id:
            raise HTTPException(status_code=401, detail="Authentication required")

        is_seller = bool(getattr(request.state, "is_seller", False))
        if self.require_seller and not is_seller:
            logger.warning(
                "Seller role required",
                extra={
                    "user_id": user_id,
                    "user_role": getattr(request.state, "user_role", None),
                    "path": request.url.path,
                    "method": request.method,
                    "event_type": "role_check_failed",
                },
            )
            raise HTTPException(status_code=400, detail="Seller role required")

        return CallerIdentity(
            user_id=user_id,
            role=getattr(request.state, "user_role", None),
            is_seller=is_seller,
        )


def setup_product_auth_middleware(
    app: FastAPI,
    resolver: Optional[IdentityResolver] = None,
    exclude_paths: Optional[list[str]] = None,
) -> None:
    """
    Setup authentication middleware for Product Service.

    Args:
        app: FastAPI application instance
        resolver: Identity resolver, defaults to the one selected by AUTH_MODE
        exclude_paths: Paths that never carry an identity
    """
    app.add_middleware(
        ProductServiceAuthMiddleware,
        resolver=resolver,
        exclude_paths=exclude_paths,
    )
    logger.info(
        "Product Service authentication middleware configured",
        extra={
            "auth_mode": get_settings().AUTH_MODE,
            "custom_resolver": resolver is not None,
            "event_type": "auth_middleware_setup",
        },
    )


# Convenience instance for route dependencies
seller_user = AuthenticatedUser(require_seller=True)
