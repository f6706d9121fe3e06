"""
Caller identity resolution for Product Service.

Two transports are supported and exactly one is active, chosen by the
``AUTH_MODE`` setting:

- ``header``: the API gateway forwards ``X-User-ID`` and ``X-User-Role``.
- ``jwt``: a bearer token from the ``Authorization`` header or the
  ``auth_token`` / ``access_token`` cookie is decoded locally.

Both produce the same ``CallerIdentity`` so the service layer never depends
on how the caller was identified.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from starlette.requests import Request

from ...core.setting import ProductSettings
from ...utils.jwt_handler import JWTHandler
from ...utils.logging import setup_product_logging

logger = setup_product_logging("product_service_identity")


@dataclass(frozen=True)
class CallerIdentity:
    user_id: str
    role: Optional[str] = None
    is_seller: bool = False
    source: str = "unknown"
    claims: Dict[str, Any] = field(default_factory=dict)


class IdentityResolver(ABC):
    """Extracts the caller identity from an inbound request."""

    def __init__(self, seller_role: str = "seller"):
        self.seller_role = seller_role.lower()

    def _has_seller_role(self, roles: List[str]) -> bool:
        return any(role.strip().lower() == self.seller_role for role in roles if role)

    @abstractmethod
    def resolve(self, request: Request) -> Optional[CallerIdentity]:
        """Return the caller identity or ``None`` for anonymous requests."""


class HeaderIdentityResolver(IdentityResolver):
    """Trusts identity headers set by the API gateway."""

    def __init__(
        self,
        user_id_header: str = "X-User-ID",
        role_header: str = "X-User-Role",
        seller_role: str = "seller",
    ):
        super().__init__(seller_role)
        self.user_id_header = user_id_header
        self.role_header = role_header

    def resolve(self, request: Request) -> Optional[CallerIdentity]:
        user_id = (request.headers.get(self.user_id_header) or "").strip()
        if not user_id:
            return None

        role = (request.headers.get(self.role_header) or "").strip() or None
        roles = [r for r in (role or "").split(",")]
        return CallerIdentity(
            user_id=user_id,
            role=role,
            is_seller=self._has_seller_role(roles),
            source="header",
        )


class JWTIdentityResolver(IdentityResolver):
    """Decodes a signed access token presented by the caller."""

    def __init__(self, jwt_handler: JWTHandler, seller_role: str = "seller"):
        super().__init__(seller_role)
        self.jwt_handler = jwt_handler

    def _extract_token(self, request: Request) -> Optional[str]:
        authorization = request.headers.get("Authorization") or ""
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()

        token = request.cookies.get("auth_token") or request.cookies.get(
            "access_token"
        )
        if not token or token.strip() in ("", "null", "undefined"):
            return None
        return token.strip()

    def resolve(self, request: Request) -> Optional[CallerIdentity]:
        token = self._extract_token(request)
        if token is None:
            return None

        try:
            token_data = self.jwt_handler.decode_token(token)
        except ValueError as e:
            logger.warning(
                f"JWT validation failed: {e}",
                extra={"path": request.url.path, "event_type": "auth_failed"},
            )
            return None

        return CallerIdentity(
            user_id=token_data.user_id,
            role=token_data.roles[0] if token_data.roles else None,
            is_seller=self._has_seller_role(token_data.roles),
            source="jwt",
            claims=token_data.model_dump(),
        )


def build_identity_resolver(settings: ProductSettings) -> IdentityResolver:
    """Create the resolver selected by ``AUTH_MODE``."""
    mode = settings.AUTH_MODE.strip().lower()
    if mode == "header":
        return HeaderIdentityResolver(
            user_id_header=settings.USER_ID_HEADER,
            role_header=settings.USER_ROLE_HEADER,
            seller_role=settings.SELLER_ROLE,
        )
    if mode == "jwt":
        return JWTIdentityResolver(
            JWTHandler(secret_key=settings.SECRET_KEY, algorithm=settings.ALGORITHM),
            seller_role=settings.SELLER_ROLE,
        )
    raise ValueError(f"Unsupported AUTH_MODE: {settings.AUTH_MODE!r}")
