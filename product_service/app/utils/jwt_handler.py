"""
JWT Handler for Product Service

Decodes access tokens issued by the user service so callers can be
identified when the service runs in ``jwt`` auth mode.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from pydantic import BaseModel


class TokenData(BaseModel):
    """Token data model for decoded JWT tokens"""

    user_id: str
    email: str = ""
    username: str = ""
    roles: list[str] = []
    permissions: list[str] = []
    expires_at: datetime


class JWTHandler:
    """
    JWT token handler for encoding and decoding tokens.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def encode_token(
        self, payload: Dict[str, Any], expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Encode payload into JWT token.

        Args:
            payload: Token payload data
            expires_delta: Token expiration time (default: 30 minutes)

        Returns:
            Encoded JWT token string
        """
        to_encode = payload.copy()
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=30))

        to_encode.update({"exp": expire, "iat": now, "type": "access"})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> TokenData:
        """
        Decode and validate JWT token.

        Raises:
            ValueError: If token is invalid, expired, or malformed
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise ValueError("Token has expired")
        except JWTError as e:
            raise ValueError(f"Token validation failed: {e}")

        user_id = payload.get("user_id") or payload.get("sub")
        exp = payload.get("exp")
        if not user_id or not exp:
            raise ValueError("Invalid token payload: missing user_id or exp")

        roles = payload.get("roles") or []
        if isinstance(roles, str):
            roles = [roles]
        if not roles and payload.get("role"):
            roles = [payload["role"]]

        return TokenData(
            user_id=str(user_id),
            email=payload.get("email", ""),
            username=payload.get("username", ""),
            roles=[str(role) for role in roles],
            permissions=payload.get("permissions", []),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
