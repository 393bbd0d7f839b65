"""
JWT token service - Implements TokenService protocol.

HMAC-SHA256 (HS256) bearer tokens carrying the user id in ``sub``.
Validation is stateless: signature and expiry only, no database lookup.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from jwt.exceptions import InvalidTokenError

from campus_events.domain.exceptions import AuthenticationRequired


class JWTTokenService:
    """
    Implements TokenService protocol using PyJWT.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, secret_key: str, expiration_minutes: int = 300) -> None:
        """
        Initialize token service.

        Args:
            secret_key: HMAC signing key, at least 32 bytes
            expiration_minutes: Token lifetime

        Raises:
            ValueError: If the secret key is shorter than 32 bytes
        """
        if len(secret_key) < 32:
            msg = "JWT secret key must be at least 32 bytes (256 bits)"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._expiration_minutes = expiration_minutes
        self._algorithm = "HS256"

    def issue(self, user_id: UUID) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=self._expiration_minutes)).timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def resolve(self, token: str) -> UUID:
        """
        Verify signature and expiry, then return the subject.

        Raises:
            AuthenticationRequired: If the token is invalid, expired or has no usable subject
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
            return UUID(payload["sub"])
        except (InvalidTokenError, ValueError, TypeError) as e:
            raise AuthenticationRequired() from e
