"""
Token Service

Issues and verifies stateless session tokens (JWT, HMAC-signed).

A token embeds ``{id, username, iat, exp}`` with ``exp = iat + ttl``. It is
valid strictly before ``exp``; from ``exp`` onwards, or when the signature,
algorithm or claims do not check out, ``verify`` raises ``AuthError``. There is
no server-side session store and no revocation.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from jose import JWTError, jwt

from ordering_api.core.exceptions import AuthError

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


@dataclass(frozen=True)
class Identity:
    """
    Authenticated customer as seen by request handlers.

    ``issued_at``/``expires_at`` are set only for identities decoded from a token.
    """
    id: int
    username: str
    issued_at: Optional[int] = None
    expires_at: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        """Token claim representation."""
        data: dict[str, Any] = {"id": self.id, "username": self.username}
        if self.issued_at is not None:
            data["iat"] = self.issued_at
        if self.expires_at is not None:
            data["exp"] = self.expires_at
        return data


class TokenService:
    """
    Signs and verifies session tokens with a process-wide secret.

    Attributes:
        secret_key: HMAC signing key
        algorithm: JWT algorithm (HS256 by default)
        ttl_seconds: Token lifetime
        clock: Returns the current UNIX time; injectable for tests
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        if not secret_key:
            raise ValueError("A signing secret is required")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def issue(self, identity: Identity) -> str:
        """
        Create a signed token for an authenticated customer.

        Args:
            identity: Customer id and username to embed

        Returns:
            str: Encoded JWT
        """
        issued_at = int(self.clock())
        claims = {
            "id": identity.id,
            "username": identity.username,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> Identity:
        """
        Decode a token and return the identity it carries.

        Raises:
            AuthError: Malformed, tampered, wrongly signed or expired token
        """
        if not token:
            raise AuthError("Access token missing")

        try:
            # Expiry is checked below against our own clock, exclusive at exp
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.debug(f"Token rejected: {e}")
            raise AuthError()

        try:
            customer_id = int(claims["id"])
            username = str(claims["username"])
            issued_at = int(claims["iat"])
            expires_at = int(claims["exp"])
        except (KeyError, TypeError, ValueError):
            logger.debug("Token rejected: missing or malformed claims")
            raise AuthError()

        if self.clock() >= expires_at:
            raise AuthError()

        return Identity(
            id=customer_id,
            username=username,
            issued_at=issued_at,
            expires_at=expires_at,
        )
