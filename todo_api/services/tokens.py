"""Issuing and verifying signed session tokens."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from jose import JWTError, jwt

from todo_api.config import Settings


class TokenFailure(str, Enum):
    """Why a token was rejected."""

    MALFORMED = "MALFORMED"
    SIGNATURE_INVALID = "SIGNATURE_INVALID"
    EXPIRED = "EXPIRED"


class TokenError(Exception):
    """Raised when a token cannot be trusted."""

    def __init__(self, reason: TokenFailure):
        self.reason = reason
        super().__init__(reason.value)


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims carried by a session token."""

    user_id: str
    issued_at: int
    expires_at: int


class TokenService:
    """Mints and validates HMAC-signed JWTs with a fixed lifetime.

    The clock returns seconds since the epoch and is injectable so tests can
    move time forward without sleeping.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], float] = time.time,
    ):
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(minutes=settings.jwt_expiration_minutes),
        )

    def issue(self, user_id: str) -> str:
        """Create a token whose subject is the given user id."""
        issued_at = int(self.clock())
        claims = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + int(self.ttl.total_seconds()),
        }
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Return the token's claims, or raise TokenError."""
        try:
            unverified = jwt.get_unverified_claims(token)
        except JWTError as e:
            raise TokenError(TokenFailure.MALFORMED) from e

        subject = unverified.get("sub")
        issued_at = unverified.get("iat")
        expires_at = unverified.get("exp")
        if not isinstance(subject, str) or not subject:
            raise TokenError(TokenFailure.MALFORMED)
        if not isinstance(issued_at, int) or not isinstance(expires_at, int):
            raise TokenError(TokenFailure.MALFORMED)

        # Expiry is checked below against our own clock.
        try:
            jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False, "verify_nbf": False},
            )
        except JWTError as e:
            raise TokenError(TokenFailure.SIGNATURE_INVALID) from e

        if self.clock() >= expires_at:
            raise TokenError(TokenFailure.EXPIRED)

        return TokenClaims(user_id=subject, issued_at=issued_at, expires_at=expires_at)
