"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT session tokens via PyJWT (HS256, 24h lifetime)
- Token validation: signature, then expiry, then the revocation store

Nothing here reads Flask config: every collaborator is built once at
startup from AuthSettings and handed its secret and parameters.
"""
from __future__ import annotations

import hashlib
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt
from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

from services.exceptions import (
    InternalError,
    InvalidSignature,
    MalformedHash,
    TokenExpired,
    TokenRevoked,
)
from stores.revocation_store import RevocationStore

Clock = Callable[[], datetime]

DEFAULT_TOKEN_LIFETIME = timedelta(hours=24)
REQUIRED_CLAIMS = ("email", "user_id", "exp")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def token_fingerprint(token: str) -> str:
    """Short, non-reversible handle for a token, safe to log."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]


class PasswordHasher:
    """
    One-way password hashing with a tunable work factor.

    Parameters left as None fall back to argon2-cffi's defaults, which are
    deliberately expensive.
    """

    def __init__(self, time_cost: int | None = None, memory_cost: int | None = None,
                 parallelism: int | None = None):
        params = {
            "time_cost": time_cost,
            "memory_cost": memory_cost,
            "parallelism": parallelism,
        }
        self._ph = Argon2Hasher(**{k: v for k, v in params.items() if v is not None})
        # verified against when the email is unknown, so that path costs the same
        self._dummy_hash = self._ph.hash("timing-equalization-dummy")

    def hash(self, plaintext: str) -> str:
        """Hash a plaintext password using Argon2"""
        try:
            return self._ph.hash(plaintext)
        except HashingError as exc:
            raise InternalError(reason="hashing_failed") from exc

    def verify(self, password_hash: str, plaintext: str) -> bool:
        """
        True if plaintext matches. A mismatch is False, not an error; only a
        structurally broken hash raises MalformedHash.
        """
        try:
            return self._ph.verify(password_hash, plaintext)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError) as exc:
            raise MalformedHash(reason="invalid_hash") from exc

    def dummy_verify(self, plaintext: str) -> None:
        self.verify(self._dummy_hash, plaintext)


@dataclass(frozen=True)
class TokenClaims:
    email: str
    user_id: str
    expires_at: datetime

    def to_dict(self) -> dict:
        return {"email": self.email, "user_id": self.user_id}


class TokenIssuer:
    def __init__(self, secret: str, algorithm: str = "HS256",
                 lifetime: timedelta = DEFAULT_TOKEN_LIFETIME, clock: Clock = utc_now):
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self._algorithm = algorithm
        self._lifetime = lifetime
        self._clock = clock

    def issue(self, email: str, user_id: str) -> str:
        """Sign a token binding email and user id, valid for the configured lifetime."""
        now = self._clock()
        payload = {
            "email": email,
            "user_id": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self._lifetime).timestamp()),
            "jti": uuid.uuid4().hex,
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=self._algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise InternalError(reason="signing_failed") from exc


class TokenValidator:
    def __init__(self, secret: str, revocation_store: RevocationStore,
                 algorithm: str = "HS256", clock: Clock = utc_now):
        self._secret = secret
        self._algorithm = algorithm
        self._revocations = revocation_store
        self._clock = clock

    def _decode(self, token: str) -> dict:
        # expiry is checked against our own clock, after the signature holds
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": list(REQUIRED_CLAIMS),
                },
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidSignature(reason=exc.__class__.__name__) from exc

    def validate(self, token: str) -> TokenClaims:
        """
        Decode and validate a session token.
        Raises InvalidSignature, TokenExpired or TokenRevoked (all TokenInvalid).
        """
        decoded = self._decode(token)

        email, user_id, exp = decoded.get("email"), decoded.get("user_id"), decoded.get("exp")
        if not isinstance(email, str) or not isinstance(user_id, str) or not isinstance(exp, (int, float)):
            raise InvalidSignature(reason="malformed_claims")

        if self._clock().timestamp() >= exp:
            raise TokenExpired(reason="expired")

        if self._revocations.is_revoked(token):
            raise TokenRevoked(reason="revoked")

        return TokenClaims(
            email=email,
            user_id=user_id,
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
