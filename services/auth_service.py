"""
Auth service: register, login, logout and token authentication.

Stateless orchestrator over the credential store, the revocation store, the
password hasher and the token issuer/validator. It is built once at startup
(see build_auth_service) and holds no authoritative state of its own.

Logging rule: never log a password, a password hash or a token. Users are
referenced by id, tokens by token_fingerprint().
"""
from __future__ import annotations

import logging
from datetime import datetime

from models.db_storage import DBStorage
from models.user import User
from services.exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    MissingToken,
    TokenInvalid,
    ValidationError,
)
from stores.credential_store import CredentialStore, SqlAlchemyCredentialStore
from stores.revocation_store import RevocationStore, SqlAlchemyRevocationStore
from utils.security import (
    Clock,
    PasswordHasher,
    TokenClaims,
    TokenIssuer,
    TokenValidator,
    token_fingerprint,
    utc_now,
)

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        credentials: CredentialStore,
        revocations: RevocationStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        validator: TokenValidator,
        clock: Clock = utc_now,
    ):
        self.credentials = credentials
        self.revocations = revocations
        self.hasher = hasher
        self.issuer = issuer
        self.validator = validator
        self._clock = clock

    def register(self, email: str, password: str, name: str | None = None) -> User:
        """Create a user. The returned object must be serialized without its hash."""
        if not email:
            raise ValidationError("email is required")
        if not password:
            raise ValidationError("password must not be empty")

        if self.credentials.get_by_email(email) is not None:
            logger.info("registration rejected: email already registered")
            raise DuplicateEmail()

        now: datetime = self._clock()
        user = User(
            email=email,
            name=name,
            password_hash=self.hasher.hash(password),
            created_at=now,
            updated_at=now,
        )
        self.credentials.add(user)
        logger.info("registered user %s", user.id)
        return user

    def login(self, email: str, password: str) -> tuple[User, str]:
        user = self.credentials.get_by_email(email) if email else None
        if user is None:
            # spend the same hashing time as a real mismatch
            self.hasher.dummy_verify(password or "")
            logger.info("login failed: reason=not_found")
            raise InvalidCredentials(reason="not_found")

        if not self.hasher.verify(user.password_hash, password or ""):
            logger.info("login failed for user %s: reason=mismatch", user.id)
            raise InvalidCredentials(reason="mismatch")

        token = self.issuer.issue(user.email, user.id)
        logger.info("login succeeded for user %s (token %s)", user.id, token_fingerprint(token))
        return user, token

    def logout(self, token: str | None) -> None:
        """
        Revoke a token. The token is not validated first: revoking an
        expired or garbage token is harmless, and revoking twice is a no-op.
        """
        token = (token or "").strip()
        if not token:
            raise MissingToken()
        self.revocations.revoke(token, int(self._clock().timestamp()))
        logger.info("revoked token %s", token_fingerprint(token))

    def authenticate(self, token: str | None) -> TokenClaims:
        token = (token or "").strip()
        if not token:
            raise MissingToken()
        try:
            return self.validator.validate(token)
        except TokenInvalid as exc:
            logger.info("token %s rejected: reason=%s", token_fingerprint(token), exc.reason)
            raise

    def current_user(self, claims: TokenClaims) -> User:
        user = self.credentials.get_by_id(claims.user_id)
        if user is None:
            logger.info("token for unknown user %s rejected", claims.user_id)
            raise TokenInvalid(reason="unknown_user")
        return user


def build_auth_service(settings, storage: DBStorage, clock: Clock = utc_now) -> AuthService:
    """Wire the service from validated AuthSettings and an initialized DBStorage."""
    revocations = SqlAlchemyRevocationStore(storage, key_mode=settings.revocation_key_mode)
    return AuthService(
        credentials=SqlAlchemyCredentialStore(storage),
        revocations=revocations,
        hasher=PasswordHasher(
            time_cost=settings.hash_time_cost,
            memory_cost=settings.hash_memory_cost,
            parallelism=settings.hash_parallelism,
        ),
        issuer=TokenIssuer(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            lifetime=settings.token_lifetime,
            clock=clock,
        ),
        validator=TokenValidator(
            settings.jwt_secret,
            revocations,
            algorithm=settings.jwt_algorithm,
            clock=clock,
        ),
        clock=clock,
    )
