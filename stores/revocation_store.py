"""
Revocation store: the denylist consulted on every authenticated request.

Two key modes:
- "token": the raw token string is the row key
- "digest": only "sha256:<hex>" of the token is kept, so no bearer
  material sits at rest
"""
from __future__ import annotations

import hashlib
from typing import Protocol

from sqlalchemy.exc import IntegrityError

from models.blacklisted_token import BlacklistedToken
from models.db_storage import DBStorage
from stores.base import store_call

KEY_MODES = ("token", "digest")


def token_digest(token: str) -> str:
    return "sha256:" + hashlib.sha256(token.encode("utf-8")).hexdigest()


class RevocationStore(Protocol):
    def revoke(self, token: str, revoked_at: int) -> None: ...

    def is_revoked(self, token: str) -> bool: ...


class SqlAlchemyRevocationStore:
    def __init__(self, storage: DBStorage, key_mode: str = "token"):
        if key_mode not in KEY_MODES:
            raise ValueError(f"Unsupported revocation key mode: {key_mode}")
        self._storage = storage
        self.key_mode = key_mode

    def _key(self, token: str) -> str:
        return token_digest(token) if self.key_mode == "digest" else token

    def revoke(self, token: str, revoked_at: int) -> None:
        """Insert the token; a token that is already present is left as is."""
        key = self._key(token)
        with store_call(self._storage, "blacklisted_tokens.revoke"):
            session = self._storage.get_session()
            if session.get(BlacklistedToken, key) is not None:
                return
            self._storage.new(BlacklistedToken(token=key, revoked_at=revoked_at))
            try:
                self._storage.save()
            except IntegrityError:
                # a concurrent logout inserted the same token first
                return

    def is_revoked(self, token: str) -> bool:
        with store_call(self._storage, "blacklisted_tokens.is_revoked"):
            session = self._storage.get_session()
            return session.get(BlacklistedToken, self._key(token)) is not None
