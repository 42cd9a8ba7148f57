from __future__ import annotations

from typing import Protocol

from sqlalchemy.exc import IntegrityError

from models.db_storage import DBStorage
from models.user import User
from services.exceptions import DuplicateEmail
from stores.base import store_call


class CredentialStore(Protocol):
    def get_by_email(self, email: str) -> User | None: ...

    def get_by_id(self, user_id: str) -> User | None: ...

    def add(self, user: User) -> User: ...


class SqlAlchemyCredentialStore:
    """User records kept in the `users` table."""

    def __init__(self, storage: DBStorage):
        self._storage = storage

    def get_by_email(self, email: str) -> User | None:
        with store_call(self._storage, "users.get_by_email"):
            session = self._storage.get_session()
            return session.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: str) -> User | None:
        with store_call(self._storage, "users.get_by_id"):
            return self._storage.get(User, user_id)

    def add(self, user: User) -> User:
        with store_call(self._storage, "users.add"):
            self._storage.new(user)
            try:
                self._storage.save()
            except IntegrityError as exc:
                # unique index on email lost the race to another insert
                raise DuplicateEmail(reason="unique_violation") from exc
        return user
