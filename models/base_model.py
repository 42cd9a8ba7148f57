#!/usr/bin/env python3
"""
Shared SQLAlchemy base for the auth core models.

- UUID primary key (String(36)) assigned in Python at construction
- created_at / updated_at timestamps

Persistence goes through the stores in stores/, not through the model:
models carry no reference to a global session. API serialization is done
by the marshmallow schemas in models/schemas/, which never declare
password fields.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


class BaseModel:
    """
    Base mixin for persistent models with an identifier and timestamps.

    Timestamps fall back to the database clock when the caller does not
    set them; the auth service sets both explicitly so they share the
    creation instant.
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __init__(self, *args, **kwargs):
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        # The identifier exists from construction on and is never reassigned
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def __str__(self) -> str:
        return f"[{self.__class__.__name__}] ({self.id})"
