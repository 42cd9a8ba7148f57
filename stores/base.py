from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError

from models.db_storage import DBStorage
from services.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)


@contextmanager
def store_call(storage: DBStorage, operation: str) -> Iterator[None]:
    """
    Run one store operation; any SQLAlchemy failure that reaches here
    (timeout, lost connection, lock wait) is rolled back and raised as
    StoreUnavailable. Integrity errors must be handled inside the block.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("store operation %s failed: %s", operation, exc.__class__.__name__)
        try:
            storage.rollback()
        except SQLAlchemyError:
            logger.debug("rollback after failed %s also failed", operation)
        raise StoreUnavailable(reason=operation) from exc
