import logging
import math

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from models.base_model import Base
from models.user import User
from models.blacklisted_token import BlacklistedToken

logger = logging.getLogger(__name__)

# Map model names for easy querying
classes = {
    "User": User,
    "BlacklistedToken": BlacklistedToken,
}


def engine_options(database_url: str, timeout: float) -> dict:
    """
    Build create_engine() keyword arguments so that no store call can wait
    longer than `timeout` seconds on a lock, a connection or a statement.
    """
    url = make_url(database_url)
    backend = url.get_backend_name()

    if backend == "sqlite":
        options = {"connect_args": {"timeout": timeout, "check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # one shared connection, otherwise each checkout sees an empty db
            options["poolclass"] = StaticPool
        else:
            # file databases get a QueuePool; bound its checkout wait too
            options["pool_timeout"] = timeout
        return options

    options = {"pool_pre_ping": True, "pool_timeout": timeout}
    if backend == "postgresql":
        options["connect_args"] = {
            "connect_timeout": max(1, math.ceil(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
    elif backend in ("mysql", "mariadb"):
        options["connect_args"] = {
            "connect_timeout": max(1, math.ceil(timeout)),
            "read_timeout": max(1, math.ceil(timeout)),
            "write_timeout": max(1, math.ceil(timeout)),
        }
    return options


class DBStorage:
    __engine = None
    __session = None

    def __init__(self, database_url: str, timeout: float = 5.0, echo: bool = False):
        """Initialize the engine for the configured store"""
        # bound parameters include emails and tokens; keep them out of errors and logs
        self.__engine = create_engine(
            database_url, echo=echo, hide_parameters=True, **engine_options(database_url, timeout)
        )
        if self.__engine.url.get_backend_name() == "sqlite":
            @event.listens_for(self.__engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    @property
    def engine(self):
        return self.__engine

    def reload(self):
        """Create tables and start session"""
        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def new(self, obj):
        """Add object to session"""
        self.__session.add(obj)

    def save(self):
        """Commit session"""
        try:
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise

    def rollback(self):
        self.__session.rollback()

    def get(self, cls, id):
        """Fetch one object by class and ID"""
        if cls in classes.values():
            return self.__session.get(cls, id)
        return None

    def ping(self) -> bool:
        """Round-trip to the store; used by the health check."""
        try:
            self.__session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("store ping failed", exc_info=True)
            self.__session.rollback()
            return False

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    def dispose(self):
        """Release every pooled connection (process shutdown)."""
        self.close()
        self.__engine.dispose()

    # expose the SQLAlchemy session for advanced querying (joins, filters, etc.)
    def get_session(self):
        return self.__session
