"""Database engine ownership and session management."""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .exceptions import ConflictError, StorageError

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Enable foreign key support for SQLite."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _translate_integrity_error(exc: IntegrityError) -> StorageError:
    message = str(exc.orig).lower()
    if "foreign key" in message:
        return StorageError(StorageError.FOREIGN_KEY, detail=str(exc.orig))
    if "unique" in message or "duplicate" in message:
        field = "value"
        if "email" in message:
            field = "email"
        return ConflictError(field, detail=str(exc.orig))
    return StorageError(StorageError.CONNECTION, detail=str(exc.orig))


class Database:
    """Owns the engine and session factory for one database.

    Constructed once at application startup and disposed at shutdown; the
    storage layer receives it explicitly instead of importing a global engine.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        if url.startswith("sqlite"):
            # In-memory SQLite needs a single shared connection
            self.engine = create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_engine(
                url,
                pool_pre_ping=True,
                pool_recycle=300,
                echo=echo,
            )
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session that commits on success and always closes.

        SQLAlchemy errors are rolled back and re-raised as ``StorageError``.
        """
        db = self.session_factory()
        try:
            yield db
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise _translate_integrity_error(exc) from exc
        except (DBAPIError, SQLAlchemyError) as exc:
            db.rollback()
            logger.error(f"Database operation failed: {exc}")
            raise StorageError(StorageError.CONNECTION, detail=str(exc)) from exc
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.warning(f"Database ping failed: {exc}")
            return False

    def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        # Make sure every model is registered on Base.metadata
        from .. import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        from .. import models  # noqa: F401

        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        """Close database connections."""
        self.engine.dispose()
