"""Database engine, session factory and locking scopes for one cache file.

``CacheDatabase`` is the handle every store receives explicitly. It owns the
engine, the session factory and the reader/writer lock that serialises all
writers against each other and against readers.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sqlcache.core.exceptions import StorageFaultError
from sqlcache.core.logger import logger
from sqlcache.utils.rwlock import ReadWriteLock

MEMORY_DATABASE = ":memory:"


def _enable_wal(dbapi_connection, connection_record) -> None:  # pragma: no cover - driver glue
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
    finally:
        cursor.close()


def create_cache_engine(
    path: Union[str, Path, None] = None,
    *,
    echo: bool = False,
    wal_mode: bool = True,
) -> Engine:
    """Create a SQLite engine; ``None`` or ``":memory:"`` yields a private in-memory store."""
    # check_same_thread=False: sessions are opened on caller threads, the RW lock does the serialising.
    connect_args = {"check_same_thread": False}
    if path is None or str(path) == MEMORY_DATABASE:
        return create_engine(
            "sqlite://",
            connect_args=connect_args,
            poolclass=StaticPool,
            echo=echo,
        )

    db_path = Path(path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}", connect_args=connect_args, echo=echo)
    if wal_mode:
        event.listen(engine, "connect", _enable_wal)
    return engine


class CacheDatabase:
    """Injected store handle: engine + session factory + one reader/writer lock."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        # expire_on_commit=False: entries handed to callers stay readable after the session closes.
        self.SessionLocal = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
        )
        self.lock = ReadWriteLock()

    @contextmanager
    def reading(self, operation: str) -> Iterator[Session]:
        """Shared-lock scope with a short-lived session for queries."""
        with self.lock.read_locked():
            session = self.SessionLocal()
            try:
                with self._storage_errors(operation):
                    yield session
            finally:
                session.close()

    @contextmanager
    def writing(self, operation: str) -> Iterator[None]:
        """Exclusive-lock scope; every transaction opened inside is invisible to readers until it ends."""
        with self.lock.write_locked():
            with self._storage_errors(operation):
                yield

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """One commit/rollback boundary. Callers must already be inside ``writing()``.

        Raw SQLAlchemy errors propagate so the rename engine can react to
        uniqueness violations; ``writing()`` translates whatever escapes.
        """
        session = self.SessionLocal()
        try:
            with session.begin():
                yield session
        finally:
            session.close()

    @staticmethod
    @contextmanager
    def _storage_errors(operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error("%s failed: %s", operation, exc, extra={"operation": operation})
            raise StorageFaultError(f"{operation} failed: {exc}", operation=operation) from exc

    def dispose(self) -> None:
        self.engine.dispose()


def open_database(
    path: Union[str, Path, None] = None,
    *,
    echo: bool = False,
    wal_mode: bool = True,
) -> CacheDatabase:
    return CacheDatabase(create_cache_engine(path, echo=echo, wal_mode=wal_mode))
