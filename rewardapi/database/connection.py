import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from rewardapi.config import Settings
from rewardapi.core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


def normalize_database_url(raw_url: str) -> str:
    url = (raw_url or "").strip()
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://") :]
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg2://", 1)
    return url


def create_db_engine(settings: Settings) -> Engine:
    url = normalize_database_url(settings.DATABASE_URL)

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=settings.DEBUG,
            connect_args={
                "check_same_thread": False,
                # seconds to wait on a locked database before raising
                "timeout": settings.DB_CONNECT_TIMEOUT_SECONDS,
            },
        )

        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            # let SQLAlchemy emit BEGIN itself so SAVEPOINT nests correctly
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _on_begin(conn):
            # take the write lock up front: one writer at a time, waiters use the busy timeout
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT_SECONDS,
        pool_pre_ping=True,
        pool_recycle=3600,
        echo=settings.DEBUG,
        connect_args={
            "connect_timeout": settings.DB_CONNECT_TIMEOUT_SECONDS,
            "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
        },
    )


class Database:
    """Process-wide store handle, opened at startup and disposed at shutdown.

    Services receive it through the container and open one unit of work per
    operation with ``session()``.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        # expire_on_commit=False keeps loaded rows readable after commit
        self.session_factory = sessionmaker(
            bind=engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(create_db_engine(settings))

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Unit of work: commit on success, roll back on any exception.

        Driver and constraint failures that reach this point are reported as
        ``StoreUnavailableError``; domain errors raised by services pass
        through unchanged.
        """
        db = self.session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Store operation failed, transaction rolled back: {str(e)}")
            raise StoreUnavailableError() from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")


def init_database(settings: Settings) -> Iterator[Database]:
    """dependency-injector Resource: yields the store handle, disposes on shutdown."""
    database = Database.from_settings(settings)
    if settings.AUTO_MIGRATE:
        from rewardapi.database.migrations import upgrade_to_head

        upgrade_to_head(database.engine)
    logger.info("Database ready (%s)", database.engine.url.render_as_string(hide_password=True))
    try:
        yield database
    finally:
        database.dispose()
