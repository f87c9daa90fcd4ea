"""Database connection and session management"""
import logging
from typing import Generator, Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from csvreview.config import DATABASE_URL
from csvreview.errors import StorageUnavailable

logger = logging.getLogger(__name__)


# Use DeclarativeBase for SQLAlchemy 2.0 compatibility
class Base(DeclarativeBase):
    pass


class Database:
    """
    Owns the engine, the session factory and the readiness state.

    One instance is built per application and attached to ``app.state``.
    Until ``connect()`` succeeds the instance reports ``ready = False`` and
    request handlers get ``StorageUnavailable`` instead of a session.
    """

    def __init__(self, url: str = DATABASE_URL):
        self.url = url
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self.ready = False

    def connect(self) -> bool:
        """
        Create the engine and tables and verify connectivity.

        Returns:
            True if the database is ready, False if connecting failed
        """
        if self.ready:
            return True

        # Import all models to ensure they're registered with SQLAlchemy
        from csvreview import models  # noqa: F401

        engine = create_engine(
            self.url,
            connect_args={"check_same_thread": False} if self.url.startswith("sqlite") else {},
            pool_pre_ping=True,  # Verify connections before using
            echo=False,  # Set to True for SQL query logging
        )
        try:
            # Create database tables (only creates if they don't exist)
            Base.metadata.create_all(bind=engine)
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("Failed to connect to database: %s", e)
            engine.dispose()
            return False

        self.engine = engine
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        self.ready = True
        logger.info("Connected to database (%s)", engine.url.render_as_string(hide_password=True))
        return True

    def session(self) -> Session:
        if not self.ready or self._session_factory is None:
            raise StorageUnavailable()
        return self._session_factory()

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self._session_factory = None
        self.ready = False


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency to get database session"""
    database = get_database(request)
    if not database.ready and not database.connect():
        raise StorageUnavailable()

    db = database.session()
    try:
        yield db
    finally:
        db.close()
