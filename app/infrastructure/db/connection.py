import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Generator

from sqlmodel import create_engine, Session, SQLModel, select
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from ...core.config import get_settings
from ...core.exceptions import AppException, DatabaseError

logger = logging.getLogger(__name__)

# Import all models here to ensure they're registered with SQLModel.metadata
from . import models  # noqa: E402,F401


def _enable_sqlite_savepoints(engine: Engine) -> None:
    # pysqlite defers BEGIN on its own; emit it here so SAVEPOINTs nest in one transaction
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


class DatabaseManager:
    """
    Database connection manager owning the engine and session lifecycle.
    """

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        settings = get_settings()
        self.url = url or settings.database.url
        self.echo = settings.database.echo if echo is None else echo
        self._engine: Optional[Engine] = None

    def _get_database_config(self) -> dict:
        """Get database configuration based on URL."""
        config = {"echo": self.echo, "pool_pre_ping": True}

        if self.url.startswith("sqlite"):
            config["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.url or self.url == "sqlite://":
                config["poolclass"] = StaticPool

        return config

    def get_engine(self) -> Engine:
        """Get or create database engine."""
        if self._engine is None:
            try:
                self._engine = create_engine(self.url, **self._get_database_config())
                if self.url.startswith("sqlite"):
                    _enable_sqlite_savepoints(self._engine)
                logger.info(f"Database engine created: {self._engine.url.render_as_string(hide_password=True)}")
            except SQLAlchemyError as e:
                logger.error(f"Failed to create database engine: {e}")
                raise DatabaseError("Database engine creation failed", operation="connect")
        return self._engine

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """Get database session with automatic commit, rollback and cleanup."""
        session = Session(self.get_engine(), expire_on_commit=False)

        try:
            yield session
            session.commit()
        except AppException:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(f"Database session error: {e}")
            session.rollback()
            raise DatabaseError("Database operation failed")
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_tables(self) -> None:
        """Create all database tables."""
        logger.info("Creating database tables...")
        try:
            SQLModel.metadata.create_all(bind=self.get_engine())
        except SQLAlchemyError as e:
            logger.error(f"Failed to create database tables: {e}")
            raise DatabaseError("Database table creation failed", operation="create_tables")

    def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            with Session(self.get_engine()) as session:
                return session.exec(select(1)).first() == 1
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            return False

    def disconnect(self) -> None:
        """Dispose of the engine."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Database disconnected")


# Global database manager instance
database_manager = DatabaseManager()


def get_session_dependency() -> Generator[Session, None, None]:
    """FastAPI dependency for getting database session."""
    with database_manager.get_session() as session:
        yield session
