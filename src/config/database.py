"""Database Configuration for IIIFNotifications."""

from __future__ import annotations

from pathlib import Path
from types import TracebackType

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from src import __file__ as src_file
from src.exceptions import DataPathError

__all__ = ["DBContext", "NotificationsDB"]


class DBContext:
    """A unit of work holding one SQLAlchemy session.

    Obtained by calling a `NotificationsDB` instance; the session is closed when
    the context exits, so concurrent requests never share a session.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        """Prepare a lazily opened session.

        Args:
            session_factory (sessionmaker[Session]): Factory bound to the engine.
        """
        self._session_factory = session_factory
        self._session: Session | None = None

    @property
    def session(self) -> Session:
        """Return the session for this context, opening it on first use."""
        if self._session is None:
            self._session = self._session_factory()
        return self._session

    def __enter__(self) -> DBContext:
        """Enter the unit of work."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Roll back on error and close the session."""
        if self._session is None:
            return
        if exc_type is not None:
            self._session.rollback()
        self._session.close()
        self._session = None


class NotificationsDB:
    """Database manager for the manifest and notification stores.

    Creates the SQLite database inside the data path, registers the models and
    runs pending Alembic migrations. One instance is built at startup and passed
    to every component that needs store access.

    Example:
        >>> db = NotificationsDB(Path("./data"))
        >>> with db() as ctx:
        ...     ctx.session.query(Notification).count()
    """

    def __init__(self, data_path: Path, db_name: str = "iiif-notifications.db") -> None:
        """Initializes the database manager.

        Args:
            data_path (Path): Directory where the database should be stored
            db_name (str): File name of the SQLite database

        Raises:
            DataPathError: If data_path exists but is a file instead of a directory
        """
        self.data_path = data_path
        self.db_path = data_path / db_name
        self.url = f"sqlite:///{self.db_path}"

        self.engine = self._setup_db()
        self._SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )
        self._do_migrations()

    def _setup_db(self) -> Engine:
        """Creates the data directory and the SQLAlchemy engine.

        Returns:
            Engine: Configured SQLAlchemy engine instance

        Raises:
            DataPathError: If data_path exists but is a file instead of a directory
        """
        import src.models.db  # noqa: F401

        if not self.data_path.exists():
            self.data_path.mkdir(parents=True, exist_ok=True)
        elif self.data_path.is_file():
            raise DataPathError(
                f"The path '{self.data_path}' is a file, please delete it first or "
                "choose a different data folder path"
            )

        engine = create_engine(
            self.url,
            connect_args={"check_same_thread": False},
            pool_pre_ping=True,
            future=True,
        )

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, _connection_record):
            cur = dbapi_connection.cursor()
            try:
                cur.execute("PRAGMA journal_mode=WAL;")
                cur.execute("PRAGMA synchronous=NORMAL;")
                cur.execute("PRAGMA foreign_keys=ON;")
            finally:
                cur.close()

        return engine

    def _do_migrations(self) -> None:
        """Upgrade the schema to the latest Alembic revision."""
        from alembic import command
        from alembic.config import Config

        cfg = Config()
        cfg.set_main_option(
            "script_location",
            str(Path(src_file).resolve().parent.parent / "alembic"),
        )
        cfg.set_main_option("sqlalchemy.url", self.url)

        command.upgrade(cfg, "head")

    def __call__(self) -> DBContext:
        """Open a new unit of work."""
        return DBContext(self._SessionLocal)

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
