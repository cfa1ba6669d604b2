# File location: src/certifier/db/session.py
import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Register tables on SQLModel.metadata
from src.certifier import models  # noqa: F401

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the engine for the intern record store.

    Constructed once at startup, connected, handed to request handlers through
    app.state and disconnected at shutdown.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def connect(self) -> None:
        if self._engine is not None:
            return
        kwargs = {"echo": self.echo, "pool_pre_ping": True}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.url or self.url == "sqlite://":
                kwargs["poolclass"] = StaticPool
        try:
            self._engine = create_engine(self.url, **kwargs)
            SQLModel.metadata.create_all(self._engine)
            logger.info("Database connected successfully")
        except Exception as e:
            logger.error(f"Database connection failed: {e}", exc_info=True)
            self._engine = None
            raise

    def disconnect(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        logger.info("Database disconnected successfully")

    def session(self) -> Session:
        return Session(self.engine)


def get_db(request: Request) -> Iterator[Session]:
    database: Database = request.app.state.database
    with database.session() as session:
        yield session
