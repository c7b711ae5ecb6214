from functools import lru_cache
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from task_manager.core.logger import logger


class Database:
    """Engine + session factory. One per process, reused across requests."""

    def __init__(self, url: str):
        self.url = url
        self.engine: Engine = _build_engine(url)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine)

    def create_schema(self) -> None:
        # models must be imported so their tables are registered on Base.metadata
        from task_manager.db.base import Base
        from task_manager.modules.auth import model as _auth_model  # noqa: F401
        from task_manager.modules.tasks import model as _task_model  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Schema ready on {self.engine.url.render_as_string(hide_password=True)}")

    def dispose(self) -> None:
        self.engine.dispose()


def _build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # every session must see the same in-memory database
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True, pool_size=10, max_overflow=20)


@lru_cache(maxsize=None)
def init_database(url: str) -> Database:
    """Connect once per URL; later calls return the cached Database."""
    logger.info("Initialising database connection")
    return Database(url)


def get_db(request: Request) -> Iterator[Optional[Session]]:
    """Database session dependency. None in the ownerless deployment, which has no database."""
    database = request.app.state.database
    if database is None:
        yield None
        return

    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()
