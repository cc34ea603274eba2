from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from checkout_admin.config import Settings


class Base(DeclarativeBase):
    pass


class Database:
    """Engine plus session factory for the checkout data store.

    Constructed once per application, stored on ``app.state.database`` and
    disposed on shutdown. Request handlers get sessions through ``get_db``.
    """

    def __init__(self, url: str, **engine_kwargs: Any) -> None:
        self.engine: Engine = create_engine(url, **engine_kwargs)
        self.session_factory = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False
        )

    @classmethod
    def from_settings(cls, s: Settings) -> Database:
        kwargs: dict[str, Any] = {"pool_pre_ping": True}
        if not s.database_url.startswith("sqlite"):
            kwargs.update(
                pool_size=s.db_pool_size,
                max_overflow=s.db_max_overflow,
                pool_timeout=s.db_pool_timeout,
                pool_recycle=s.db_pool_recycle,
            )
        return cls(s.database_url, **kwargs)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
