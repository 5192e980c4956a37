from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, url: str, *, echo: bool = False, engine: Optional[Engine] = None) -> None:
        self.url = url
        self.engine = engine or create_engine(url, echo=echo, future=True, **_engine_options(url))
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )

    def session(self) -> Session:
        return self.session_factory()

    def ping(self) -> int:
        with self.engine.connect() as connection:
            return connection.execute(text("SELECT 1 + 1 AS result")).scalar_one()

    def close(self) -> None:
        self.engine.dispose()


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, or every session would see its own empty database
            options["poolclass"] = StaticPool
        return options
    return {"pool_pre_ping": True}


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
