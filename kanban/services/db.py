from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Any, Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from kanban.core.config import get_settings
from kanban.models.base import Base


def build_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite"):
        return create_engine(database_url, echo=False)

    in_memory = not url.database or url.database == ":memory:"
    if not in_memory:
        db_path = Path(url.database).expanduser()
        if db_path.parent:
            db_path.parent.mkdir(parents=True, exist_ok=True)
        # Rebuild URL so SQLAlchemy can handle relative paths nicely
        database_url = f"sqlite:///{db_path}"

    engine_kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if in_memory:
        engine_kwargs["poolclass"] = StaticPool
    return create_engine(database_url, echo=False, **engine_kwargs)


@lru_cache
def get_engine() -> Engine:
    return build_engine(get_settings().database_url)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    return make_session_factory(get_engine())


def init_db(engine: Engine | None = None) -> None:
    Base.metadata.create_all(bind=engine or get_engine())


@contextmanager
def db_session(factory: sessionmaker[Session] | None = None) -> Generator[Session, None, None]:
    session: Session = (factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
