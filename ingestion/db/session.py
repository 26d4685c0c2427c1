"""Session helpers for the news database."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker


def create_db_engine(dsn: str) -> Engine:
    """Build an engine for ``dsn``; the caller owns and disposes it."""
    url = make_url(dsn)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        # FastAPI 스레드풀에서 같은 연결을 공유할 수 있도록 허용
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(dsn, future=True, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        future=True,
    )


def ensure_schema(engine: Engine) -> None:
    """로컬 실행/테스트용 스키마 생성 (idempotent)."""
    from .models import Base

    Base.metadata.create_all(bind=engine)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope for DB operations."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
