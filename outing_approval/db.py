"""Engine and transactional session for the ``database`` store backend."""

from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base

from outing_approval.config import get_settings

Base = declarative_base()


@lru_cache()
def get_engine() -> Engine:
    return create_engine(get_settings().database_url)


@contextmanager
def session_scope() -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on error."""

    with Session(get_engine(), autoflush=False) as session, session.begin():
        yield session
