from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

import bcrypt
from sqlmodel import Session, SQLModel, create_engine


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


@lru_cache(maxsize=8)
def get_engine(database_url: str):
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, echo=False, connect_args=connect_args)


def init_db(database_url: str) -> None:
    # Import models for side effects so SQLModel metadata includes all tables.
    from stocksense.infra.db import models  # noqa: F401

    SQLModel.metadata.create_all(get_engine(database_url))


@contextmanager
def session_scope(database_url: str) -> Iterator[Session]:
    session = Session(get_engine(database_url))
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
