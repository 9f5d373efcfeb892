"""Shared fixtures for LoreChat Engine tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lorechat_engine.db import init_db


SHEN_MO_CARD = {
    "name": "沈墨",
    "first_mes": "你好",
    "character_book": {
        "entries": [
            {"keys": ["书房"], "content": "案情", "enabled": True},
        ]
    },
}


@pytest.fixture
def shen_mo_card():
    """Card used for the end-to-end import scenario."""
    return {
        "name": SHEN_MO_CARD["name"],
        "first_mes": SHEN_MO_CARD["first_mes"],
        "character_book": {
            "entries": [dict(e) for e in SHEN_MO_CARD["character_book"]["entries"]]
        },
    }


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across sessions of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
