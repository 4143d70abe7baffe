"""
Shared test fixtures and configuration for the test suite.

Settings are read at import time, so the environment is pinned here before
any app module is imported.
"""
import os

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ.setdefault("OPENAI_API_KEY", "")

from typing import Callable, Iterator  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.models import Base  # noqa: E402


@pytest.fixture
def db_session() -> Iterator[Session]:
    """
    In-memory SQLite session with the guideline tables created.

    Yields:
        Session: Test database session, tables dropped afterwards
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def embedding_vector() -> list:
    """Embedding with the configured dimension."""
    return [0.1] * settings.EMBEDDING_DIMENSION


@pytest.fixture
def mock_http_client() -> Callable[..., httpx.Client]:
    """Factory for httpx clients answered by a handler function instead of the network."""
    def _make(handler, **kwargs) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler), **kwargs)
    return _make
