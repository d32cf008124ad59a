"""Test configuration: repo root on sys.path plus in-memory database fixtures.

Every test gets a fresh SQLite database held on a single shared connection,
so repositories and the HTTP app see the same tables.
"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from worktrack.infrastructure.config.settings import Settings  # noqa: E402
from worktrack.infrastructure.database.base import (  # noqa: E402
    create_db_engine,
    create_session_factory,
    init_db,
)


@pytest.fixture
def test_settings():
    return Settings(DATABASE_TYPE="sqlite", DATABASE_URL="sqlite://", LOG_LEVEL="WARNING")


@pytest.fixture
def engine(test_settings):
    engine = create_db_engine(test_settings)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(test_settings):
    from fastapi.testclient import TestClient

    from worktrack.main import create_app

    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client
