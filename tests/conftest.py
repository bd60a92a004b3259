"""Shared pytest fixtures for userlists tests."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from userlists.config import Settings
from userlists.db.backends import RemoteDatabase
from userlists.db.schema import Base


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create a database session for testing."""
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def db():
    """In-memory database behind the persistence adapter, schema created."""
    database = RemoteDatabase("sqlite://")
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def client(db):
    """Test client whose database dependency points at the in-memory db."""
    from userlists.api.app import create_app, get_db

    app = create_app(Settings(backend="embedded"))
    app.dependency_overrides[get_db] = lambda: db
    return TestClient(app)
