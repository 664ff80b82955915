"""
Shared fixtures: an in-memory SQLite database, a session on it, a
TestClient wired to that session and a channel factory.
"""

import json
import sys
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import Base, get_db
from app.main import app
from app.models.channel import Channel, ChannelType


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    """Database session on the in-memory engine"""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    """Test client whose requests each get a fresh session on the test engine"""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _as_column(value):
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


@pytest.fixture
def make_channel(db):
    """Create a channel row; dict pricing values are stored as JSON text"""

    def _make(
        name="test-channel",
        type=ChannelType.OPENAI.value,
        model_configs=None,
        model_ratio=None,
        completion_ratio=None,
    ):
        channel = Channel(
            name=name,
            type=type,
            model_configs=_as_column(model_configs),
            model_ratio=_as_column(model_ratio),
            completion_ratio=_as_column(completion_ratio),
        )
        db.add(channel)
        db.commit()
        db.refresh(channel)
        return channel

    return _make
