"""Pytest configuration and fixtures."""

import os

# Test environment must be in place before the application modules are imported
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SESSION_SECRET"] = "test-session-secret"

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from main import app
from taskboard.database import Base, build_engine, get_db
from taskboard.models import User
from taskboard.schemas.principal import Principal
from taskboard.services.demo_data import seed_demo_data, DEMO_PASSWORD
from taskboard.services.role_resolver import roles_of


@pytest.fixture
def engine():
    """In-memory database shared by every session of a test"""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def demo_users(db_session):
    """Seed the demo catalog; returns username -> user id"""
    return seed_demo_data(db_session)


@pytest.fixture
def principal_for(db_session, demo_users):
    """Build the Principal a login would produce for a demo username"""
    def build(username: str) -> Principal:
        user = db_session.query(User).filter(User.username == username).one()
        return Principal.from_user(user, roles_of(db_session, user.id))
    return build


@pytest.fixture
def client_factory(session_factory, demo_users):
    """Fresh TestClients (separate cookie jars) against the seeded database"""

    def get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = get_test_db
    clients = []

    def make() -> TestClient:
        client = TestClient(app)
        clients.append(client)
        return client

    yield make

    for client in clients:
        client.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_factory) -> TestClient:
    return client_factory()


def login(client: TestClient, username: str, password: str = DEMO_PASSWORD):
    return client.post(
        "/login",
        data={"username": username, "password": password},
        follow_redirects=False,
    )


@pytest.fixture
def login_as(client_factory):
    """Signed-in client for a demo username"""
    def make(username: str, password: str = DEMO_PASSWORD) -> TestClient:
        client = client_factory()
        response = login(client, username, password)
        assert response.status_code == 303, response.text
        return client
    return make
