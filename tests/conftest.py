import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from til.app import app
from til.database import Base
from til.models import VoteType
from til.store import FactStore, SqlFactStore, StoreError, get_store


class FailingStore(FactStore):
    """Store whose backend is always down."""

    backend = "failing"

    def list_facts(self, category=None, limit=1000):
        raise StoreError("down")

    def get_fact(self, fact_id):
        raise StoreError("down")

    def create_fact(self, text, source, category):
        raise StoreError("down")

    def update_votes(self, fact_id, vote, value):
        raise StoreError("down")

    def count_facts(self):
        raise StoreError("down")


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(db_session):
    return SqlFactStore(db_session)


@pytest.fixture
def add_fact(store):
    def _add(
        text="Octopuses have three hearts",
        source="https://example.com/octopus",
        category="science",
        interesting=0,
        mindblowing=0,
        false=0,
    ):
        fact = store.create_fact(text, source, category)
        for vote, value in (
            (VoteType.INTERESTING, interesting),
            (VoteType.MINDBLOWING, mindblowing),
            (VoteType.FALSE, false),
        ):
            if value:
                fact = store.update_votes(fact.id, vote, value)
        return fact

    return _add


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_client():
    app.dependency_overrides[get_store] = lambda: FailingStore()
    yield TestClient(app)
    app.dependency_overrides.clear()
