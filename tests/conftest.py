# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from infra.db.base import Base
import infra.db.models  # noqa: F401
from infra.operational_support import OperationalSupport
from infra.services import build_service_graph
from infra.settings import EngineSettings


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def support(tmp_path):
    return OperationalSupport(events_path=tmp_path / "support-events.jsonl")


@pytest.fixture
def services(session, support):
    # Same wiring as production, with the test session and no maps key
    graph = build_service_graph(
        session,
        settings=EngineSettings(database_url="sqlite:///:memory:"),
        support=support,
    )
    try:
        yield graph.as_dict()
    finally:
        graph.close()
