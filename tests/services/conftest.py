"""Service test fixtures — async DB, stub generator, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db overridden to hand out sessions bound to the test engine
    - get_generator overridden with a StubGenerator: no network calls
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (JSON columns and version_id_col both work on SQLite)
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import get_generator
from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.models.participant import Participant
import app.infrastructure.database as db_module
from app.main import app
from tests.services.mock_generator import StubGenerator


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def stub_generator():
    return StubGenerator()


@pytest.fixture
async def client(test_engine, test_session_factory, stub_generator):
    """FastAPI test client with DB and generator dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generator] = lambda: stub_generator

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _seed(test_db, participant_id, study_group, email):
    participant = Participant(
        id=participant_id,
        email=email,
        username="tester",
        study_group=study_group,
        academic_level="graduate",
        data_science_experience="basic",
        sessions=[],
    )
    test_db.add(participant)
    await test_db.commit()
    return participant


@pytest.fixture
async def participant(test_db):
    """An editor-first participant; the token is the participant id."""
    return await _seed(test_db, "P1700000000000abcde", "editor-first", "a@example.com")


@pytest.fixture
async def other_participant(test_db):
    return await _seed(test_db, "P1700000000001fghij", "challenger-first", "b@example.com")


@pytest.fixture
def auth(participant):
    return {"Authorization": f"Bearer {participant.id}"}


@pytest.fixture
def other_auth(other_participant):
    return {"Authorization": f"Bearer {other_participant.id}"}


@pytest.fixture
async def problem(client, auth):
    """An in-progress problem created through the API."""
    res = await client.post(
        "/api/v1/problems/",
        json={
            "taskPrompt": "Reduce hospital readmission rates",
            "taskCategory": "healthcare",
            "initialProblem": "Predict which patients will be readmitted",
        },
        headers=auth,
    )
    assert res.status_code == 201
    return res.json()
