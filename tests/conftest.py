"""Shared fixtures for all test modules."""
import os
import tempfile
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from uuid import uuid4

import pytest

# Point the app at a throwaway SQLite file before any mindlog module reads config.
_TEST_HOME = Path(tempfile.mkdtemp(prefix="mindlog-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_HOME / 'mindlog-test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key"

from fastapi.testclient import TestClient

from mindlog.auth.models import User
from mindlog.auth.service import get_current_user_id
from mindlog.core.database import Base, SessionLocal, engine
from mindlog.core.dependency import get_extraction_client
from mindlog.journals.models import JournalEntry
from mindlog.suggestions.schemas import ExtractionResult

LONG_TEXT = (
    "Today I felt scattered at work and skipped my evening walk again. "
    "I keep saying I want to read more and get back into a routine that actually sticks."
)


class StubExtractionClient:
    """Deterministic extraction client with call recording.

    Returns queued results in order, then empty results. Set `error` to make every
    call raise, or `responder` to compute the result from the call arguments.
    """

    model_tag = "stub"

    def __init__(self, results=None, error=None, responder=None):
        self.results = list(results or [])
        self.error = error
        self.responder = responder
        self.calls = []
        self._lock = threading.Lock()

    def extract(self, entries, existing_goals, existing_tasks):
        with self._lock:
            self.calls.append({
                "entries": list(entries),
                "existing_goals": list(existing_goals),
                "existing_tasks": list(existing_tasks),
            })
            if self.error is not None:
                raise self.error
            if self.responder is not None:
                return self.responder(entries, existing_goals, existing_tasks)
            if self.results:
                return self.results.pop(0)
            return ExtractionResult()


def result(goals=(), tasks=(), habits=()) -> ExtractionResult:
    """Builds an ExtractionResult from plain dicts, the way the model returns them."""
    return ExtractionResult.model_validate({"goals": list(goals), "tasks": list(tasks), "habits": list(habits)})


@pytest.fixture(autouse=True)
def _fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make(name="Sam", user_type="normal"):
        user = User(id=uuid4(), email=f"{uuid4().hex[:8]}@example.com", name=name, type=user_type)
        db.add(user)
        db.commit()
        return user
    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def add_entry(db):
    """Creates journal entries; each call is one day later than the previous one."""
    base = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _add(user_id, content=LONG_TEXT, transcript=None, is_journal=True, analyzed=False, date=None):
        counter["n"] += 1
        entry = JournalEntry(
            id=uuid4(),
            user_id=user_id,
            content=content,
            transcript=transcript,
            date=date or base + timedelta(days=counter["n"]),
            is_journal=is_journal,
            analyzed=analyzed,
        )
        db.add(entry)
        db.commit()
        return entry
    return _add


@pytest.fixture
def stub_client():
    return StubExtractionClient()


@pytest.fixture
def api(user, stub_client, monkeypatch):
    """TestClient authenticated as `user`, with extraction served by `stub_client`."""
    from main import app
    import mindlog.suggestions.pipeline as pipeline

    monkeypatch.setattr(pipeline, "default_extraction_client", lambda: stub_client)
    app.dependency_overrides[get_current_user_id] = lambda: user.id
    app.dependency_overrides[get_extraction_client] = lambda: stub_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
