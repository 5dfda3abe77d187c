import logging

from conftest import StubExtractionClient, result
from mindlog.core.database import SessionLocal
from mindlog.journals.models import JournalEntry
from mindlog.suggestions import pipeline
from mindlog.suggestions.errors import ExtractionError
from mindlog.suggestions.models import SuggestedGoal, SuggestedHabit
from mindlog.suggestions.pipeline import (
    run_for_all_users,
    run_for_all_users_in_background,
    run_for_user_in_background,
)

FAILING_TEXT = "FAIL " + "this entry makes the stub extraction client raise an error for its owner. " * 2


def _responder(entries, existing_goals, existing_tasks):
    if any(e["content"].startswith("FAIL") for e in entries):
        raise ExtractionError("model unavailable")
    return result(goals=[{"name": "Walk to work"}])


def test_one_user_failing_does_not_affect_others(db, make_user, add_entry):
    alice, bob, carol = make_user("Alice"), make_user("Bob"), make_user("Carol")
    add_entry(alice.id)
    add_entry(bob.id, content=FAILING_TEXT)
    add_entry(carol.id)
    idle = make_user("Dana")
    client = StubExtractionClient(responder=_responder)

    report = run_for_all_users(SessionLocal, client, max_workers=2)

    assert set(report.summaries) == {str(alice.id), str(carol.id)}
    assert report.summaries[str(alice.id)].goals_created == 1
    assert set(report.failures) == {str(bob.id)}
    assert "model unavailable" in report.failures[str(bob.id)]
    assert str(idle.id) not in report.summaries

    db.expire_all()
    owners = {g.user_id for g in db.query(SuggestedGoal).all()}
    assert owners == {alice.id, carol.id}
    bob_entry = db.query(JournalEntry).filter(JournalEntry.user_id == bob.id).one()
    assert bob_entry.analyzed is False


def test_unexpected_failure_is_isolated(db, make_user, add_entry, monkeypatch):
    alice, bob = make_user("Alice"), make_user("Bob")
    add_entry(alice.id)
    add_entry(bob.id)
    real_run = pipeline.run_for_user

    def flaky_run(session, user_id, client, limit):
        if user_id == bob.id:
            raise KeyError("boom")
        return real_run(session, user_id, client, limit)

    monkeypatch.setattr(pipeline, "run_for_user", flaky_run)
    report = run_for_all_users(SessionLocal, StubExtractionClient())

    assert set(report.summaries) == {str(alice.id)}
    assert report.failures[str(bob.id)].startswith("Unexpected error")


def test_no_users_means_no_client(db, user, monkeypatch):
    def no_client():
        raise AssertionError("client should not be built")

    monkeypatch.setattr(pipeline, "default_extraction_client", no_client)
    report = run_for_all_users(SessionLocal)
    assert report.summaries == {} and report.failures == {}


def test_background_run_logs_instead_of_raising(db, user, add_entry, caplog):
    entry = add_entry(user.id)
    client = StubExtractionClient(error=ExtractionError("upstream timed out"))

    with caplog.at_level(logging.ERROR, logger="mindlog.suggestions.pipeline"):
        run_for_user_in_background(user.id, client=client)

    assert any("Background suggestion run failed" in r.getMessage() for r in caplog.records)
    db.expire_all()
    assert db.get(JournalEntry, entry.id).analyzed is False


def test_background_run_stores_suggestions(db, user, add_entry):
    add_entry(user.id)
    client = StubExtractionClient(results=[result(habits=[{"title": "Drink water", "frequency": "daily"}])])

    run_for_user_in_background(user.id, client=client)

    assert db.query(SuggestedHabit).count() == 1


def test_background_all_users_without_configured_client_logs(db, user, add_entry, monkeypatch, caplog):
    add_entry(user.id)

    def unconfigured():
        raise ExtractionError("Missing OPENAI_API_KEY in environment")

    monkeypatch.setattr(pipeline, "default_extraction_client", unconfigured)
    with caplog.at_level(logging.ERROR, logger="mindlog.suggestions.pipeline"):
        run_for_all_users_in_background()

    assert any("all users failed" in r.getMessage() for r in caplog.records)
