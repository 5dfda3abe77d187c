from mindlog.journals.models import JournalEntry
from mindlog.suggestions.selector import (
    entry_text,
    mark_analyzed,
    mark_short_entries_analyzed,
    select_unanalyzed,
    users_with_unanalyzed_entries,
)


def _analyzed(db, entry_id):
    db.expire_all()
    return db.query(JournalEntry).filter(JournalEntry.id == entry_id).one().analyzed


def test_selects_oldest_first_up_to_limit(db, user, add_entry):
    entries = [add_entry(user.id) for _ in range(5)]
    batch = select_unanalyzed(db, user.id, limit=3)
    assert [e.id for e in batch] == [e.id for e in entries[:3]]


def test_skips_chat_turns_analyzed_and_short_entries(db, user, add_entry):
    add_entry(user.id, is_journal=False)
    add_entry(user.id, analyzed=True)
    add_entry(user.id, content="Short note.")
    keep = add_entry(user.id)
    assert [e.id for e in select_unanalyzed(db, user.id, limit=10)] == [keep.id]


def test_only_selects_own_entries(db, make_user, add_entry):
    alice, bob = make_user("Alice"), make_user("Bob")
    add_entry(alice.id)
    assert select_unanalyzed(db, bob.id) == []


def test_short_entries_are_marked_without_extraction(db, user, add_entry):
    short = add_entry(user.id, content="Tired today.")
    long = add_entry(user.id)
    chat = add_entry(user.id, content="ok", is_journal=False)

    assert mark_short_entries_analyzed(db, user.id) == 1
    assert _analyzed(db, short.id) is True
    assert _analyzed(db, long.id) is False
    assert _analyzed(db, chat.id) is False


def test_mark_analyzed_only_flips_unanalyzed_entries(db, user, add_entry):
    fresh = add_entry(user.id)
    done = add_entry(user.id, analyzed=True)
    assert mark_analyzed(db, [fresh.id, done.id]) == 1
    assert mark_analyzed(db, [fresh.id, done.id]) == 0
    assert _analyzed(db, fresh.id) is True
    assert mark_analyzed(db, []) == 0


def test_entry_text_prefers_transcript(user, add_entry):
    summary = add_entry(user.id, content="Summary of a chat about sleep.", transcript="Full transcript")
    plain = add_entry(user.id)
    assert entry_text(summary) == "Full transcript"
    assert entry_text(plain) == plain.content


def test_users_with_unanalyzed_entries(db, make_user, add_entry):
    alice, bob, carol = make_user("Alice"), make_user("Bob"), make_user("Carol")
    add_entry(alice.id)
    add_entry(alice.id)
    add_entry(bob.id, analyzed=True)
    add_entry(carol.id, is_journal=False)
    assert users_with_unanalyzed_entries(db) == [alice.id]


def test_length_is_measured_on_the_analyzed_text(db, user, add_entry):
    chat = add_entry(user.id, content="Chat about work.", transcript="Me: " + "work has been hectic lately. " * 5)
    short_chat = add_entry(user.id, content="Chat.", transcript="Me: fine.")

    assert mark_short_entries_analyzed(db, user.id) == 1
    assert _analyzed(db, short_chat.id) is True
    assert [e.id for e in select_unanalyzed(db, user.id)] == [chat.id]
