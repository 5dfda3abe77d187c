import datetime
from uuid import UUID, uuid4
from typing import Optional, List

from sqlalchemy.orm import Session
from mindlog.journals.models import JournalEntry
from mindlog.journals.schemas import JournalEntryCreate


def get_journal(db: Session, journal_id: UUID, user_id: UUID) -> Optional[JournalEntry]:
    """
    Retrieves a journal entry by its ID for a given user.

    Args:
        db (Session): SQLAlchemy session.
        journal_id (UUID): ID of the journal.
        user_id (UUID): ID of the owner.

    Returns:
        Optional[JournalEntry]: The journal if found, else None.
    """
    return db.query(JournalEntry).filter(
        JournalEntry.id == journal_id,
        JournalEntry.user_id == user_id
    ).first()


def get_user_journals(db: Session, user_id: UUID, skip: int = 0, limit: int = 100) -> List[JournalEntry]:
    """
    Retrieves a paginated list of journal entries for a user, sorted by date descending.
    """
    return (
        db.query(JournalEntry)
        .filter(JournalEntry.user_id == user_id)
        .order_by(JournalEntry.date.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def create_journal(db: Session, journal: JournalEntryCreate, user_id: UUID) -> JournalEntry:
    """
    Creates a new journal entry for a user. New entries always start unanalyzed.

    Args:
        db (Session): SQLAlchemy session.
        journal (JournalEntryCreate): Pydantic journal input.
        user_id (UUID): ID of the user.

    Returns:
        JournalEntry: The created journal.
    """
    new_journal = JournalEntry(
        id=uuid4(),
        user_id=user_id,
        title=journal.title,
        content=journal.content,
        transcript=journal.transcript,
        date=journal.date or datetime.datetime.now(datetime.timezone.utc),
        is_journal=journal.is_journal,
        analyzed=False,
    )
    db.add(new_journal)
    db.commit()
    db.refresh(new_journal)
    return new_journal
