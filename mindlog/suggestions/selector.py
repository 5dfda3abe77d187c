import logging
from uuid import UUID
from typing import Iterable, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from mindlog.core.config import MIN_ENTRY_LENGTH, SUGGESTION_BATCH_LIMIT
from mindlog.journals.models import JournalEntry

logger = logging.getLogger(__name__)


# Length of the text sent for extraction, matching entry_text.
_ANALYZED_LENGTH = func.length(
    func.coalesce(func.nullif(JournalEntry.transcript, ""), JournalEntry.content)
)


def _eligible(query, user_id: UUID):
    return query.filter(
        JournalEntry.user_id == user_id,
        JournalEntry.is_journal.is_(True),
        JournalEntry.analyzed.is_(False),
    )


def entry_text(entry: JournalEntry) -> str:
    """Text to analyze: the full transcript when the content is a chat summary."""
    return entry.transcript or entry.content or ""


def mark_analyzed(db: Session, entry_ids: Iterable[UUID], commit: bool = True) -> int:
    """
    Flags entries as analyzed. Never resets the flag.

    Args:
        db (Session): SQLAlchemy session.
        entry_ids (Iterable[UUID]): Entries considered by a run.
        commit (bool): Commit immediately, or leave it to the caller's transaction.

    Returns:
        int: Number of entries flipped from unanalyzed to analyzed.
    """
    ids = list(entry_ids)
    if not ids:
        return 0
    updated = (
        db.query(JournalEntry)
        .filter(JournalEntry.id.in_(ids), JournalEntry.analyzed.is_(False))
        .update({JournalEntry.analyzed: True}, synchronize_session=False)
    )
    if commit:
        db.commit()
    return updated


def mark_short_entries_analyzed(db: Session, user_id: UUID, min_length: int = MIN_ENTRY_LENGTH) -> int:
    """Marks eligible entries below min_length as analyzed so they never reach the model."""
    short_ids = [
        row.id
        for row in _eligible(db.query(JournalEntry.id), user_id)
        .filter(_ANALYZED_LENGTH < min_length)
        .all()
    ]
    if not short_ids:
        return 0
    count = mark_analyzed(db, short_ids)
    logger.info(f"Marked {count} short journal entries analyzed for user {user_id} without extraction")
    return count


def select_unanalyzed(
    db: Session,
    user_id: UUID,
    limit: int = SUGGESTION_BATCH_LIMIT,
    min_length: int = MIN_ENTRY_LENGTH,
) -> List[JournalEntry]:
    """
    Selects the next extraction batch for a user.

    Returns unanalyzed journal entries (not chat turns) of at least `min_length`
    characters, oldest first, capped at `limit`. Short entries are left to
    `mark_short_entries_analyzed`.

    Args:
        db (Session): SQLAlchemy session.
        user_id (UUID): ID of the user.
        limit (int): Maximum entries per batch.
        min_length (int): Minimum length of `entry_text` worth sending to the model.

    Returns:
        List[JournalEntry]: The selected entries.
    """
    return (
        _eligible(db.query(JournalEntry), user_id)
        .filter(_ANALYZED_LENGTH >= min_length)
        .order_by(JournalEntry.date.asc())
        .limit(max(int(limit), 0))
        .all()
    )


def users_with_unanalyzed_entries(db: Session) -> List[UUID]:
    rows = (
        db.query(JournalEntry.user_id)
        .filter(JournalEntry.is_journal.is_(True), JournalEntry.analyzed.is_(False))
        .distinct()
        .all()
    )
    return [row.user_id for row in rows]
