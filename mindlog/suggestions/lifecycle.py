import logging
from uuid import UUID

from sqlalchemy.orm import Session

from mindlog.suggestions.db import (
    DurableRecord,
    Suggestion,
    delete_suggestion,
    get_suggestion,
    promote_suggestion,
)
from mindlog.suggestions.errors import ForbiddenError, NotFoundError
from mindlog.suggestions.schemas import SuggestionKind

logger = logging.getLogger(__name__)


def get_owned_suggestion(
    db: Session, kind: SuggestionKind, suggestion_id: UUID, requesting_user_id: UUID
) -> Suggestion:
    """
    Loads a suggestion and checks that it belongs to the requesting user.

    Raises:
        NotFoundError: No suggestion of this kind has the given ID.
        ForbiddenError: The suggestion belongs to another user.
    """
    suggestion = get_suggestion(db, kind, suggestion_id)
    if suggestion is None:
        raise NotFoundError(f"{kind.value.capitalize()} suggestion {suggestion_id} not found")
    if suggestion.user_id != requesting_user_id:
        logger.warning(
            f"User {requesting_user_id} tried to access {kind.value} suggestion {suggestion_id} "
            f"owned by {suggestion.user_id}"
        )
        raise ForbiddenError(f"Not allowed to modify {kind.value} suggestion {suggestion_id}")
    return suggestion


def accept(db: Session, suggestion_id: UUID, kind: SuggestionKind, requesting_user_id: UUID) -> DurableRecord:
    """
    Promotes a suggestion to a durable goal, task or habit.

    Args:
        db (Session): SQLAlchemy session.
        suggestion_id (UUID): ID of the suggestion.
        kind (SuggestionKind): goal, task or habit.
        requesting_user_id (UUID): The user accepting it.

    Returns:
        DurableRecord: The created Goal, Task or Habit.

    Raises:
        NotFoundError, ForbiddenError, StorageError
    """
    suggestion = get_owned_suggestion(db, kind, suggestion_id, requesting_user_id)
    record = promote_suggestion(db, suggestion)
    logger.info(f"User {requesting_user_id} accepted {kind.value} suggestion {suggestion_id} as {record.id}")
    return record


def reject(db: Session, suggestion_id: UUID, kind: SuggestionKind, requesting_user_id: UUID) -> None:
    """Deletes a suggestion without creating anything."""
    suggestion = get_owned_suggestion(db, kind, suggestion_id, requesting_user_id)
    delete_suggestion(db, suggestion)
    logger.info(f"User {requesting_user_id} rejected {kind.value} suggestion {suggestion_id}")
