import logging
from uuid import UUID, uuid4
from typing import Dict, List, Optional, Type, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mindlog.goals.models import Goal, Task, Habit
from mindlog.suggestions.errors import StorageError
from mindlog.suggestions.models import SuggestedGoal, SuggestedTask, SuggestedHabit
from mindlog.suggestions.schemas import SuggestionKind

logger = logging.getLogger(__name__)

Suggestion = Union[SuggestedGoal, SuggestedTask, SuggestedHabit]
DurableRecord = Union[Goal, Task, Habit]

SUGGESTION_MODELS: Dict[SuggestionKind, Type[Suggestion]] = {
    SuggestionKind.GOAL: SuggestedGoal,
    SuggestionKind.TASK: SuggestedTask,
    SuggestionKind.HABIT: SuggestedHabit,
}


def suggestion_text(suggestion: Union[Suggestion, DurableRecord]) -> str:
    """Returns the text used for duplicate checks: a goal's name, otherwise the title."""
    if isinstance(suggestion, (SuggestedGoal, Goal)):
        return suggestion.name
    return suggestion.title


def add_suggestion(db: Session, suggestion: Suggestion) -> Suggestion:
    """
    Stages a new suggestion in the session without committing.

    The pipeline commits all staged suggestions of a run together with the
    analyzed flags of its entries.
    """
    if suggestion.id is None:
        suggestion.id = uuid4()
    db.add(suggestion)
    return suggestion


def list_suggestions(
    db: Session, kind: SuggestionKind, user_id: UUID, skip: int = 0, limit: Optional[int] = 100
) -> List[Suggestion]:
    """
    Retrieves a user's live suggestions of one kind, oldest first.

    Args:
        db (Session): SQLAlchemy session.
        kind (SuggestionKind): goal, task or habit.
        user_id (UUID): ID of the user.
        skip (int): Pagination offset.
        limit (Optional[int]): Pagination limit, None for all rows.

    Returns:
        List[Suggestion]: The suggestions.
    """
    model = SUGGESTION_MODELS[kind]
    return (
        db.query(model)
        .filter(model.user_id == user_id)
        .order_by(model.created_at)
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_all_suggestions(db: Session, user_id: UUID) -> Dict[str, List[Suggestion]]:
    return {
        "goals": list_suggestions(db, SuggestionKind.GOAL, user_id, limit=None),
        "tasks": list_suggestions(db, SuggestionKind.TASK, user_id, limit=None),
        "habits": list_suggestions(db, SuggestionKind.HABIT, user_id, limit=None),
    }


def get_suggestion(db: Session, kind: SuggestionKind, suggestion_id: UUID) -> Optional[Suggestion]:
    """
    Retrieves a suggestion by ID regardless of owner.

    Ownership is checked by the caller so that a missing row and a row owned by
    someone else can be told apart.
    """
    model = SUGGESTION_MODELS[kind]
    return db.query(model).filter(model.id == suggestion_id).first()


def delete_suggestion(db: Session, suggestion: Suggestion) -> Suggestion:
    try:
        db.delete(suggestion)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete suggestion {suggestion.id}: {e}")
        raise StorageError(f"Failed to delete suggestion {suggestion.id}") from e
    return suggestion


def _durable_from(suggestion: Suggestion) -> DurableRecord:
    if isinstance(suggestion, SuggestedGoal):
        return Goal(
            id=uuid4(),
            user_id=suggestion.user_id,
            name=suggestion.name,
            description=suggestion.description,
            category=suggestion.category,
            progress=0.0,
            status="in_progress",
            ai_generated=True,
        )
    if isinstance(suggestion, SuggestedTask):
        return Task(
            id=uuid4(),
            user_id=suggestion.user_id,
            goal_id=suggestion.parent_goal_id,
            title=suggestion.title,
            description=suggestion.description,
            priority="medium",
            completed=False,
            ai_generated=True,
        )
    return Habit(
        id=uuid4(),
        user_id=suggestion.user_id,
        title=suggestion.title,
        description=suggestion.description,
        frequency=suggestion.frequency,
        streak=0,
        ai_generated=True,
    )


def promote_suggestion(db: Session, suggestion: Suggestion) -> DurableRecord:
    """
    Moves a suggestion into the durable collection.

    The durable record is created and the suggestion row deleted in a single
    commit; on failure both are rolled back.

    Args:
        db (Session): SQLAlchemy session.
        suggestion (Suggestion): The suggestion row to promote.

    Returns:
        DurableRecord: The new Goal, Task or Habit.

    Raises:
        StorageError: If the transaction could not be committed.
    """
    record = _durable_from(suggestion)
    try:
        db.add(record)
        db.delete(suggestion)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to promote suggestion {suggestion.id}: {e}")
        raise StorageError(f"Failed to promote suggestion {suggestion.id}") from e
    db.refresh(record)
    return record
