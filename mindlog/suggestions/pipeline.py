import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mindlog.core.config import MIN_ENTRY_LENGTH, SUGGESTION_BATCH_LIMIT, SUGGESTION_MAX_WORKERS
from mindlog.core.database import SessionLocal
from mindlog.core.dependency import default_extraction_client
from mindlog.goals.db import get_user_goals, get_user_habits, get_user_tasks
from mindlog.goals.models import Goal, Habit, Task
from mindlog.journals.models import JournalEntry
from mindlog.suggestions.classify import resolve_goal_category, resolve_habit_frequency
from mindlog.suggestions.db import add_suggestion, list_all_suggestions, suggestion_text
from mindlog.suggestions.errors import ExtractionError, StorageError, SuggestionError
from mindlog.suggestions.matching import find_match, is_duplicate, normalize
from mindlog.suggestions.models import SuggestedGoal, SuggestedHabit, SuggestedTask
from mindlog.suggestions.providers.base import ExtractionClient
from mindlog.suggestions.schemas import (
    AllUsersRunReport,
    ExtractionResult,
    RunSummary,
    SuggestionKind,
)
from mindlog.suggestions.selector import (
    entry_text,
    mark_analyzed,
    mark_short_entries_analyzed,
    select_unanalyzed,
    users_with_unanalyzed_entries,
)

logger = logging.getLogger(__name__)

# Normalized texts already present per category, durable and suggested together.
ExistingPool = Dict[SuggestionKind, List[str]]


def build_existing_pool(db: Session, user_id: UUID) -> Tuple[ExistingPool, List[Goal], List[Task], List[Habit]]:
    """
    Collects everything a new suggestion must not duplicate.

    Returns:
        Tuple containing:
            - The per-category pool of normalized texts.
            - Durable goals, tasks and habits (used for the extraction context).
    """
    goals = get_user_goals(db, user_id, limit=None)
    tasks = get_user_tasks(db, user_id, limit=None)
    habits = get_user_habits(db, user_id, limit=None)
    live = list_all_suggestions(db, user_id)

    pool: ExistingPool = {
        SuggestionKind.GOAL: [normalize(suggestion_text(r)) for r in [*goals, *live["goals"]]],
        SuggestionKind.TASK: [normalize(suggestion_text(r)) for r in [*tasks, *live["tasks"]]],
        SuggestionKind.HABIT: [normalize(suggestion_text(r)) for r in [*habits, *live["habits"]]],
    }
    return pool, goals, tasks, habits


def _admit(pool: List[str], text: str) -> bool:
    """Adds text to the pool unless it duplicates something already there."""
    canonical = normalize(text)
    if not canonical or is_duplicate(canonical, pool):
        return False
    pool.append(canonical)
    return True


def _resolve_parent_goal(goal_hint: Optional[str], goals: Sequence[Goal]) -> Optional[UUID]:
    if not goal_hint or not goals:
        return None
    by_name = {g.name: g for g in goals}
    matched = find_match(goal_hint, list(by_name))
    return by_name[matched].id if matched else None


def _extract(
    client: ExtractionClient,
    entries: Sequence[JournalEntry],
    goals: Sequence[Goal],
    tasks: Sequence[Task],
) -> ExtractionResult:
    payload = [{"content": entry_text(e), "date": e.date.isoformat() if e.date else ""} for e in entries]
    goal_context = [{"name": g.name, "progress": g.progress or 0.0} for g in goals]
    task_context = [{"title": t.title, "completed": bool(t.completed)} for t in tasks]
    try:
        return client.extract(payload, goal_context, task_context)
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError(f"Extraction client failed: {e}") from e


def stage_candidates(
    db: Session,
    user_id: UUID,
    result: ExtractionResult,
    pool: ExistingPool,
    goals: Sequence[Goal],
    related_entry_ids: List[str],
    summary: RunSummary,
) -> None:
    """
    Deduplicates each candidate against the pool and stages the survivors.

    Every admitted candidate joins the pool, so later candidates of the same
    run cannot duplicate it either.
    """
    for cand in result.goals:
        if not _admit(pool[SuggestionKind.GOAL], cand.name):
            logger.debug(f"Skipping duplicate goal suggestion '{cand.name}' for user {user_id}")
            summary.goals_skipped += 1
            continue
        add_suggestion(db, SuggestedGoal(
            user_id=user_id,
            name=cand.name,
            description=cand.description,
            category=resolve_goal_category(cand.category, cand.name),
            source="AI",
            related_entry_ids=related_entry_ids,
        ))
        summary.goals_created += 1

    for cand in result.tasks:
        if not _admit(pool[SuggestionKind.TASK], cand.title):
            logger.debug(f"Skipping duplicate task suggestion '{cand.title}' for user {user_id}")
            summary.tasks_skipped += 1
            continue
        add_suggestion(db, SuggestedTask(
            user_id=user_id,
            parent_goal_id=_resolve_parent_goal(cand.goal, goals),
            title=cand.title,
            description=cand.description,
            source="AI",
            related_entry_ids=related_entry_ids,
        ))
        summary.tasks_created += 1

    for cand in result.habits:
        if not _admit(pool[SuggestionKind.HABIT], cand.title):
            logger.debug(f"Skipping duplicate habit suggestion '{cand.title}' for user {user_id}")
            summary.habits_skipped += 1
            continue
        add_suggestion(db, SuggestedHabit(
            user_id=user_id,
            title=cand.title,
            description=cand.description,
            frequency=resolve_habit_frequency(cand.frequency, f"{cand.title} {cand.description or ''}"),
            source="AI",
            related_entry_ids=related_entry_ids,
        ))
        summary.habits_created += 1


def run_for_user(
    db: Session,
    user_id: UUID,
    client: ExtractionClient,
    limit: int = SUGGESTION_BATCH_LIMIT,
    min_length: int = MIN_ENTRY_LENGTH,
) -> RunSummary:
    """
    Runs one extraction batch for a user and stores the new suggestions.

    Args:
        db (Session): SQLAlchemy session.
        user_id (UUID): ID of the user.
        client (ExtractionClient): Text-generation capability.
        limit (int): Maximum journal entries in the batch.
        min_length (int): Entries shorter than this are marked analyzed without extraction.

    Returns:
        RunSummary: Created/skipped counts per category.

    Raises:
        ExtractionError: The extraction call failed. Nothing was written and the
            batch entries stay unanalyzed.
        StorageError: The database failed. The run was rolled back and the batch
            entries stay unanalyzed.
    """
    summary = RunSummary()
    try:
        summary.entries_analyzed = mark_short_entries_analyzed(db, user_id, min_length)
        entries = select_unanalyzed(db, user_id, limit, min_length)
        if not entries:
            logger.info(f"No unanalyzed journal entries for user {user_id}")
            return summary
        pool, goals, tasks, _ = build_existing_pool(db, user_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to load suggestion inputs for user {user_id}: {e}")
        raise StorageError(f"Failed to load suggestion inputs for user {user_id}") from e

    entry_ids = [e.id for e in entries]
    logger.info(f"Running {client.model_tag} suggestion extraction for user {user_id} on {len(entries)} entries")

    try:
        result = _extract(client, entries, goals, tasks)
    except ExtractionError as e:
        db.rollback()
        logger.error(f"Extraction failed for user {user_id}; {len(entry_ids)} entries left unanalyzed: {e}")
        raise

    try:
        stage_candidates(db, user_id, result, pool, goals, [str(i) for i in entry_ids], summary)
        summary.entries_analyzed += mark_analyzed(db, entry_ids, commit=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to store suggestions for user {user_id}: {e}")
        raise StorageError(f"Failed to store suggestions for user {user_id}") from e

    logger.info(
        f"Suggestion run for user {user_id}: "
        f"goals {summary.goals_created}/{summary.goals_skipped}, "
        f"tasks {summary.tasks_created}/{summary.tasks_skipped}, "
        f"habits {summary.habits_created}/{summary.habits_skipped} (created/skipped)"
    )
    return summary


def run_for_all_users(
    session_factory: Callable[[], Session] = SessionLocal,
    client: Optional[ExtractionClient] = None,
    limit: int = SUGGESTION_BATCH_LIMIT,
    max_workers: int = SUGGESTION_MAX_WORKERS,
) -> AllUsersRunReport:
    """
    Runs one batch for every user with unanalyzed journal entries.

    Users run in parallel on a bounded thread pool, each with its own session.
    A failure for one user is logged and reported without affecting the others.

    Args:
        session_factory (Callable[[], Session]): Creates a session per user.
        client (Optional[ExtractionClient]): Defaults to the configured client.
        limit (int): Maximum journal entries per user batch.
        max_workers (int): Upper bound on concurrent user runs.

    Returns:
        AllUsersRunReport: Summaries and failure messages keyed by user id.
    """
    report = AllUsersRunReport()
    with session_factory() as db:
        user_ids = users_with_unanalyzed_entries(db)
    if not user_ids:
        logger.info("No users with unanalyzed journal entries")
        return report

    client = client or default_extraction_client()
    logger.info(f"Processing suggestions for {len(user_ids)} users")

    def _run_one(user_id: UUID) -> RunSummary:
        with session_factory() as user_db:
            return run_for_user(user_db, user_id, client, limit)

    workers = max(1, min(int(max_workers), len(user_ids)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="suggestions") as pool:
        futures = {pool.submit(_run_one, uid): uid for uid in user_ids}
        for fut in as_completed(futures):
            uid = futures[fut]
            try:
                report.summaries[str(uid)] = fut.result()
            except SuggestionError as e:
                logger.error(f"Suggestion run failed for user {uid}: {e}")
                report.failures[str(uid)] = str(e)
            except Exception as e:
                logger.exception(f"Unexpected error in suggestion run for user {uid}")
                report.failures[str(uid)] = f"Unexpected error: {e}"
    return report


def run_for_user_in_background(
    user_id: UUID,
    limit: int = SUGGESTION_BATCH_LIMIT,
    session_factory: Callable[[], Session] = SessionLocal,
    client: Optional[ExtractionClient] = None,
) -> None:
    """
    Fire-and-forget entry point for request handlers.

    Opens its own session; any failure is logged and never reaches the request
    that scheduled the run.
    """
    try:
        with session_factory() as db:
            summary = run_for_user(db, user_id, client or default_extraction_client(), limit)
        logger.info(f"Background suggestion run for user {user_id} created {summary.total_created} suggestions")
    except Exception:
        logger.exception(f"Background suggestion run failed for user {user_id}")


def run_for_all_users_in_background(limit: int = SUGGESTION_BATCH_LIMIT) -> None:
    try:
        report = run_for_all_users(limit=limit)
        logger.info(
            f"Background run for all users finished: {len(report.summaries)} succeeded, "
            f"{len(report.failures)} failed"
        )
    except Exception:
        logger.exception("Background suggestion run for all users failed")
