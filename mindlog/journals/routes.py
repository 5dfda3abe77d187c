from uuid import UUID
from typing import List
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Security
from sqlalchemy.orm import Session

from mindlog.auth.service import get_current_user_id
from mindlog.core.config import MIN_ENTRY_LENGTH
from mindlog.core.database import get_db
from mindlog.journals.schemas import JournalEntryCreate, JournalEntryBase
from mindlog.journals.db import create_journal, get_journal, get_user_journals
from mindlog.suggestions.pipeline import run_for_user_in_background
from mindlog.suggestions.selector import entry_text, mark_analyzed

router = APIRouter(prefix="/journals", tags=["Journals"])
logger = logging.getLogger(__name__)


@router.get(
    "/all",
    response_model=List[JournalEntryBase],
    summary="Get all journal entries",
    description="Retrieve a paginated list of all journal entries for the authenticated user.",
    responses={
        200: {"description": "Journal entries retrieved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve journal entries."},
    },
)
def get_journals_route(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[JournalEntryBase]:
    try:
        return get_user_journals(db, user_id, skip, limit)
    except Exception as e:
        logger.error(f"Error fetching journals for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch journal entries")


@router.get(
    "/{journal_id}",
    response_model=JournalEntryBase,
    summary="Get a journal by ID",
    description="Retrieve a specific journal entry by its unique identifier.",
    responses={
        200: {"description": "Journal retrieved successfully."},
        401: {"description": "Unauthorized."},
        404: {"description": "Journal not found."},
        500: {"description": "Failed to retrieve journal."},
    },
)
def read_journal_route(
    journal_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> JournalEntryBase:
    try:
        journal = get_journal(db, journal_id, user_id)
    except Exception as e:
        logger.error(f"Error retrieving journal {journal_id} for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve journal")
    if journal is None:
        raise HTTPException(status_code=404, detail="Journal not found")
    return journal


@router.post(
    "",
    response_model=JournalEntryBase,
    summary="Create a new journal",
    description="""
                Create a new journal entry for the authenticated user.
                Journal entries long enough to analyze schedule a background suggestion run;
                shorter ones are marked analyzed right away.
                """,
    responses={
        200: {"description": "Journal created successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to create journal."},
    },
)
def create_journal_route(
    journal: JournalEntryCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> JournalEntryBase:
    try:
        new_journal = create_journal(db, journal, user_id)
    except Exception as e:
        logger.error(f"Error creating journal for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create journal")

    if not new_journal.is_journal:
        return new_journal

    if len(entry_text(new_journal)) >= MIN_ENTRY_LENGTH:
        logger.info(f"Scheduling suggestion run for user {user_id} after journal {new_journal.id}")
        background_tasks.add_task(run_for_user_in_background, user_id)
        return new_journal

    try:
        mark_analyzed(db, [new_journal.id])
        db.refresh(new_journal)
    except Exception as e:
        # The entry is saved; the next run marks it analyzed instead.
        logger.error(f"Failed to mark short journal {new_journal.id} analyzed: {e}")
    return new_journal
