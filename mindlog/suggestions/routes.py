from uuid import UUID
from typing import Any, Dict, List
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Security
from sqlalchemy.orm import Session

from mindlog.auth.service import get_current_user_id, require_admin
from mindlog.core.config import SUGGESTION_BATCH_LIMIT
from mindlog.core.database import get_db
from mindlog.core.dependency import get_extraction_client
from mindlog.goals.schemas import GoalResponse, HabitResponse, TaskResponse
from mindlog.suggestions import lifecycle
from mindlog.suggestions.db import list_all_suggestions, list_suggestions
from mindlog.suggestions.errors import (
    ExtractionError,
    ForbiddenError,
    NotFoundError,
    SuggestionError,
)
from mindlog.suggestions.pipeline import run_for_all_users_in_background, run_for_user
from mindlog.suggestions.providers.base import ExtractionClient
from mindlog.suggestions.schemas import (
    GenerateSuggestionsResponse,
    SuggestedGoalBase,
    SuggestedHabitBase,
    SuggestedTaskBase,
    SuggestionKind,
    SuggestionListResponse,
    SuggestionResponse,
)

router = APIRouter(prefix="/suggestions", tags=["Suggestions"])
logger = logging.getLogger(__name__)

SUGGESTION_SCHEMAS = {
    SuggestionKind.GOAL: SuggestedGoalBase,
    SuggestionKind.TASK: SuggestedTaskBase,
    SuggestionKind.HABIT: SuggestedHabitBase,
}

DURABLE_SCHEMAS = {
    SuggestionKind.GOAL: GoalResponse,
    SuggestionKind.TASK: TaskResponse,
    SuggestionKind.HABIT: HabitResponse,
}


def _to_http(e: SuggestionError, storage_detail: str = "Failed to store suggestions") -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ForbiddenError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, ExtractionError):
        return HTTPException(
            status_code=502,
            detail="Suggestion extraction failed. Your entries were kept and will be analyzed on the next run.",
        )
    return HTTPException(status_code=500, detail=storage_detail)


def _suggestion_list(db: Session, user_id: UUID) -> SuggestionListResponse:
    rows = list_all_suggestions(db, user_id)
    return SuggestionListResponse(
        goals=[SuggestedGoalBase.model_validate(r) for r in rows["goals"]],
        tasks=[SuggestedTaskBase.model_validate(r) for r in rows["tasks"]],
        habits=[SuggestedHabitBase.model_validate(r) for r in rows["habits"]],
    )


@router.post(
    "/generate",
    response_model=GenerateSuggestionsResponse,
    summary="Generate suggestions from recent journals",
    description="""
                Analyze the user's oldest unanalyzed journal entries and store new goal, task
                and habit suggestions. Candidates that duplicate existing goals, tasks, habits
                or earlier suggestions are skipped.
                """,
    responses={
        200: {"description": "Run completed. The summary may report zero new suggestions."},
        401: {"description": "Unauthorized."},
        502: {"description": "The AI service failed; entries stay unanalyzed."},
        503: {"description": "AI suggestions are not configured."},
        500: {"description": "Failed to store suggestions."},
    },
)
def generate_suggestions_route(
    limit: int = Query(SUGGESTION_BATCH_LIMIT, ge=1, le=20, description="Maximum journal entries to analyze."),
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    client: ExtractionClient = Depends(get_extraction_client),
) -> GenerateSuggestionsResponse:
    try:
        summary = run_for_user(db, user_id, client, limit)
    except SuggestionError as e:
        logger.error(f"Suggestion run failed for user {user_id}: {e}")
        raise _to_http(e)
    except Exception as e:
        logger.error(f"Unexpected error generating suggestions for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate suggestions")

    if summary.total_created:
        message = f"Created {summary.total_created} new suggestions."
    elif summary.entries_analyzed:
        message = "No new suggestions from your recent entries."
    else:
        message = "No new journal entries to analyze."
    return GenerateSuggestionsResponse(
        summary=summary,
        suggestions=_suggestion_list(db, user_id),
        message=message,
    )


@router.post(
    "/process-all",
    response_model=Dict[str, str],
    summary="Process unanalyzed journals for all users",
    description="Admin only. Schedules one suggestion run per user with unanalyzed entries in the background.",
    responses={
        200: {"description": "Run scheduled."},
        401: {"description": "Unauthorized."},
        403: {"description": "Admin privileges required."},
    },
)
def process_all_route(
    background_tasks: BackgroundTasks,
    limit: int = Query(SUGGESTION_BATCH_LIMIT, ge=1, le=20),
    admin_id: UUID = Security(require_admin),
) -> Dict[str, str]:
    logger.info(f"Admin {admin_id} scheduled a suggestion run for all users")
    background_tasks.add_task(run_for_all_users_in_background, limit)
    return {"detail": "Suggestion processing for all users started in the background."}


@router.get(
    "",
    response_model=SuggestionListResponse,
    summary="Get all suggestions",
    description="Retrieve the authenticated user's pending goal, task and habit suggestions.",
    responses={
        200: {"description": "Suggestions retrieved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve suggestions."},
    },
)
def read_suggestions_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> SuggestionListResponse:
    try:
        return _suggestion_list(db, user_id)
    except Exception as e:
        logger.error(f"Failed to fetch suggestions for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve suggestions")


@router.get(
    "/{kind}",
    response_model=List[SuggestionResponse],
    summary="Get suggestions of one kind",
    responses={
        200: {"description": "Suggestions retrieved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve suggestions."},
    },
)
def read_suggestions_by_kind_route(
    kind: SuggestionKind,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[Any]:
    schema = SUGGESTION_SCHEMAS[kind]
    try:
        return [schema.model_validate(r) for r in list_suggestions(db, kind, user_id, skip, limit)]
    except Exception as e:
        logger.error(f"Failed to fetch {kind.value} suggestions for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve suggestions")


@router.get(
    "/{kind}/{suggestion_id}",
    response_model=SuggestionResponse,
    summary="Get a suggestion by ID",
    responses={
        200: {"description": "Suggestion retrieved successfully."},
        401: {"description": "Unauthorized."},
        403: {"description": "Suggestion belongs to another user."},
        404: {"description": "Suggestion not found."},
    },
)
def read_suggestion_route(
    kind: SuggestionKind,
    suggestion_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> Any:
    try:
        suggestion = lifecycle.get_owned_suggestion(db, kind, suggestion_id, user_id)
    except SuggestionError as e:
        raise _to_http(e)
    return SUGGESTION_SCHEMAS[kind].model_validate(suggestion)


@router.post(
    "/{kind}/{suggestion_id}/accept",
    response_model=Dict[str, Any],
    summary="Accept a suggestion",
    description="Promote a suggestion into a goal, task or habit. The suggestion is removed.",
    responses={
        200: {"description": "Suggestion accepted."},
        401: {"description": "Unauthorized."},
        403: {"description": "Suggestion belongs to another user."},
        404: {"description": "Suggestion not found."},
        500: {"description": "Failed to accept suggestion."},
    },
)
def accept_suggestion_route(
    kind: SuggestionKind,
    suggestion_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> Dict[str, Any]:
    try:
        record = lifecycle.accept(db, suggestion_id, kind, user_id)
    except SuggestionError as e:
        logger.error(f"Failed to accept {kind.value} suggestion {suggestion_id} for user {user_id}: {e}")
        raise _to_http(e, "Failed to accept suggestion")
    return {
        "detail": f"{kind.value.capitalize()} suggestion accepted.",
        "kind": kind.value,
        "record": DURABLE_SCHEMAS[kind].model_validate(record).model_dump(mode="json"),
    }


@router.delete(
    "/{kind}/{suggestion_id}",
    response_model=Dict[str, str],
    summary="Reject a suggestion",
    responses={
        200: {"description": "Suggestion rejected."},
        401: {"description": "Unauthorized."},
        403: {"description": "Suggestion belongs to another user."},
        404: {"description": "Suggestion not found."},
        500: {"description": "Failed to reject suggestion."},
    },
)
def reject_suggestion_route(
    kind: SuggestionKind,
    suggestion_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> Dict[str, str]:
    try:
        lifecycle.reject(db, suggestion_id, kind, user_id)
    except SuggestionError as e:
        logger.error(f"Failed to reject {kind.value} suggestion {suggestion_id} for user {user_id}: {e}")
        raise _to_http(e, "Failed to reject suggestion")
    return {"detail": f"{kind.value.capitalize()} suggestion rejected. ID: {suggestion_id}"}
