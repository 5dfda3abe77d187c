from uuid import UUID
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Security
from sqlalchemy.orm import Session

from mindlog.auth.service import get_current_user_id
from mindlog.goals.schemas import (
    GoalCreate,
    GoalResponse,
    TaskCreate,
    TaskResponse,
    HabitCreate,
    HabitResponse,
)
from mindlog.goals.db import (
    create_goal,
    create_task,
    create_habit,
    get_user_goals,
    get_user_tasks,
    get_user_habits,
)
from mindlog.core.database import get_db

router = APIRouter(prefix="/goals", tags=["Goals"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=List[GoalResponse],
    summary="Get all user goals",
    description="Retrieve all goals associated with the authenticated user. Supports pagination.",
    responses={
        200: {"description": "Goals retrieved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve goals."},
    },
)
def read_user_goals_route(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[GoalResponse]:
    try:
        return get_user_goals(db, user_id, skip, limit)
    except Exception as e:
        logger.error(f"Failed to fetch goals for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve goals")


@router.post(
    "",
    response_model=GoalResponse,
    summary="Create a new goal",
    description="Create a new goal for the authenticated user.",
    responses={
        200: {"description": "Goal created successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Goal creation failed."},
    },
)
def create_goal_route(
    goal: GoalCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> GoalResponse:
    try:
        return create_goal(db, goal, user_id)
    except Exception as e:
        logger.error(f"Failed to create goal for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create goal")


@router.get(
    "/tasks",
    response_model=List[TaskResponse],
    summary="Get all user tasks",
    responses={
        200: {"description": "Tasks retrieved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve tasks."},
    },
)
def read_user_tasks_route(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[TaskResponse]:
    try:
        return get_user_tasks(db, user_id, skip, limit)
    except Exception as e:
        logger.error(f"Failed to fetch tasks for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve tasks")


@router.post(
    "/tasks",
    response_model=TaskResponse,
    summary="Create a new task",
    responses={
        200: {"description": "Task created successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Task creation failed."},
    },
)
def create_task_route(
    task: TaskCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> TaskResponse:
    try:
        return create_task(db, task, user_id)
    except Exception as e:
        logger.error(f"Failed to create task for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create task")


@router.get(
    "/habits",
    response_model=List[HabitResponse],
    summary="Get all user habits",
    responses={
        200: {"description": "Habits retrieved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve habits."},
    },
)
def read_user_habits_route(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[HabitResponse]:
    try:
        return get_user_habits(db, user_id, skip, limit)
    except Exception as e:
        logger.error(f"Failed to fetch habits for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve habits")


@router.post(
    "/habits",
    response_model=HabitResponse,
    summary="Create a new habit",
    responses={
        200: {"description": "Habit created successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Habit creation failed."},
    },
)
def create_habit_route(
    habit: HabitCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> HabitResponse:
    try:
        return create_habit(db, habit, user_id)
    except Exception as e:
        logger.error(f"Failed to create habit for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create habit")
