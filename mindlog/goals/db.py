from uuid import UUID, uuid4
from typing import List, Optional

from sqlalchemy.orm import Session
from mindlog.goals.models import Goal, Task, Habit
from mindlog.goals.schemas import GoalCreate, TaskCreate, HabitCreate


def create_goal(db: Session, goal: GoalCreate, user_id: UUID) -> Goal:
    """
    Creates a new goal for the user.

    Args:
        db (Session): SQLAlchemy session.
        goal (GoalCreate): Input data for the goal.
        user_id (UUID): ID of the user.

    Returns:
        Goal: The created goal object.
    """
    new_goal = Goal(
        id=uuid4(),
        user_id=user_id,
        name=goal.name,
        description=goal.description,
        category=goal.category,
        ai_generated=goal.ai_generated,
    )
    db.add(new_goal)
    db.commit()
    db.refresh(new_goal)
    return new_goal


def create_task(db: Session, task: TaskCreate, user_id: UUID) -> Task:
    new_task = Task(
        id=uuid4(),
        user_id=user_id,
        goal_id=task.goal_id,
        title=task.title,
        description=task.description,
        priority=task.priority,
        ai_generated=task.ai_generated,
    )
    db.add(new_task)
    db.commit()
    db.refresh(new_task)
    return new_task


def create_habit(db: Session, habit: HabitCreate, user_id: UUID) -> Habit:
    new_habit = Habit(
        id=uuid4(),
        user_id=user_id,
        title=habit.title,
        description=habit.description,
        frequency=habit.frequency,
        ai_generated=habit.ai_generated,
    )
    db.add(new_habit)
    db.commit()
    db.refresh(new_habit)
    return new_habit


def get_user_goals(db: Session, user_id: UUID, skip: int = 0, limit: Optional[int] = 100) -> List[Goal]:
    """
    Retrieves all goals for a given user (paginated).

    Args:
        db (Session): SQLAlchemy session.
        user_id (UUID): ID of the user.
        skip (int): Pagination offset.
        limit (Optional[int]): Pagination limit. None returns every goal.

    Returns:
        List[Goal]: List of goals.
    """
    return db.query(Goal).filter(
        Goal.user_id == user_id
    ).order_by(Goal.created_at).offset(skip).limit(limit).all()


def get_user_tasks(db: Session, user_id: UUID, skip: int = 0, limit: Optional[int] = 100) -> List[Task]:
    return db.query(Task).filter(
        Task.user_id == user_id
    ).order_by(Task.created_at).offset(skip).limit(limit).all()


def get_user_habits(db: Session, user_id: UUID, skip: int = 0, limit: Optional[int] = 100) -> List[Habit]:
    return db.query(Habit).filter(
        Habit.user_id == user_id
    ).order_by(Habit.created_at).offset(skip).limit(limit).all()
