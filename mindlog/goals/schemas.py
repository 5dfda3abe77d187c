from datetime import datetime
from typing import Optional, Literal
from uuid import UUID
from pydantic import BaseModel


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class GoalResponse(BaseSchema):
    id: UUID
    user_id: UUID
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    progress: float = 0.0
    status: str = "in_progress"
    ai_generated: bool = False
    created_at: datetime
    completed_at: Optional[datetime] = None


class GoalCreate(BaseSchema):
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    ai_generated: bool = False


class TaskResponse(BaseSchema):
    id: UUID
    user_id: UUID
    goal_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    priority: str = "medium"
    completed: bool = False
    completed_at: Optional[datetime] = None
    ai_generated: bool = False
    created_at: datetime


class TaskCreate(BaseSchema):
    title: str
    description: Optional[str] = None
    goal_id: Optional[UUID] = None
    priority: Literal["low", "medium", "high"] = "medium"
    ai_generated: bool = False


class HabitResponse(BaseSchema):
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None
    frequency: str = "daily"
    streak: int = 0
    ai_generated: bool = False
    created_at: datetime


class HabitCreate(BaseSchema):
    title: str
    description: Optional[str] = None
    frequency: Literal["daily", "weekly", "monthly"] = "daily"
    ai_generated: bool = False
