from datetime import datetime
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field, StringConstraints


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class SuggestionKind(str, Enum):
    GOAL = "goal"
    TASK = "task"
    HABIT = "habit"


# Stored suggestions

class SuggestedGoalBase(BaseSchema):
    kind: Literal["goal"] = "goal"
    id: UUID
    user_id: UUID
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    source: str = "AI"
    related_entry_ids: Optional[List[str]] = None
    created_at: datetime


class SuggestedTaskBase(BaseSchema):
    kind: Literal["task"] = "task"
    id: UUID
    user_id: UUID
    parent_goal_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    source: str = "AI"
    related_entry_ids: Optional[List[str]] = None
    created_at: datetime


class SuggestedHabitBase(BaseSchema):
    kind: Literal["habit"] = "habit"
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None
    frequency: str = "daily"
    source: str = "AI"
    related_entry_ids: Optional[List[str]] = None
    created_at: datetime


SuggestionResponse = Annotated[
    Union[SuggestedGoalBase, SuggestedTaskBase, SuggestedHabitBase], Field(discriminator="kind")
]


class SuggestionListResponse(BaseSchema):
    goals: List[SuggestedGoalBase] = []
    tasks: List[SuggestedTaskBase] = []
    habits: List[SuggestedHabitBase] = []


# Extraction contract

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class GoalCandidate(BaseModel):
    name: NonBlankStr = Field(validation_alias=AliasChoices("name", "title"))
    description: Optional[str] = None
    category: Optional[str] = None


class TaskCandidate(BaseModel):
    title: NonBlankStr = Field(validation_alias=AliasChoices("title", "name"))
    description: Optional[str] = None
    goal: Optional[str] = None  # name of the goal this task belongs to, if any


class HabitCandidate(BaseModel):
    title: NonBlankStr = Field(validation_alias=AliasChoices("title", "name"))
    description: Optional[str] = None
    frequency: Optional[str] = None


class ExtractionResult(BaseModel):
    goals: List[GoalCandidate] = []
    tasks: List[TaskCandidate] = []
    habits: List[HabitCandidate] = []


# Run reporting

class RunSummary(BaseModel):
    goals_created: int = 0
    tasks_created: int = 0
    habits_created: int = 0
    goals_skipped: int = 0
    tasks_skipped: int = 0
    habits_skipped: int = 0
    entries_analyzed: int = 0

    @property
    def total_created(self) -> int:
        return self.goals_created + self.tasks_created + self.habits_created


class GenerateSuggestionsResponse(BaseModel):
    summary: RunSummary
    suggestions: SuggestionListResponse
    message: Optional[str] = None


class AllUsersRunReport(BaseModel):
    summaries: Dict[str, RunSummary] = {}
    failures: Dict[str, str] = {}
