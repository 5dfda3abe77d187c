from typing import Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class JournalEntryBase(BaseSchema):
    id: UUID
    user_id: UUID
    title: Optional[str] = None
    content: str
    transcript: Optional[str] = None
    date: datetime
    is_journal: bool = True
    analyzed: bool = False


class JournalEntryCreate(BaseSchema):
    title: Optional[str] = None
    content: str
    transcript: Optional[str] = None
    date: Optional[datetime] = None
    is_journal: bool = True
