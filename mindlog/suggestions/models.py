import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Uuid
from mindlog.core.database import Base, utcnow


class SuggestedGoal(Base):
    __tablename__ = "suggested_goals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), index=True, nullable=False)

    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    category = Column(String, nullable=True)
    source = Column(String, nullable=False, default="AI")
    related_entry_ids = Column(JSON, nullable=True)  # list[str] of journal entry ids
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class SuggestedTask(Base):
    __tablename__ = "suggested_tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), index=True, nullable=False)
    parent_goal_id = Column(Uuid, ForeignKey("goals.id", ondelete="SET NULL"), nullable=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    source = Column(String, nullable=False, default="AI")
    related_entry_ids = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class SuggestedHabit(Base):
    __tablename__ = "suggested_habits"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), index=True, nullable=False)

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    frequency = Column(String, nullable=False, default="daily")
    source = Column(String, nullable=False, default="AI")
    related_entry_ids = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
