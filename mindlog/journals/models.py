import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from mindlog.core.database import Base, utcnow


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id = Column(Uuid, primary_key=True, index=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), index=True, nullable=False)

    title = Column(String, nullable=True)
    content = Column(String, nullable=False)
    transcript = Column(String, nullable=True)  # full chat transcript when content is a summary
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    is_journal = Column(Boolean, nullable=False, default=True)  # False for ephemeral chat turns
    analyzed = Column(Boolean, nullable=False, default=False, index=True)

    user = relationship("User", back_populates="journals")
