from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship
from mindlog.core.database import Base
import uuid


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False, default="normal")  # "normal", "admin"

    journals = relationship("JournalEntry", back_populates="user", cascade="all, delete-orphan")
