"""Task model"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, Index
from datetime import datetime
from app.core.database import Base


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_id_position", "user_id", "position"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    priority = Column(String, nullable=False, default="medium")
    completed = Column(Boolean, nullable=False, default=False)
    deadline = Column(DateTime, nullable=True, index=True)

    # display order among the owner's tasks, only written by the ordering service
    position = Column(Integer, nullable=False, default=0)
    voice_note_ref = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
