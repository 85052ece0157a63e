"""
Task audit trail - modification records and comments.

Both are append-only children of a Task. They are never edited or deleted on
their own; removing a Task removes its trail with it.
"""
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from reports.database import Base
from reports.models.enums import TaskField


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what DateTime columns round-trip."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Modification(Base):
    """
    Who changed which field of a task, and when.

    Invariants:
    - Exactly one record per successful mutation
    - Append-only; changed_at is non-decreasing within a task
    """
    __tablename__ = "task_modifications"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    task_id = Column(String(32), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    changer_id = Column(String(32), nullable=False, index=True)  # No FK: the trail outlives the changer
    field = Column(SQLEnum(TaskField), nullable=False)
    changed_at = Column(DateTime, nullable=False, default=utcnow)

    task = relationship("Task", back_populates="modifications")

    def __repr__(self):
        return f"Modification({self.field.value} by {self.changer_id} at {self.changed_at})"


class Comment(Base):
    """A comment on a task. No edit or delete in the gated engine."""
    __tablename__ = "task_comments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    task_id = Column(String(32), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(String(32), nullable=False)
    text = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    task = relationship("Task", back_populates="comments")
