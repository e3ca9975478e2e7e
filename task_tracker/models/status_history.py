"""
Status History Model - Append-only record of every status a task entered
"""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid

from task_tracker.database import Base, utcnow
from task_tracker.models.task import TaskStatus

class StatusHistory(Base):
    """
    Status history table - one row per status change, never updated.
    `sequence` counts up per task and orders the trail; timestamps can tie.
    """
    __tablename__ = "status_history"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    task_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sequence = Column(Integer, nullable=False)  # 1, 2, 3... within the task
    status = Column(SQLEnum(TaskStatus, name="task_status"), nullable=False)  # Status entered
    notes = Column(Text, nullable=False)  # Why the task moved
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    task = relationship("Task", back_populates="status_history")

    def __repr__(self):
        return f"<StatusHistory {self.task_id} -> {self.status} at {self.created_at}>"
