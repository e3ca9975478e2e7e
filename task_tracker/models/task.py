"""
Task Model - Represents work items moving through the delivery workflow
"""

from sqlalchemy import Column, String, Text, DateTime, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum
import uuid

from task_tracker.database import Base, utcnow

class TaskStatus(str, enum.Enum):
    """
    Workflow stages in the order a task moves through them.
    Declaration order IS the workflow order - do not reorder members.
    """
    INVESTIGATION = "INVESTIGATION"  # Understanding the problem
    PLANNING = "PLANNING"  # Designing the approach
    IN_PROGRESS = "IN_PROGRESS"  # Being implemented
    IN_TESTING = "IN_TESTING"  # Being verified
    IN_REVIEW = "IN_REVIEW"  # Pull request under review
    DONE = "DONE"  # Merged and finished

    @classmethod
    def ordered(cls) -> list:
        """All statuses in workflow order"""
        return list(cls)

    @classmethod
    def initial(cls) -> "TaskStatus":
        return cls.INVESTIGATION

    @classmethod
    def terminal(cls) -> "TaskStatus":
        return cls.DONE

class TransitionMode(str, enum.Enum):
    """How strictly a requested status is checked against the current one"""
    SEQUENTIAL = "sequential"  # Advance exactly one stage
    OVERRIDE = "override"  # Board drag-and-drop: any stage, checklist gate still applies

class Task(Base):
    """
    Task table - a unit of work plus its status audit trail.
    Invariant: status always equals the newest StatusHistory entry's status.
    """
    __tablename__ = "tasks"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # Task content
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)

    # Workflow position - only written together with a StatusHistory row
    status = Column(
        SQLEnum(TaskStatus, name="task_status"),
        default=TaskStatus.INVESTIGATION,
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False, index=True)

    # Children are owned by the task and removed with it
    status_history = relationship(
        "StatusHistory",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="StatusHistory.sequence.desc()",
    )
    pr_checklist = relationship(
        "PRChecklistItem",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PRChecklistItem.position",
    )
    pr_metadata = relationship(
        "PRMetadata",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
        uselist=False,
    )

    def next_history_sequence(self) -> int:
        """Sequence number for the next StatusHistory row (1 for a new task)"""
        return max((entry.sequence for entry in self.status_history), default=0) + 1

    def checklist_complete(self) -> bool:
        """True when every PR checklist item is checked"""
        return all(item.checked for item in self.pr_checklist)

    def __repr__(self):
        return f"<Task {self.id}: {self.title} ({self.status})>"
