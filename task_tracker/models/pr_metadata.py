"""
PR Metadata Model - Ticket and review details for a task's pull request
"""

from sqlalchemy import Column, String, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship
import uuid

from task_tracker.database import Base

PR_METADATA_FIELDS = ("ticket_id", "ticket_link", "description", "testing_plan")

class PRMetadata(Base):
    """PR metadata table - at most one row per task (unique task_id)"""
    __tablename__ = "pr_metadata"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    task_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    ticket_id = Column(String(100), nullable=True)  # External ticket key, e.g. PROJ-123
    ticket_link = Column(String(500), nullable=True)  # URL of the external ticket
    description = Column(Text, nullable=True)  # PR description
    testing_plan = Column(Text, nullable=True)  # How the change was verified

    task = relationship("Task", back_populates="pr_metadata")

    def __repr__(self):
        return f"<PRMetadata task={self.task_id} ticket={self.ticket_id}>"
