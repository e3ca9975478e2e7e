"""
PR Checklist Model - Review checklist cloned onto every task
"""

from sqlalchemy import Column, String, Boolean, Integer, ForeignKey, Uuid
from sqlalchemy.orm import relationship
import uuid

from task_tracker.database import Base

# Copied onto each task at creation; text and count never change afterwards
DEFAULT_PR_CHECKLIST = (
    "Code follows project style guidelines",
    "All tests are passing",
    "Documentation has been updated",
    "Self-review has been completed",
    "No unnecessary debug code or comments",
    "No sensitive information is exposed",
    "Performance considerations have been addressed",
    "Accessibility requirements have been met",
)

class PRChecklistItem(Base):
    """Checklist item table - only `checked` is mutable"""
    __tablename__ = "pr_checklist_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    task_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    text = Column(String(255), nullable=False)
    checked = Column(Boolean, default=False, nullable=False)
    position = Column(Integer, default=0, nullable=False)  # Index in DEFAULT_PR_CHECKLIST

    task = relationship("Task", back_populates="pr_checklist")

    @classmethod
    def from_template(cls) -> list:
        """Fresh, unchecked items for a new task"""
        return [cls(text=text, checked=False, position=i) for i, text in enumerate(DEFAULT_PR_CHECKLIST)]

    def __repr__(self):
        return f"<PRChecklistItem {self.id}: {'x' if self.checked else ' '} {self.text}>"
