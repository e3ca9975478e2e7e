"""
Sample Data - Populate an empty database with a few example tasks

Usage:
    python -m task_tracker.seed
"""

from sqlalchemy.orm import Session
import logging
import sys

from task_tracker.database import SessionLocal, init_db
from task_tracker.models import Task, TaskStatus
from task_tracker.services import tasks as task_service
from task_tracker.services.transitions import TransitionMode, apply_transition

logger = logging.getLogger(__name__)

SAMPLE_TASKS = [
    {
        "title": "Implement user authentication",
        "description": "Add login, registration and password reset to the application.",
        "moves": [],
    },
    {
        "title": "Refactor database queries",
        "description": "Some dashboard queries are slow; remove N+1 patterns and add indexes.",
        "moves": [
            (TaskStatus.PLANNING, "Planning optimizations: query batching and better indexes."),
        ],
    },
    {
        "title": "Add dark mode",
        "description": "Support a dark colour scheme that follows the OS preference.",
        "moves": [
            (TaskStatus.PLANNING, "Agreed on CSS variables for theme colours."),
            (TaskStatus.IN_PROGRESS, "Theme toggle implemented, wiring up components."),
        ],
    },
]

def seed_sample_tasks(db: Session) -> list:
    """
    Create the sample tasks if the database has none.
    Each move goes through the normal sequential transition rules.
    """
    if db.query(Task).count():
        logger.info("⏭️  Tasks already present, skipping seed")
        return []

    created = []
    for sample in SAMPLE_TASKS:
        task = task_service.create_task(db, title=sample["title"], description=sample["description"])
        for status, notes in sample["moves"]:
            task = apply_transition(db, task.id, status, notes, mode=TransitionMode.SEQUENTIAL)
        created.append(task)

    logger.info(f"🌱 Seeded {len(created)} tasks")
    return created

def main() -> int:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    init_db()
    db = SessionLocal()
    try:
        seed_sample_tasks(db)
    finally:
        db.close()
    return 0

if __name__ == "__main__":
    sys.exit(main())
