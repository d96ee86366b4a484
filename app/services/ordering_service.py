"""
Ordering service - position assignment for an owner's tasks.

A reorder receives the full list of task ids the client shows, in the order
the user dropped them, and writes ``position = index`` for each of them in a
single transaction. Tasks left out of the list keep their position.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, StorageError, ValidationError
from app.models.task import Task

logger = logging.getLogger(__name__)


def display_order(tasks: Iterable[Task]) -> List[Task]:
    """Sort tasks the way they are shown: position, then creation, then id.

    Tasks that were never reordered all sit at position 0, so they fall back
    to creation order.
    """
    return sorted(tasks, key=lambda t: (t.position or 0, t.created_at or datetime.min, t.id))


def reorder_tasks(db: Session, user_id: int, task_ids: Sequence[int]) -> List[Task]:
    """
    Assign ``position = index`` to each id of ``task_ids`` for ``user_id``.

    All or nothing: if one id is unknown or belongs to another user, nothing
    is written and NotFoundError is raised. Returns the tasks in the
    submitted order.
    """
    if not task_ids:
        return []

    if len(set(task_ids)) != len(task_ids):
        raise ValidationError("Duplicate task ids in reorder request")

    # FOR UPDATE serializes concurrent reorders of the same rows (no-op on SQLite)
    tasks = db.query(Task).filter(
        Task.id.in_(task_ids),
        Task.user_id == user_id
    ).with_for_update().all()

    by_id = {task.id: task for task in tasks}
    missing = [task_id for task_id in task_ids if task_id not in by_id]
    if missing:
        db.rollback()
        logger.info(f"Reorder rejected for user {user_id}: unknown ids {missing}")
        raise NotFoundError()

    now = datetime.utcnow()
    moved = 0
    try:
        for index, task_id in enumerate(task_ids):
            task = by_id[task_id]
            if task.position != index:
                task.position = index
                task.updated_at = now
                moved += 1
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Reorder failed for user {user_id}: {e}")
        raise StorageError("Could not save task order") from e

    logger.info(f"Reordered {len(task_ids)} tasks for user {user_id} ({moved} moved)")

    return [by_id[task_id] for task_id in task_ids]
