"""Task service - owner-scoped persistence of tasks and their voice notes"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import NotFoundError, StorageError, ValidationError
from app.models.task import Task
from app.schemas.task import TaskCreate, TaskUpdate
from app.services.blob_store import BlobStore

logger = logging.getLogger(__name__)


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Could not {action}: {e}")
        raise StorageError(f"Could not {action}") from e


def list_tasks(db: Session, user_id: int) -> List[Task]:
    return db.query(Task).filter(
        Task.user_id == user_id
    ).order_by(Task.created_at, Task.id).all()


def get_task(db: Session, user_id: int, task_id: int) -> Task:
    # another user's task is reported exactly like a missing one
    task = db.query(Task).filter(
        Task.id == task_id,
        Task.user_id == user_id
    ).first()

    if not task:
        raise NotFoundError()
    return task


def create_task(db: Session, user_id: int, task_data: TaskCreate) -> Task:
    new_task = Task(
        user_id=user_id,
        title=task_data.title,
        description=task_data.description,
        priority=task_data.priority,
        completed=task_data.completed,
        deadline=task_data.deadline,
        position=0
    )
    db.add(new_task)
    _commit(db, "create task")
    db.refresh(new_task)
    return new_task


def update_task(db: Session, store: BlobStore, user_id: int, task_id: int, task_data: TaskUpdate) -> Task:
    task = get_task(db, user_id, task_id)
    previous_ref = task.voice_note_ref

    update_data = task_data.model_dump(exclude_unset=True)
    # a ref can only be kept or cleared here, new audio goes through attach_voice_note
    new_ref = update_data.get("voice_note_ref")
    if new_ref is not None and new_ref != previous_ref:
        raise ValidationError("Voice notes must be uploaded")

    for field, value in update_data.items():
        setattr(task, field, value)
    task.updated_at = datetime.utcnow()

    _commit(db, "update task")

    if "voice_note_ref" in update_data and previous_ref and previous_ref != task.voice_note_ref:
        store.delete(previous_ref)

    db.refresh(task)
    return task


def delete_task(db: Session, store: BlobStore, user_id: int, task_id: int) -> None:
    task = get_task(db, user_id, task_id)
    voice_note_ref = task.voice_note_ref

    db.delete(task)
    _commit(db, "delete task")
    logger.info(f"Deleted task {task_id} of user {user_id}")

    if voice_note_ref:
        store.delete(voice_note_ref)


def attach_voice_note(
    db: Session,
    store: BlobStore,
    user_id: int,
    task_id: int,
    data: bytes,
    content_type: Optional[str]
) -> Task:
    """
    Store an audio blob and attach it to the task, replacing any previous one.

    Content type and size are checked before anything is written. Once the
    blob is stored, any later failure deletes it again so no orphan is left
    behind; the original error is the one raised.
    """
    if not content_type or not content_type.startswith("audio/"):
        raise ValidationError("Voice note must be an audio file")

    if not data:
        raise ValidationError("Voice note is empty")
    if len(data) > settings.VOICE_NOTE_MAX_BYTES:
        raise ValidationError("Voice note is too large")

    ref = store.save(data, content_type)
    try:
        task = get_task(db, user_id, task_id)
        previous_ref = task.voice_note_ref
        task.voice_note_ref = ref
        task.updated_at = datetime.utcnow()
        _commit(db, "attach voice note")
    except Exception:
        try:
            store.delete(ref)
        except StorageError as cleanup_error:
            logger.error(f"Could not remove voice note {ref} after failed attach: {cleanup_error}")
        raise

    if previous_ref:
        store.delete(previous_ref)
        logger.info(f"Replaced voice note of task {task_id}")
    else:
        logger.info(f"Attached voice note to task {task_id}")

    db.refresh(task)
    return task


def detach_voice_note(db: Session, store: BlobStore, user_id: int, task_id: int) -> Task:
    task = get_task(db, user_id, task_id)
    previous_ref = task.voice_note_ref
    if previous_ref is None:
        return task

    task.voice_note_ref = None
    task.updated_at = datetime.utcnow()
    _commit(db, "remove voice note")
    store.delete(previous_ref)

    db.refresh(task)
    return task
