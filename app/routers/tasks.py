from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Literal, Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.models.task import Task
from app.schemas.task import (
    FilterOptions,
    GroupBy,
    Priority,
    ReorderRequest,
    TaskCreate,
    TaskGroup,
    TaskResponse,
    TaskStats,
    TaskUpdate
)
from app.services import task_service
from app.services.blob_store import BlobStore, get_blob_store
from app.services.ordering_service import display_order, reorder_tasks
from app.services.view_service import compute_stats, derive_groups

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def to_response(task: Task, store: BlobStore) -> TaskResponse:
    response = TaskResponse.model_validate(task)
    if task.voice_note_ref:
        response.voice_note_url = store.url_for(task.voice_note_ref)
    return response


@router.get("", response_model=List[TaskResponse])
def list_tasks(
    order_by: Literal["created", "position"] = Query("created"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store)
):
    """Owner's tasks by creation, or in display order with ``order_by=position``."""
    tasks = task_service.list_tasks(db, current_user.id)
    if order_by == "position":
        tasks = display_order(tasks)
    return [to_response(task, store) for task in tasks]


@router.get("/groups", response_model=List[TaskGroup])
def list_task_groups(
    priority: Optional[Priority] = Query(None),
    show_completed: bool = Query(True),
    group_by: Optional[GroupBy] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store)
):
    """Tasks grouped for display, sorted by their manual position."""
    filters = FilterOptions(priority=priority, show_completed=show_completed, group_by=group_by)
    groups = derive_groups(task_service.list_tasks(db, current_user.id), filters)
    return [
        TaskGroup(title=group["title"], tasks=[to_response(t, store) for t in group["tasks"]])
        for group in groups
    ]


@router.get("/stats", response_model=TaskStats)
def task_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return compute_stats(task_service.list_tasks(db, current_user.id))


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store)
):
    return to_response(task_service.create_task(db, current_user.id, task_data), store)


@router.post("/reorder", response_model=List[TaskResponse])
def reorder(
    request: ReorderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store)
):
    """Persist the order of the submitted task ids (position = index)."""
    tasks = reorder_tasks(db, current_user.id, request.task_ids)
    return [to_response(task, store) for task in tasks]


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store)
):
    return to_response(task_service.get_task(db, current_user.id, task_id), store)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store)
):
    task = task_service.update_task(db, store, current_user.id, task_id, task_data)
    return to_response(task, store)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store)
):
    task_service.delete_task(db, store, current_user.id, task_id)


@router.post("/{task_id}/voice-note", response_model=TaskResponse)
def upload_voice_note(
    task_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store)
):
    """Attach an audio recording to the task, replacing the previous one."""
    # one byte past the limit is enough to reject an oversized upload
    data = file.file.read(settings.VOICE_NOTE_MAX_BYTES + 1)
    task = task_service.attach_voice_note(db, store, current_user.id, task_id, data, file.content_type)
    return to_response(task, store)


@router.delete("/{task_id}/voice-note", response_model=TaskResponse)
def remove_voice_note(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store)
):
    task = task_service.detach_voice_note(db, store, current_user.id, task_id)
    return to_response(task, store)
