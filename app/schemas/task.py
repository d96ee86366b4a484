"""Pydantic schemas for task request/response validation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional, List, Literal, Dict

Priority = Literal["low", "medium", "high"]
GroupBy = Literal["none", "priority", "status"]


class TaskCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    priority: Priority = "medium"
    completed: bool = False
    deadline: Optional[datetime] = None


class TaskUpdate(BaseModel):
    """Partial update: only the fields present in the body are applied."""

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    priority: Optional[Priority] = None
    completed: Optional[bool] = None
    deadline: Optional[datetime] = None
    voice_note_ref: Optional[str] = None

    @field_validator("title", "priority", "completed")
    @classmethod
    def not_null(cls, value):
        # these columns are NOT NULL, an explicit null is a client error
        if value is None:
            raise ValueError("may not be null")
        return value


class TaskResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str]
    priority: str
    completed: bool
    deadline: Optional[datetime]
    position: int
    voice_note_ref: Optional[str]
    voice_note_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReorderRequest(BaseModel):
    """Full ordering of the tasks the client currently shows."""

    task_ids: List[int] = Field(alias="taskIds")

    model_config = ConfigDict(populate_by_name=True)


class FilterOptions(BaseModel):
    priority: Optional[Priority] = None
    show_completed: bool = True
    group_by: Optional[GroupBy] = None


class TaskGroup(BaseModel):
    title: str
    tasks: List[TaskResponse]


class TaskStats(BaseModel):
    total: int
    completed: int
    completion_rate: int
    by_priority: Dict[str, int]
