# taskboard/schemas/task.py
from pydantic_core import PydanticCustomError
from pydantic import BaseModel, field_validator
from datetime import date
from typing import Optional

from taskboard.models.task import TaskStatus, TaskPriority


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class TaskBase(BaseModel):
    title: str
    description: Optional[str] = None
    type: str
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: Optional[int] = None
    due_date: Optional[date] = None

    @field_validator('title', 'type')
    @classmethod
    def must_not_be_blank(cls, v):
        v = v.strip()
        if not v:
            raise PydanticCustomError('blank', 'must not be blank')
        return v

    @field_validator('description')
    @classmethod
    def strip_description(cls, v):
        return v.strip() if v else None

    @field_validator('priority', mode='before')
    @classmethod
    def default_priority(cls, v):
        return _blank_to_none(v) or TaskPriority.MEDIUM

    @field_validator('assigned_to', 'due_date', mode='before')
    @classmethod
    def blank_is_none(cls, v):
        return _blank_to_none(v)


class TaskCreate(TaskBase):
    pass


class TaskUpdate(TaskBase):
    status: TaskStatus = TaskStatus.OPEN
