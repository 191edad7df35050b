# taskboard/routers/task.py
import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from taskboard.database import get_db
from taskboard.models import TaskStatus, TaskPriority
from taskboard.schemas.principal import Principal
from taskboard.schemas.task import TaskCreate, TaskUpdate
from taskboard.services import task_service
from taskboard.utils import policy
from taskboard.utils.auth import get_current_principal
from taskboard.utils.errors import Forbidden, ValidationError, validation_message
from taskboard.utils.templates import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _form_context(users, **extra) -> dict:
    context = {
        "users": users,
        "statuses": list(TaskStatus),
        "priorities": list(TaskPriority),
    }
    context.update(extra)
    return context


@router.get("/create")
def create_task_page(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    users = task_service.assignable_users(db, principal)
    return render(request, "tasks/create.html", _form_context(users, title="Create Task", form={}))


@router.post("/create")
def create_task(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    type: str = Form(""),
    priority: str = Form(""),
    assigned_to: str = Form(""),
    due_date: str = Form(""),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Create a task; Sales Users always end up assigned to themselves"""
    form = {
        "title": title,
        "description": description,
        "type": type,
        "priority": priority,
        "assigned_to": assigned_to,
        "due_date": due_date,
    }
    try:
        data = TaskCreate.model_validate(form)
        task_service.create_task(db, principal, data)
    except PydanticValidationError as e:
        error = validation_message(e)
    except ValidationError as e:
        error = e.message
    else:
        return RedirectResponse("/dashboard?success=Task created successfully", status_code=status.HTTP_303_SEE_OTHER)

    return render(
        request,
        "tasks/create.html",
        _form_context(task_service.assignable_users(db, principal), title="Create Task", form=form, error=error),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@router.get("/{task_id}")
def view_task(
    task_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    task = task_service.get_task(db, task_id)
    if not policy.can_view(principal, task):
        raise Forbidden("You do not have permission to view this task")

    return render(request, "tasks/view.html", {
        "title": "Task Details",
        "task": task,
        "can_edit": policy.can_edit(principal, task),
        "can_delete": policy.can_delete(principal, task),
    })


@router.get("/{task_id}/edit")
def edit_task_page(
    task_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    task = task_service.get_task(db, task_id)
    if not policy.can_edit(principal, task):
        raise Forbidden("You do not have permission to edit this task")

    users = task_service.active_users(db)
    return render(request, "tasks/edit.html", _form_context(users, title="Edit Task", task=task))


@router.post("/{task_id}/edit")
def update_task(
    task_id: int,
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    type: str = Form(""),
    status_value: str = Form("", alias="status"),
    priority: str = Form(""),
    assigned_to: str = Form(""),
    due_date: str = Form(""),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    task = task_service.get_task(db, task_id)
    if not policy.can_edit(principal, task):
        raise Forbidden("You do not have permission to edit this task")

    form = {
        "title": title,
        "description": description,
        "type": type,
        "status": status_value or task.status.value,
        "priority": priority,
        "assigned_to": assigned_to,
        "due_date": due_date,
    }
    try:
        data = TaskUpdate.model_validate(form)
        task_service.update_task(db, principal, task, data)
    except PydanticValidationError as e:
        error = validation_message(e)
    except ValidationError as e:
        error = e.message
    else:
        return RedirectResponse("/dashboard?success=Task updated successfully", status_code=status.HTTP_303_SEE_OTHER)

    db.rollback()
    return render(
        request,
        "tasks/edit.html",
        _form_context(task_service.active_users(db), title="Edit Task", task=task, form=form, error=error),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@router.post("/{task_id}/delete")
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    task = task_service.get_task(db, task_id)
    if not policy.can_delete(principal, task):
        raise Forbidden("You do not have permission to delete tasks")

    task_service.delete_task(db, task)
    return RedirectResponse("/dashboard?success=Task deleted successfully", status_code=status.HTTP_303_SEE_OTHER)
