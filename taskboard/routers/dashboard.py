# taskboard/routers/dashboard.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from taskboard.database import get_db
from taskboard.schemas.principal import Principal
from taskboard.services import task_service
from taskboard.utils import policy
from taskboard.utils.auth import get_current_principal
from taskboard.utils.templates import render

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
def dashboard(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Task list and status counts for the principal's visibility scope

    - Administrator: all tasks
    - Sales Manager: own tasks + tasks of direct reports
    - everyone else: own tasks
    """
    scope = policy.scope_for(principal)
    tasks = task_service.list_tasks(db, scope)

    return render(request, "dashboard.html", {
        "title": "Dashboard",
        "tasks": tasks,
        "stats": task_service.task_stats(tasks),
        "scope": scope,
        "scope_description": policy.describe_scope(scope),
    })
