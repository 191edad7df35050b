# taskboard/services/task_service.py
"""
Task queries and commands, parameterised by the access policy's scope
"""

import logging
from typing import Dict, Iterable, List

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, aliased

from taskboard.models import Task, TaskStatus, User
from taskboard.schemas.principal import Principal
from taskboard.schemas.task import TaskCreate, TaskUpdate
from taskboard.utils import policy
from taskboard.utils.errors import NotFound, ValidationError
from taskboard.utils.policy import Scope, ScopeKind

logger = logging.getLogger(__name__)


def _task_query(db: Session):
    return db.query(Task).options(
        joinedload(Task.assignee),
        joinedload(Task.creator),
    )


def list_tasks(db: Session, scope: Scope) -> List[Task]:
    """Tasks visible under a scope, newest first"""
    query = _task_query(db)

    if scope.kind == ScopeKind.TEAM:
        assignee = aliased(User)
        query = query.join(assignee, Task.assigned_to == assignee.id).filter(
            or_(
                assignee.manager_id == scope.user_id,
                Task.assigned_to == scope.user_id,
            )
        )
    elif scope.kind == ScopeKind.OWN:
        query = query.filter(Task.assigned_to == scope.user_id)

    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def task_stats(tasks: Iterable[Task]) -> Dict[str, int]:
    stats = {"total": 0}
    for task_status in TaskStatus:
        stats[task_status.value] = 0
    for task in tasks:
        stats["total"] += 1
        stats[task.status.value] += 1
    return stats


def get_task(db: Session, task_id: int) -> Task:
    task = _task_query(db).filter(Task.id == task_id).first()
    if not task:
        raise NotFound("Task not found")
    return task


def active_users(db: Session) -> List[User]:
    return (
        db.query(User)
        .filter(User.status == "active")
        .order_by(User.first_name, User.last_name)
        .all()
    )


def assignable_users(db: Session, principal: Principal) -> List[User]:
    """Candidates for the assignee dropdown on a new task"""
    if not policy.can_assign_others(principal):
        return []
    return active_users(db)


def _active_assignee(db: Session, user_id: int) -> User:
    assignee = db.query(User).filter(User.id == user_id, User.status == "active").first()
    if not assignee:
        raise ValidationError("Assigned user not found or inactive")
    return assignee


def create_task(db: Session, principal: Principal, data: TaskCreate) -> Task:
    """Create a task as `principal`; the assignee is decided by the access policy"""
    assigned_to = policy.resolve_assignee(principal, data.assigned_to)
    if data.assigned_to and assigned_to != data.assigned_to:
        logger.info(
            "User %s may not assign to %s; task assigned to self",
            principal.id, data.assigned_to,
        )
    _active_assignee(db, assigned_to)

    task = Task(
        title=data.title,
        description=data.description,
        type=data.type,
        status=TaskStatus.OPEN,
        priority=data.priority,
        assigned_to=assigned_to,
        created_by=principal.id,
        due_date=data.due_date,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Task %s created by user %s for user %s", task.id, principal.id, assigned_to)
    return task


def update_task(db: Session, principal: Principal, task: Task, data: TaskUpdate) -> Task:
    """Apply an edit; anyone allowed to edit the task may also reassign it"""
    assigned_to = data.assigned_to or task.assigned_to
    if assigned_to != task.assigned_to:
        _active_assignee(db, assigned_to)

    task.title = data.title
    task.description = data.description
    task.type = data.type
    task.status = data.status
    task.priority = data.priority
    task.assigned_to = assigned_to
    task.due_date = data.due_date

    db.commit()
    db.refresh(task)
    logger.info("Task %s updated by user %s", task.id, principal.id)
    return task


def delete_task(db: Session, task: Task) -> None:
    task_id = task.id
    db.delete(task)
    db.commit()
    logger.info("Task %s deleted", task_id)
