# taskboard/utils/policy.py
"""
Access policy for tasks and user administration.

Every decision here is a pure function of the request Principal (and, for
per-task checks, the task's assignee). Callers run the queries and render the
results; nothing in this module touches the database.
"""

import enum
from dataclasses import dataclass
from typing import Optional

from taskboard.schemas.principal import Principal, RoleName


class ScopeKind(enum.Enum):
    ALL = "all"
    TEAM = "team"
    OWN = "own"


@dataclass(frozen=True)
class Scope:
    """Which tasks a principal may list.

    TEAM covers tasks assigned to the manager's direct reports plus tasks
    assigned to the manager; OWN covers tasks assigned to `user_id` only.
    `user_id` is None for ALL.
    """
    kind: ScopeKind
    user_id: Optional[int] = None

    @classmethod
    def all(cls) -> "Scope":
        return cls(ScopeKind.ALL)

    @classmethod
    def team(cls, manager_id: int) -> "Scope":
        return cls(ScopeKind.TEAM, manager_id)

    @classmethod
    def own(cls, user_id: int) -> "Scope":
        return cls(ScopeKind.OWN, user_id)


SCOPE_DESCRIPTIONS = {
    ScopeKind.ALL: "All tasks in the system",
    ScopeKind.TEAM: "Your tasks and your team's tasks",
    ScopeKind.OWN: "Tasks assigned to you",
}


def is_administrator(principal: Principal) -> bool:
    return principal.has_role(RoleName.ADMINISTRATOR)


def is_sales_manager(principal: Principal) -> bool:
    return principal.has_role(RoleName.SALES_MANAGER)


def scope_for(principal: Principal) -> Scope:
    """Task listing scope; Administrator takes precedence over Sales Manager"""
    if is_administrator(principal):
        return Scope.all()
    if is_sales_manager(principal):
        return Scope.team(principal.id)
    # Sales User, Reporting User and unknown roles
    return Scope.own(principal.id)


def describe_scope(scope: Scope) -> str:
    return SCOPE_DESCRIPTIONS[scope.kind]


def can_view(principal: Principal, task) -> bool:
    # Sales Manager is granted any task here, not just the team's
    return (
        is_administrator(principal)
        or is_sales_manager(principal)
        or task.assigned_to == principal.id
    )


def can_edit(principal: Principal, task) -> bool:
    return can_view(principal, task)


def can_delete(principal: Principal, task=None) -> bool:
    """Ownership is irrelevant for delete"""
    return is_administrator(principal) or is_sales_manager(principal)


def can_assign_others(principal: Principal) -> bool:
    return is_administrator(principal) or is_sales_manager(principal)


def resolve_assignee(principal: Principal, requested_id: Optional[int]) -> int:
    """Pick the assignee for a new task.

    Administrators and Sales Managers get what they asked for (or themselves
    when nothing was requested). Everyone else is silently assigned to
    themselves whatever was requested.
    """
    if not can_assign_others(principal):
        return principal.id
    return requested_id or principal.id


def can_delete_user(principal: Principal, user_id: int) -> bool:
    """Administrators may not delete their own account"""
    return is_administrator(principal) and user_id != principal.id
