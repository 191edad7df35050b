# taskboard/services/role_resolver.py
"""
Role lookups and role assignment for users
"""

import logging
from typing import Iterable, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.models import Role, UserRole
from taskboard.utils.errors import ValidationError

logger = logging.getLogger(__name__)


def roles_of(db: Session, user_id: int) -> Set[str]:
    """Role names held by a user; an empty set means no permissions, never an error"""
    try:
        rows = (
            db.query(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .filter(UserRole.user_id == user_id)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error("Error getting roles for user %s: %s", user_id, e)
        db.rollback()
        return set()
    return {name for (name,) in rows}


def role_ids_of(db: Session, user_id: int) -> Set[int]:
    rows = db.query(UserRole.role_id).filter(UserRole.user_id == user_id).all()
    return {role_id for (role_id,) in rows}


def _checked_role_ids(db: Session, role_ids: Iterable[int]) -> Set[int]:
    wanted = {int(role_id) for role_id in role_ids}
    if not wanted:
        return wanted
    found = {role_id for (role_id,) in db.query(Role.id).filter(Role.id.in_(wanted)).all()}
    missing = wanted - found
    if missing:
        raise ValidationError(f"Unknown role id(s): {', '.join(str(r) for r in sorted(missing))}")
    return wanted


def stage_roles(db: Session, user_id: int, role_ids: Iterable[int]) -> None:
    """Replace a user's roles in the current transaction without committing"""
    wanted = _checked_role_ids(db, role_ids)
    db.query(UserRole).filter(UserRole.user_id == user_id).delete(synchronize_session="fetch")
    for role_id in sorted(wanted):
        db.add(UserRole(user_id=user_id, role_id=role_id))


def replace_roles(db: Session, user_id: int, role_ids: Iterable[int]) -> Set[int]:
    """Revoke every role and assign `role_ids` as one transaction"""
    try:
        stage_roles(db, user_id, role_ids)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Roles for user %s set to %s", user_id, sorted(role_ids_of(db, user_id)))
    return role_ids_of(db, user_id)
