# taskboard/services/user_service.py
"""
Identity management: administrator user CRUD and self-service passwords
"""

import logging
from typing import Dict, Iterable, List

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from taskboard.config import SecurityConfig
from taskboard.models import User, Role, Task
from taskboard.schemas.principal import Principal
from taskboard.schemas.user import UserCreate, UserUpdate
from taskboard.services import role_resolver
from taskboard.services.session_store import destroy_user_sessions
from taskboard.utils import policy
from taskboard.utils.errors import Forbidden, NotFound, ValidationError
from taskboard.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)


def list_users(db: Session) -> List[User]:
    """All users, newest first, with manager and roles loaded"""
    return (
        db.query(User)
        .options(joinedload(User.manager), joinedload(User.roles))
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )


def list_active_users(db: Session, exclude_id: int = None) -> List[User]:
    query = db.query(User).filter(User.status == "active")
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.order_by(User.first_name, User.last_name).all()


def list_roles(db: Session) -> List[Role]:
    return db.query(Role).order_by(Role.name).all()


def admin_stats(db: Session) -> Dict[str, int]:
    return {
        "total_users": db.query(User).count(),
        "active_users": db.query(User).filter(User.status == "active").count(),
        "total_roles": db.query(Role).count(),
    }


def get_user(db: Session, user_id: int) -> User:
    user = (
        db.query(User)
        .options(joinedload(User.manager), joinedload(User.roles))
        .filter(User.id == user_id)
        .first()
    )
    if not user:
        raise NotFound("User not found")
    return user


def _check_manager(db: Session, manager_id, user_id: int = None) -> None:
    if manager_id is None:
        return
    if user_id is not None and manager_id == user_id:
        raise ValidationError("User cannot be their own manager")
    if not db.query(User).filter(User.id == manager_id).first():
        raise ValidationError("Manager not found")


def _check_password(new_password: str, confirm_password: str, mismatch_message: str) -> None:
    if new_password != confirm_password:
        raise ValidationError(mismatch_message)
    min_length = SecurityConfig.PASSWORD['min_length']
    if len(new_password or "") < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters")


def create_user(db: Session, data: UserCreate, role_ids: Iterable[int] = ()) -> User:
    """Create an active user and assign roles in one transaction"""
    existing = db.query(User).filter(
        or_(User.username == data.username, User.email == data.email)
    ).first()
    if existing:
        raise ValidationError("Username or email already exists")
    if not data.password:
        raise ValidationError("All required fields must be filled")
    _check_password(data.password, data.password, "Passwords do not match")
    _check_manager(db, data.manager_id)

    user = User(
        username=data.username,
        hashed_password=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        manager_id=data.manager_id,
        department=data.department,
        location=data.location,
        status="active",
    )
    try:
        db.add(user)
        db.flush()
        role_resolver.stage_roles(db, user.id, role_ids)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("User %s created with id %s", user.username, user.id)
    return user


def update_user(db: Session, user: User, data: UserUpdate, role_ids: Iterable[int] = ()) -> User:
    """Update profile fields, status and roles atomically"""
    if data.email != user.email:
        taken = db.query(User).filter(User.email == data.email, User.id != user.id).first()
        if taken:
            raise ValidationError("Username or email already exists")
    _check_manager(db, data.manager_id, user.id)

    try:
        user.first_name = data.first_name
        user.last_name = data.last_name
        user.email = data.email
        user.manager_id = data.manager_id
        user.department = data.department
        user.location = data.location
        user.status = data.status
        role_resolver.stage_roles(db, user.id, role_ids)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("User %s updated", user.id)
    return user


def reset_password(db: Session, user: User, new_password: str, confirm_password: str) -> None:
    _check_password(new_password, confirm_password, "Passwords do not match")
    user.hashed_password = hash_password(new_password)
    db.commit()
    logger.info("Password reset for user %s", user.id)


def change_password(db: Session, user: User, current_password: str, new_password: str, confirm_password: str) -> None:
    _check_password(new_password, confirm_password, "New passwords do not match")
    if not verify_password(current_password or "", user.hashed_password):
        raise ValidationError("Current password is incorrect")
    user.hashed_password = hash_password(new_password)
    db.commit()
    logger.info("User %s changed their password", user.id)


def delete_user(db: Session, principal: Principal, user: User) -> None:
    """Delete a user unless it is the caller or still referenced"""
    if not policy.can_delete_user(principal, user.id):
        logger.warning("User %s attempted to delete account %s", principal.id, user.id)
        raise Forbidden("Cannot delete your own account")

    if db.query(User).filter(User.manager_id == user.id).first():
        raise ValidationError("Cannot delete a user who is still a manager of other users")
    referenced = db.query(Task).filter(
        or_(Task.assigned_to == user.id, Task.created_by == user.id)
    ).first()
    if referenced:
        raise ValidationError("Cannot delete a user who still has tasks assigned or created")

    user_id, username = user.id, user.username
    destroy_user_sessions(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User %s (%s) deleted by %s", user_id, username, principal.id)
