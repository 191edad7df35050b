# taskboard/routers/admin.py
import logging
from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from taskboard.database import get_db
from taskboard.models import USER_STATUSES
from taskboard.schemas.principal import Principal
from taskboard.schemas.user import UserCreate, UserUpdate
from taskboard.services import user_service, role_resolver
from taskboard.utils.auth import require_administrator
from taskboard.utils.errors import Forbidden, NotFound, ValidationError, validation_message
from taskboard.utils.templates import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _redirect_to_users(success: str = None, error: str = None) -> RedirectResponse:
    url = "/admin/users"
    if success:
        url += f"?success={quote(success)}"
    elif error:
        url += f"?error={quote(error)}"
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _parse_role_ids(roles: List[str]) -> List[int]:
    try:
        return [int(role_id) for role_id in roles if str(role_id).strip()]
    except ValueError:
        raise ValidationError("Invalid role selection")


def _safe_role_ids(roles: List[str]) -> List[int]:
    try:
        return _parse_role_ids(roles)
    except ValidationError:
        return []


@router.get("")
def admin_dashboard(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_administrator)
):
    return render(request, "admin/dashboard.html", {
        "title": "Admin Dashboard",
        "stats": user_service.admin_stats(db),
    })


@router.get("/users")
def list_users(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_administrator)
):
    return render(request, "admin/users.html", {
        "title": "User Management",
        "users": user_service.list_users(db),
    })


@router.get("/users/create")
def create_user_page(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_administrator)
):
    return render(request, "admin/user_create.html", {
        "title": "Create User",
        "roles": user_service.list_roles(db),
        "managers": user_service.list_active_users(db),
        "form": {},
        "selected_role_ids": set(),
    })


@router.post("/users/create")
def create_user(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    first_name: str = Form(""),
    last_name: str = Form(""),
    email: str = Form(""),
    manager_id: str = Form(""),
    department: str = Form(""),
    location: str = Form(""),
    roles: List[str] = Form([]),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_administrator)
):
    """Create a user with the selected roles"""
    form = {
        "username": username,
        "password": password,
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "manager_id": manager_id,
        "department": department,
        "location": location,
    }
    if not all([username.strip(), password, first_name.strip(), last_name.strip(), email.strip()]):
        error = "All required fields must be filled"
    else:
        try:
            data = UserCreate.model_validate(form)
            user_service.create_user(db, data, _parse_role_ids(roles))
        except PydanticValidationError as e:
            error = validation_message(e)
        except ValidationError as e:
            error = e.message
        else:
            return _redirect_to_users(success="User created successfully")

    form.pop("password")
    return render(request, "admin/user_create.html", {
        "title": "Create User",
        "roles": user_service.list_roles(db),
        "managers": user_service.list_active_users(db),
        "form": form,
        "selected_role_ids": set(_safe_role_ids(roles)),
        "error": error,
    }, status_code=status.HTTP_400_BAD_REQUEST)


def _edit_context(db: Session, user, **extra) -> dict:
    context = {
        "title": "Edit User",
        "user": user,
        "user_role_ids": role_resolver.role_ids_of(db, user.id),
        "roles": user_service.list_roles(db),
        "managers": user_service.list_active_users(db, exclude_id=user.id),
        "statuses": USER_STATUSES,
    }
    context.update(extra)
    return context


@router.get("/users/{user_id}/edit")
def edit_user_page(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_administrator)
):
    try:
        user = user_service.get_user(db, user_id)
    except NotFound as e:
        return _redirect_to_users(error=e.message)
    return render(request, "admin/user_edit.html", _edit_context(db, user))


@router.post("/users/{user_id}/edit")
def update_user(
    user_id: int,
    request: Request,
    first_name: str = Form(""),
    last_name: str = Form(""),
    email: str = Form(""),
    manager_id: str = Form(""),
    department: str = Form(""),
    location: str = Form(""),
    status_value: str = Form("active", alias="status"),
    roles: List[str] = Form([]),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_administrator)
):
    """Update profile fields, status and roles; roles are replaced atomically"""
    try:
        user = user_service.get_user(db, user_id)
    except NotFound as e:
        return _redirect_to_users(error=e.message)

    try:
        data = UserUpdate.model_validate({
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "manager_id": manager_id,
            "department": department,
            "location": location,
            "status": status_value,
        })
        user_service.update_user(db, user, data, _parse_role_ids(roles))
    except PydanticValidationError as e:
        error = validation_message(e)
    except ValidationError as e:
        error = e.message
    else:
        return _redirect_to_users(success="User updated successfully")

    db.rollback()
    return render(request, "admin/user_edit.html", _edit_context(db, user, error=error),
                  status_code=status.HTTP_400_BAD_REQUEST)


@router.get("/users/{user_id}/reset-password")
def reset_password_page(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_administrator)
):
    try:
        user = user_service.get_user(db, user_id)
    except NotFound as e:
        return _redirect_to_users(error=e.message)
    return render(request, "admin/user_reset_password.html", {"title": "Reset Password", "user": user})


@router.post("/users/{user_id}/reset-password")
def reset_password(
    user_id: int,
    request: Request,
    new_password: str = Form(""),
    confirm_password: str = Form(""),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_administrator)
):
    try:
        user = user_service.get_user(db, user_id)
    except NotFound as e:
        return _redirect_to_users(error=e.message)

    context = {"title": "Reset Password", "user": user}
    try:
        user_service.reset_password(db, user, new_password, confirm_password)
    except ValidationError as e:
        return render(request, "admin/user_reset_password.html", {**context, "error": e.message},
                      status_code=status.HTTP_400_BAD_REQUEST)
    return render(request, "admin/user_reset_password.html", {**context, "success": "Password reset successfully"})


@router.post("/users/{user_id}/delete")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_administrator)
):
    """Delete a user; self-deletion and still-referenced users are refused"""
    try:
        user = user_service.get_user(db, user_id)
        user_service.delete_user(db, principal, user)
    except (NotFound, Forbidden, ValidationError) as e:
        return _redirect_to_users(error=e.message)
    return _redirect_to_users(success="User deleted successfully")


@router.get("/roles")
def list_roles(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_administrator)
):
    return render(request, "admin/roles.html", {
        "title": "Role Management",
        "roles": user_service.list_roles(db),
    })
