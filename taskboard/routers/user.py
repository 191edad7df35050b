# taskboard/routers/user.py
from fastapi import APIRouter, Depends, Form, Request, status
from sqlalchemy.orm import Session

from taskboard.database import get_db
from taskboard.schemas.principal import Principal
from taskboard.services import user_service
from taskboard.utils.auth import get_current_principal
from taskboard.utils.errors import ValidationError
from taskboard.utils.templates import render

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile")
def profile(
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Current user's stored profile with roles"""
    return render(request, "users/profile.html", {
        "title": "My Profile",
        "profile": user_service.get_user(db, principal.id),
    })


@router.get("/change-password")
def change_password_page(request: Request, principal: Principal = Depends(get_current_principal)):
    return render(request, "users/change_password.html", {"title": "Change Password"})


@router.post("/change-password")
def change_password(
    request: Request,
    current_password: str = Form(""),
    new_password: str = Form(""),
    confirm_password: str = Form(""),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    user = user_service.get_user(db, principal.id)
    try:
        user_service.change_password(db, user, current_password, new_password, confirm_password)
    except ValidationError as e:
        return render(request, "users/change_password.html",
                      {"title": "Change Password", "error": e.message},
                      status_code=status.HTTP_400_BAD_REQUEST)

    return render(request, "users/change_password.html",
                  {"title": "Change Password", "success": "Password changed successfully"})
