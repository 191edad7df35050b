import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from taskboard.config import SecurityConfig
from taskboard.database import get_db
from taskboard.schemas.principal import Principal
from taskboard.services.auth_service import authenticate
from taskboard.services.session_store import create_session, destroy_session
from taskboard.utils.auth import get_optional_principal, get_session_token
from taskboard.utils.errors import InvalidCredentials, AccountDeactivated
from taskboard.utils.templates import render

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
def root(principal: Optional[Principal] = Depends(get_optional_principal)):
    target = "/dashboard" if principal else "/login"
    return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/login")
def login_page(request: Request, principal: Optional[Principal] = Depends(get_optional_principal)):
    """Login form; signed-in users go straight to the dashboard"""
    if principal:
        return RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)
    return render(request, "login.html", {"title": "Login"})


@router.post("/login")
def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    try:
        principal = authenticate(db, username, password)
    except (InvalidCredentials, AccountDeactivated) as e:
        return render(
            request,
            "login.html",
            {"title": "Login", "error": e.message, "username": username},
            status_code=e.status_code,
        )

    # drop any session this browser already held
    destroy_session(db, get_session_token(request))
    token = create_session(db, principal)

    response = RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        SecurityConfig.SESSION['cookie_name'],
        token,
        max_age=SecurityConfig.session_max_age_seconds(),
        httponly=True,
        secure=SecurityConfig.SESSION['cookie_secure'],
        samesite=SecurityConfig.SESSION['cookie_samesite'],
    )
    return response


@router.api_route("/logout", methods=["GET", "POST"])
def logout(request: Request, db: Session = Depends(get_db)):
    destroy_session(db, get_session_token(request))
    response = RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(SecurityConfig.SESSION['cookie_name'])
    return response
