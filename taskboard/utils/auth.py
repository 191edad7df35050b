# taskboard/utils/auth.py
import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from taskboard.config import SecurityConfig
from taskboard.database import get_db
from taskboard.schemas.principal import Principal, RoleName
from taskboard.services.session_store import load_principal
from taskboard.utils.errors import NotAuthenticated, Forbidden

logger = logging.getLogger(__name__)


def get_session_token(request: Request) -> Optional[str]:
    return request.cookies.get(SecurityConfig.SESSION['cookie_name'])


def get_optional_principal(request: Request, db: Session = Depends(get_db)) -> Optional[Principal]:
    principal = load_principal(db, get_session_token(request))
    request.state.principal = principal
    return principal


def get_current_principal(principal: Optional[Principal] = Depends(get_optional_principal)) -> Principal:
    """Principal for the request; anonymous requests are sent to the login page"""
    if principal is None:
        raise NotAuthenticated()
    return principal


def require_role(*allowed_roles: RoleName):
    """Dependency factory: the principal must hold at least one of `allowed_roles`"""
    def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not any(principal.has_role(role) for role in allowed_roles):
            logger.warning("User %s denied: requires one of %s", principal.id, [r.value for r in allowed_roles])
            raise Forbidden()
        return principal
    return checker


require_administrator = require_role(RoleName.ADMINISTRATOR)
