# taskboard/services/session_store.py
"""
Server-side session storage keyed by an opaque id.

The browser cookie holds the id signed with the session secret; the Principal
itself never leaves the server.
"""

import logging
import secrets
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from taskboard.models import UserSession
from taskboard.schemas.principal import Principal
from taskboard.utils.security import create_session_token, read_session_token, session_expiry, utcnow

logger = logging.getLogger(__name__)


def create_session(db: Session, principal: Principal) -> str:
    """Persist a session for the principal and return the signed cookie value"""
    session_id = secrets.token_urlsafe(32)
    expires_at = session_expiry()
    db.add(UserSession(
        id=session_id,
        user_id=principal.id,
        principal=principal.model_dump_json(),
        expires_at=expires_at,
    ))
    db.commit()
    return create_session_token(session_id, expires_at)


def _session_row(db: Session, token: Optional[str]) -> Optional[UserSession]:
    if not token:
        return None
    session_id = read_session_token(token)
    if session_id is None:
        return None
    return db.query(UserSession).filter(UserSession.id == session_id).first()


def load_principal(db: Session, token: Optional[str]) -> Optional[Principal]:
    """Principal for a cookie value, or None for missing, forged or expired sessions"""
    row = _session_row(db, token)
    if row is None:
        return None

    if row.expires_at <= utcnow():
        db.delete(row)
        db.commit()
        return None

    try:
        return Principal.model_validate_json(row.principal)
    except PydanticValidationError:
        logger.warning("Discarding malformed session for user %s", row.user_id)
        db.delete(row)
        db.commit()
        return None


def destroy_session(db: Session, token: Optional[str]) -> None:
    row = _session_row(db, token)
    if row is not None:
        db.delete(row)
        db.commit()


def destroy_user_sessions(db: Session, user_id: int) -> int:
    """Drop every session of a user (caller commits)"""
    return db.query(UserSession).filter(UserSession.user_id == user_id).delete(synchronize_session=False)


def purge_expired_sessions(db: Session) -> int:
    removed = db.query(UserSession).filter(UserSession.expires_at <= utcnow()).delete(synchronize_session=False)
    db.commit()
    if removed:
        logger.info("Purged %s expired sessions", removed)
    return removed
