# taskboard/utils/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from taskboard.config import settings, SecurityConfig


def hash_password(password: str) -> str:
    """Salted bcrypt hash at the configured cost factor"""
    salt = bcrypt.gensalt(rounds=SecurityConfig.PASSWORD['bcrypt_rounds'])
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


# Verified against when the username is unknown so both login failures cost one hash check
DUMMY_PASSWORD_HASH = hash_password("taskboard-dummy-password")


def create_session_token(session_id: str, expires_at: datetime) -> str:
    """Sign the opaque session id for the cookie"""
    payload = {"sid": session_id, "exp": expires_at.replace(tzinfo=timezone.utc)}
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm=settings.SESSION_ALGORITHM)


def read_session_token(token: str) -> Optional[str]:
    """Return the session id carried by a cookie, or None when it is forged or expired"""
    try:
        payload = jwt.decode(token, settings.SESSION_SECRET, algorithms=[settings.SESSION_ALGORITHM])
    except JWTError:
        return None
    session_id = payload.get("sid")
    if not isinstance(session_id, str):
        return None
    return session_id


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the naive `expires_at` column"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def session_expiry(now: datetime = None) -> datetime:
    return (now or utcnow()) + timedelta(seconds=SecurityConfig.session_max_age_seconds())
