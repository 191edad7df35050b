# taskboard/services/auth_service.py
import logging

from sqlalchemy.orm import Session

from taskboard.models import User
from taskboard.schemas.principal import Principal
from taskboard.services.role_resolver import roles_of
from taskboard.utils.errors import InvalidCredentials, AccountDeactivated
from taskboard.utils.security import verify_password, DUMMY_PASSWORD_HASH

logger = logging.getLogger(__name__)


def authenticate(db: Session, username: str, password: str) -> Principal:
    """Verify a username/password pair and build the session Principal.

    Unknown usernames and wrong passwords fail identically. The deactivated
    check runs only once the password has verified, so it cannot be used to
    probe which usernames exist.
    """
    logger.info("Login attempt for user: %s", username)

    # exact, case-sensitive match
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        verify_password(password or "", DUMMY_PASSWORD_HASH)
        logger.info("Login failed for %s: unknown username", username)
        raise InvalidCredentials()

    if not verify_password(password or "", user.hashed_password):
        logger.info("Login failed for %s: wrong password", username)
        raise InvalidCredentials()

    if not user.is_active:
        logger.info("Login refused for %s: account is %s", username, user.status)
        raise AccountDeactivated()

    roles = roles_of(db, user.id)
    logger.info("Login successful for %s with roles %s", username, sorted(roles))
    return Principal.from_user(user, roles)
