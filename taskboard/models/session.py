from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from taskboard.database import Base


class UserSession(Base):
    """Server-side session row; the cookie only carries a signed reference to `id`"""
    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    principal = Column(Text, nullable=False)  # Principal serialized as JSON
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime, nullable=False, index=True)  # naive UTC
