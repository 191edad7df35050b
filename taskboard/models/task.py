from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey, Enum, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from taskboard.database import Base
import enum


class TaskStatus(enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    type = Column(String, nullable=False)

    # Task properties (stored as their lowercase values)
    status = Column(
        Enum(TaskStatus, values_callable=_enum_values, native_enum=False, validate_strings=True),
        default=TaskStatus.OPEN,
        nullable=False,
        index=True,
    )
    priority = Column(
        Enum(TaskPriority, values_callable=_enum_values, native_enum=False, validate_strings=True),
        default=TaskPriority.MEDIUM,
        nullable=False,
    )

    # Relationships (no cascading delete from users)
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    due_date = Column(Date, nullable=True)

    # System dates
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    creator = relationship("User", foreign_keys=[created_by], back_populates="created_tasks")
    assignee = relationship("User", foreign_keys=[assigned_to], back_populates="assigned_tasks")
