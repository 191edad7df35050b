from .user import User, Role, UserRole, USER_STATUSES
from .task import Task, TaskStatus, TaskPriority
from .session import UserSession
