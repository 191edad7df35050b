from .principal import Principal, RoleName
from .task import TaskCreate, TaskUpdate, TaskBase
from .user import UserCreate, UserUpdate
