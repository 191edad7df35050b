from pydantic_core import PydanticCustomError
from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional, Literal


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class UserProfileFields(BaseModel):
    first_name: str
    last_name: str
    email: EmailStr
    manager_id: Optional[int] = None
    department: Optional[str] = None
    location: Optional[str] = None

    @field_validator('first_name', 'last_name')
    @classmethod
    def must_not_be_blank(cls, v):
        v = v.strip()
        if not v:
            raise PydanticCustomError('blank', 'must not be blank')
        return v

    @field_validator('manager_id', 'department', 'location', mode='before')
    @classmethod
    def blank_is_none(cls, v):
        return _blank_to_none(v)


class UserCreate(UserProfileFields):
    username: str
    password: str

    @field_validator('username')
    @classmethod
    def username_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise PydanticCustomError('blank', 'must not be blank')
        return v


class UserUpdate(UserProfileFields):
    status: Literal["active", "inactive"] = "active"
