# taskboard/utils/errors.py
from fastapi import status
from pydantic import ValidationError as PydanticValidationError


class TaskboardError(Exception):
    """Base class for errors rendered as user-facing pages"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    title = "Error"
    default_message = "Something went wrong!"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticated(TaskboardError):
    status_code = status.HTTP_303_SEE_OTHER
    title = "Login Required"
    default_message = "Please log in to continue."


class InvalidCredentials(TaskboardError):
    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Login"
    default_message = "Invalid username or password"


class AccountDeactivated(TaskboardError):
    status_code = status.HTTP_403_FORBIDDEN
    title = "Login"
    default_message = "Your account has been deactivated. Please contact an administrator."


class NotFound(TaskboardError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Not Found"
    default_message = "Page not found"


class Forbidden(TaskboardError):
    status_code = status.HTTP_403_FORBIDDEN
    title = "Access Denied"
    default_message = "You do not have permission to access this page."


class ValidationError(TaskboardError):
    status_code = status.HTTP_400_BAD_REQUEST
    title = "Invalid Input"
    default_message = "All required fields must be filled"


class PersistenceError(TaskboardError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    title = "Error"
    default_message = "Something went wrong!"


def validation_message(exc: PydanticValidationError) -> str:
    """Turn the first pydantic error into a short form message"""
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    field = str(first["loc"][-1]) if first.get("loc") else "input"
    label = field.replace("_", " ").capitalize()
    if first.get("type") in ("missing", "blank"):
        return f"{label} is required"
    return f"{label}: {first.get('msg', 'invalid value')}"
