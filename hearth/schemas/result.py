from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Generic, TypeVar, Optional

T = TypeVar("T")


class ErrorCategory(Enum):
    VALIDATION = "Validation"
    NOT_FOUND = "Not Found"
    AUTHENTICATION = "Authentication"
    AUTHORIZATION = "Authorization"
    INTERNAL = "Internal Server Error"
    STORAGE = "Storage Failure"
    BAD_REQUEST = "Bad Request"
    RESOURCE_CONFLICT = "Resource Conflict"
    CUSTOM = "Custom Error"

    @classmethod
    def from_status_code(cls, status_code: int) -> "ErrorCategory":
        """Best-effort category for a bare HTTP status."""
        known = {
            401: cls.AUTHENTICATION,
            403: cls.AUTHORIZATION,
            404: cls.NOT_FOUND,
            409: cls.RESOURCE_CONFLICT,
            422: cls.VALIDATION,
        }
        if status_code in known:
            return known[status_code]
        if 400 <= status_code < 500:
            return cls.BAD_REQUEST
        if status_code >= 500:
            return cls.INTERNAL
        return cls.CUSTOM


class Error(BaseModel):
    message: str
    status_code: int
    category: ErrorCategory

    model_config = ConfigDict(use_enum_values=True)


class Result(BaseModel, Generic[T]):
    """Envelope returned by every endpoint: data on success, error otherwise."""

    success: bool
    error: Optional[Error] = None
    data: Optional[T] = None

    @classmethod
    def successful(cls, data: Optional[T] = None):
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: Error):
        return cls(success=False, error=error)
