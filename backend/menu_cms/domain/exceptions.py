# menu_cms/domain/exceptions.py
from typing import Any, Dict, List, Optional


class CmsError(Exception):
    """Base for errors that map onto a client-facing HTTP status."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None, *, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(CmsError):
    status_code = 400
    default_message = "Validation errors"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, errors=[{"field": field, "message": message}])


class InvalidInput(ValidationError):
    default_message = "Invalid payload"


class NotFoundError(CmsError):
    status_code = 404
    default_message = "Not found"


class ConflictError(CmsError):
    status_code = 400
    default_message = "Resource already exists"


class UnsupportedMediaError(CmsError):
    status_code = 400
    default_message = "Unsupported file"
