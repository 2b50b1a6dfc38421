"""
Error hierarchy for the store API.

Every error carries a code, a category and the HTTP status it maps to. The
app-level handlers in main.py turn them into the JSON envelope
{"success": false, "message": ..., "error": CODE, "category": ...}.
"""
from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTH = "auth"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


class ShopError(Exception):
    """Base exception for every error the API reports on purpose."""

    def __init__(self, message: str, code: str, category: ErrorCategory, http_status: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status

    def to_response(self) -> dict:
        return {
            "success": False,
            "message": self.message,
            "error": self.code,
            "category": self.category.value,
        }


# ----------------------- 400-level -----------------------
class ValidationError(ShopError):
    """Missing or malformed input."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR", ErrorCategory.VALIDATION, 400)
        self.field = field


class DuplicateError(ValidationError):
    """A unique field already holds the submitted value."""

    def __init__(self, resource_type: str, field: str):
        super().__init__(f"{resource_type} with this {field} already exists", field=field)
        self.code = "DUPLICATE"


class AuthError(ShopError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "UNAUTHORIZED", ErrorCategory.AUTH, 401)


class NotFoundError(ShopError):
    def __init__(self, resource_type: str, resource_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__(
            message or f"{resource_type} not found",
            "NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND,
            404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id

    def to_response(self) -> dict:
        body = super().to_response()
        if self.resource_id is not None:
            body["id"] = self.resource_id
        return body


# ----------------------- 500-level -----------------------
class StoreError(ShopError):
    """The document store rejected or failed an operation."""

    def __init__(self, operation: str, collection: str):
        super().__init__(
            f"Server error while trying to {operation} {collection}",
            "STORE_ERROR",
            ErrorCategory.DATABASE,
            500,
        )
        self.operation = operation
        self.collection = collection
