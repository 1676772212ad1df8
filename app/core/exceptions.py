"""Custom exception classes"""
from typing import Any, Optional


class AppException(Exception):
    """Base exception for application errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_type: str = "AppError",
        details: Optional[Any] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """Malformed or inconsistent input, raised before anything is persisted"""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_type="ValidationError",
            details=details
        )


class NotFoundError(AppException):
    """Resource not found exception"""

    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=404,
            error_type="NotFoundError",
            details=details
        )


class ConflictError(AppException):
    """Resource conflict exception (e.g., duplicate member, member still referenced)"""

    def __init__(self, message: str = "Resource already exists", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=409,
            error_type="ConflictError",
            details=details
        )


class MemberReferenceError(AppException):
    """
    An expense references a member id that is not part of its group.

    This means the stored data is corrupt. The balance computation is aborted
    instead of skipping the entry.
    """

    def __init__(self, member_id: str, expense_id: Optional[Any] = None):
        message = f"Member '{member_id}' is not part of the group"
        if expense_id:
            message = f"{message} (referenced by expense {expense_id})"
        super().__init__(
            message=message,
            status_code=500,
            error_type="ReferenceError",
            details={"member_id": member_id, "expense_id": str(expense_id) if expense_id else None}
        )
        self.member_id = member_id
        self.expense_id = expense_id


class DatabaseError(AppException):
    """Database operation error exception"""

    def __init__(self, message: str = "Database error occurred", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_type="DatabaseError",
            details=details
        )


class DataIntegrityWarning(UserWarning):
    """Balances that should net to zero do not; reported, never raised"""
