"""Custom exception hierarchy for Tabloom."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Resource lookups
    BOOKMARK_NOT_FOUND = "BOOKMARK_NOT_FOUND"
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    TAG_NOT_FOUND = "TAG_NOT_FOUND"
    EXPORT_JOB_NOT_FOUND = "EXPORT_JOB_NOT_FOUND"

    # Input
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"

    # Auth
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    # Server side
    EXPORT_FAILED = "EXPORT_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class TabloomException(Exception):
    """
    Base exception for all Tabloom errors.

    Carries everything the API needs to render a structured error:
    a human-readable message, a machine-readable code, the HTTP status
    and optional details.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON error body."""
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class NotFoundError(TabloomException):
    """Unknown id, or an id whose entity has been soft-deleted."""

    resource = "Resource"
    code = ErrorCode.INTERNAL_ERROR
    id_field = "id"

    def __init__(self, entity_id: str):
        super().__init__(
            f"{self.resource} not found: {entity_id}",
            self.code,
            status_code=404,
            details={self.id_field: entity_id}
        )


class BookmarkNotFoundError(NotFoundError):
    resource = "Bookmark"
    code = ErrorCode.BOOKMARK_NOT_FOUND
    id_field = "bookmark_id"


class FolderNotFoundError(NotFoundError):
    resource = "Folder"
    code = ErrorCode.FOLDER_NOT_FOUND
    id_field = "folder_id"


class TagNotFoundError(NotFoundError):
    resource = "Tag"
    code = ErrorCode.TAG_NOT_FOUND
    id_field = "tag_id"


class ExportJobNotFoundError(NotFoundError):
    resource = "Export job"
    code = ErrorCode.EXPORT_JOB_NOT_FOUND
    id_field = "job_id"


class ValidationError(TabloomException):
    """Validation failed for user input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class ConflictError(TabloomException):
    """A unique field (tag name, email) is already taken."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.CONFLICT,
            status_code=400,
            details=details
        )


class AuthenticationError(TabloomException):
    """Request lacks valid authentication credentials."""

    def __init__(self, message: str = "Invalid or missing authentication token"):
        super().__init__(
            message,
            ErrorCode.UNAUTHORIZED,
            status_code=401,
        )


class ForbiddenError(TabloomException):
    """Authenticated (or anonymous) caller may not perform this action."""

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(
            message,
            ErrorCode.FORBIDDEN,
            status_code=403,
        )


class ExportFailedError(TabloomException):
    """Snapshot generation or persistence failed.

    The message stays generic; the cause is logged server-side and, for
    tracked jobs, stored on the export job row.
    """

    def __init__(self, message: str = "Failed to generate export"):
        super().__init__(
            message,
            ErrorCode.EXPORT_FAILED,
            status_code=500,
        )
