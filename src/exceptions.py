"""
Error taxonomy for the campground service.

Every error is scoped to a single request. None of them are retried.
"""
from typing import Optional


class CampgroundServiceError(Exception):
    """Base exception for all campground service errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(CampgroundServiceError):
    """Raised when a resource id does not resolve."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource.capitalize()} not found",
            details={"resource": resource, "id": resource_id},
        )


class AuthenticationRequiredError(CampgroundServiceError):
    """Raised when an operation needs a logged in user and there is none."""

    def __init__(self):
        super().__init__(message="You need to be logged in to do that")


class AuthorizationError(CampgroundServiceError):
    """Raised when the current user does not own the resource."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message="You don't have permission to do that",
            details={"resource": resource, "id": resource_id},
        )


class InvalidMediaError(CampgroundServiceError):
    def __init__(self, filename: str):
        super().__init__(
            message="Only image files are allowed!",
            details={"filename": filename},
        )


class MediaStorageError(CampgroundServiceError):
    def __init__(self, reason: Optional[str] = None):
        message = "Image upload failed"
        if reason:
            message += f": {reason}"
        super().__init__(message=message, details={"reason": reason})


class GeocodingError(CampgroundServiceError):
    def __init__(self, location: str, reason: Optional[str] = None):
        message = f"Could not resolve location '{location}'"
        if reason:
            message += f": {reason}"
        super().__init__(message=message, details={"location": location, "reason": reason})


class PersistenceError(CampgroundServiceError):
    def __init__(self, operation: str, reason: Optional[str] = None):
        message = f"Database {operation} failed"
        if reason:
            message += f": {reason}"
        super().__init__(message=message, details={"operation": operation, "reason": reason})
