"""
Domain errors raised by the service layer.

Each one is an HTTPException with a fixed status code, so FastAPI renders it
as {"detail": ...} without any extra exception handlers.
"""

from fastapi import HTTPException, status


class EventNotFoundError(HTTPException):
    def __init__(self, event_id):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=f"Event {event_id} not found")


class CapacityExceededError(HTTPException):
    def __init__(self, capacity: int):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Event is full (capacity {capacity})",
        )


class AlreadyRegisteredError(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="You are already registered for this event",
        )


class RegistrationConflictError(HTTPException):
    """The event row kept changing under us; the caller may retry."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Registration failed due to high demand. Please try again.",
        )


class RegistrationNotFoundError(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail="Registration not found")


class InvalidRegistrationStateError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidSortFieldError(HTTPException):
    def __init__(self, field: str, allowed):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot sort by '{field}'. Allowed: {', '.join(sorted(allowed))}",
        )


class CapacityBelowRegistrationsError(HTTPException):
    def __init__(self, capacity: int, active: int):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Capacity {capacity} is below the {active} active registrations",
        )


class EventConflictError(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Event was modified concurrently. Please try again.",
        )


class EmailAlreadyRegisteredError(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")


class InvalidCredentialsError(HTTPException):
    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AdminRequiredError(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")
