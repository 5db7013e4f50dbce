from event_registration.models.user import User, UserRole
from event_registration.models.event import Event
from event_registration.models.registration import Registration, RegistrationStatus, ACTIVE_STATUSES

__all__ = [
    "User", "UserRole",
    "Event",
    "Registration", "RegistrationStatus", "ACTIVE_STATUSES",
]
