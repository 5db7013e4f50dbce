from event_registration.schemas.user import UserCreate, UserResponse, UserLogin, Token
from event_registration.schemas.event import EventCreate, EventUpdate, EventResponse, EventListResponse
from event_registration.schemas.registration import RegistrationResponse, RegistrationCancelResponse

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "Token",
    "EventCreate", "EventUpdate", "EventResponse", "EventListResponse",
    "RegistrationResponse", "RegistrationCancelResponse",
]
