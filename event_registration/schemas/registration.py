"""
Pydantic schemas for registration responses.
"""

import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class RegistrationResponse(BaseModel):
    id: uuid.UUID
    status: str
    user_id: Optional[uuid.UUID]
    event_id: Optional[uuid.UUID]
    created_at: datetime

    model_config = {"from_attributes": True}


class RegistrationCancelResponse(BaseModel):
    message: str
    registration_id: uuid.UUID
    status: str
