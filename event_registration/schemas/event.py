"""
Pydantic schemas for event-related request/response validation.
"""

import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class EventCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    date: datetime
    location: str = Field(..., min_length=1, max_length=255)
    capacity: int = Field(..., ge=1)


class EventUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    capacity: Optional[int] = Field(None, ge=1)

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for field in ("name", "date", "location", "capacity"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class EventResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str]
    date: datetime
    location: str
    capacity: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventListResponse(BaseModel):
    events: list[EventResponse]
    total: int
    total_pages: int
    page: int
    limit: int
