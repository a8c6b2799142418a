from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sprintboard.models.tickets import TicketCategory, TicketPriority, TicketStatus


class TicketBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    sprint_id: int | None = None
    parent_ticket_id: int | None = None
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    status: TicketStatus = TicketStatus.TODO
    priority: TicketPriority = TicketPriority.MEDIUM
    category: TicketCategory = TicketCategory.TASK
    story_points: float | None = Field(default=None, ge=0)
    estimated_hours: float | None = Field(default=None, ge=0)
    actual_hours: float | None = Field(default=None, ge=0)
    assigned_to: UUID | None = None
    due_date: date | None = None
    implementation_notes: str | None = None
    testing_notes: str | None = None


class TicketCreate(TicketBase):
    pass


class TicketUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    sprint_id: int | None = None
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    category: TicketCategory | None = None
    story_points: float | None = Field(default=None, ge=0)
    estimated_hours: float | None = Field(default=None, ge=0)
    actual_hours: float | None = Field(default=None, ge=0)
    assigned_to: UUID | None = None
    due_date: date | None = None
    implementation_notes: str | None = None
    testing_notes: str | None = None


class TicketRead(TicketBase):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    project_id: int
    ticket_number: str
    completed_at: datetime | None = None
    created_by: UUID | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("story_points", "estimated_hours", "actual_hours", mode="before")
    @classmethod
    def _decimal_to_float(cls, value):
        if isinstance(value, Decimal):
            return float(value)
        return value
