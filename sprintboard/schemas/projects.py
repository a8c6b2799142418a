from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sprintboard.models.projects import (
    EpicCategory,
    EpicStatus,
    ProjectPriority,
    ProjectStatus,
    SprintStatus,
    TaskStatus,
)


class ProjectBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    name: str = Field(min_length=1, max_length=160)
    description: str | None = None
    full_description: str | None = None
    status: ProjectStatus = ProjectStatus.TODO
    priority: ProjectPriority = ProjectPriority.MEDIUM
    progress: int = Field(default=0, ge=0, le=100)
    project_manager_id: UUID | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_public: bool = False
    settings: dict | None = None


class ProjectCreate(ProjectBase):
    @model_validator(mode="after")
    def _validate_dates(self) -> ProjectCreate:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class ProjectUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    description: str | None = None
    full_description: str | None = None
    status: ProjectStatus | None = None
    priority: ProjectPriority | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    project_manager_id: UUID | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_public: bool | None = None
    settings: dict | None = None

    @model_validator(mode="after")
    def _validate_dates(self) -> ProjectUpdate:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class ProjectRead(ProjectBase):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    workspace_id: UUID
    slug: str
    is_archived: bool
    created_by: UUID | None = None
    created_at: datetime
    updated_at: datetime


class SprintCreate(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    description: str | None = None
    goal: str | None = None
    status: SprintStatus = SprintStatus.PLANNED
    version: float = Field(default=0.1, gt=0)
    start_date: date
    end_date: date | None = None

    @model_validator(mode="after")
    def _validate_dates(self) -> SprintCreate:
        if self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class SprintRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    name: str
    description: str | None = None
    goal: str | None = None
    status: SprintStatus
    version: float
    start_date: date
    end_date: date | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("version", mode="before")
    @classmethod
    def _decimal_to_float(cls, value):
        if isinstance(value, Decimal):
            return float(value)
        return value


class EpicCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    status: EpicStatus = EpicStatus.TODO
    category: EpicCategory = EpicCategory.FEATURE
    progress: int = Field(default=0, ge=0, le=100)
    due_date: date | None = None


class EpicRead(EpicCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    created_at: datetime
    updated_at: datetime


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: int = Field(default=2, ge=0, le=4)
    due_date: date | None = None


class TaskRead(TaskCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    epic_id: int
    created_at: datetime
    updated_at: datetime
