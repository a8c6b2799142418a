from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from sprintboard.models.workspaces import TeamRole, WorkspaceRole


class WorkspaceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    slug: str | None = Field(default=None, max_length=180)
    description: str | None = None


class WorkspaceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    description: str | None = None
    created_by: UUID | None = None
    created_at: datetime


class WorkspaceMemberCreate(BaseModel):
    user_id: UUID
    role: WorkspaceRole = WorkspaceRole.DEVELOPER


class WorkspaceMemberRead(WorkspaceMemberCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    workspace_id: UUID
    joined_at: datetime


class TeamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    description: str | None = None


class TeamRead(TeamCreate):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workspace_id: UUID
    created_at: datetime


class TeamMemberCreate(BaseModel):
    user_id: UUID
    role: TeamRole = TeamRole.MEMBER


class TeamMemberRead(TeamMemberCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    team_id: UUID
    joined_at: datetime


class ProjectTeamRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    team_id: UUID
