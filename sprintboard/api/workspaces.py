import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from sprintboard.api.deps import get_current_user_id, get_db
from sprintboard.schemas.workspaces import (
    ProjectTeamRead,
    TeamCreate,
    TeamMemberCreate,
    TeamMemberRead,
    TeamRead,
    WorkspaceCreate,
    WorkspaceMemberCreate,
    WorkspaceMemberRead,
    WorkspaceRead,
)
from sprintboard.services import workspaces as workspaces_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/workspaces",
    response_model=WorkspaceRead,
    status_code=status.HTTP_201_CREATED,
    tags=["workspaces"],
)
def create_workspace(
    payload: WorkspaceCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("create_workspace user_id=%s", user_id)
    return workspaces_service.workspaces.create(db, payload, user_id)


@router.get("/workspaces/{workspace_id}", response_model=WorkspaceRead, tags=["workspaces"])
def get_workspace(
    workspace_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return workspaces_service.workspaces.get(db, workspace_id, user_id)


@router.post(
    "/workspaces/{workspace_id}/members",
    response_model=WorkspaceMemberRead,
    status_code=status.HTTP_201_CREATED,
    tags=["workspaces"],
)
def add_workspace_member(
    workspace_id: UUID,
    payload: WorkspaceMemberCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("add_workspace_member workspace_id=%s user_id=%s", workspace_id, user_id)
    return workspaces_service.workspace_members.add(db, workspace_id, payload, user_id)


@router.post(
    "/workspaces/{workspace_id}/teams",
    response_model=TeamRead,
    status_code=status.HTTP_201_CREATED,
    tags=["teams"],
)
def create_team(
    workspace_id: UUID,
    payload: TeamCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("create_team workspace_id=%s user_id=%s", workspace_id, user_id)
    return workspaces_service.teams.create(db, workspace_id, payload, user_id)


@router.get("/teams/{team_id}", response_model=TeamRead, tags=["teams"])
def get_team(
    team_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return workspaces_service.teams.get(db, team_id, user_id)


@router.post(
    "/teams/{team_id}/members",
    response_model=TeamMemberRead,
    status_code=status.HTTP_201_CREATED,
    tags=["teams"],
)
def add_team_member(
    team_id: UUID,
    payload: TeamMemberCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return workspaces_service.teams.add_member(db, team_id, payload, user_id)


@router.post(
    "/teams/{team_id}/projects/{project_id}",
    response_model=ProjectTeamRead,
    status_code=status.HTTP_201_CREATED,
    tags=["teams"],
)
def link_team_project(
    team_id: UUID,
    project_id: int,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return workspaces_service.teams.link_project(db, team_id, project_id, user_id)
