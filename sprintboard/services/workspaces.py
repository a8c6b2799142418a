from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sprintboard.errors import ConflictError
from sprintboard.models.projects import Project
from sprintboard.models.workspaces import (
    ProjectTeam,
    Team,
    TeamMember,
    Workspace,
    WorkspaceMember,
    WorkspaceRole,
)
from sprintboard.schemas.workspaces import TeamCreate, TeamMemberCreate, WorkspaceCreate, WorkspaceMemberCreate
from sprintboard.services.common import get_or_404, slugify
from sprintboard.services.permissions import require_right

logger = logging.getLogger(__name__)


class Workspaces:
    @staticmethod
    def create(db: Session, payload: WorkspaceCreate, user_id: UUID) -> Workspace:
        slug = slugify(payload.slug or payload.name)
        if db.query(Workspace.id).filter(Workspace.slug == slug).first():
            raise ConflictError(f"Workspace slug '{slug}' is already taken")
        workspace = Workspace(name=payload.name, slug=slug, description=payload.description, created_by=user_id)
        db.add(workspace)
        db.flush()
        db.add(WorkspaceMember(workspace_id=workspace.id, user_id=user_id, role=WorkspaceRole.WORKSPACE_OWNER))
        db.commit()
        db.refresh(workspace)
        logger.info("workspace_created workspace_id=%s user_id=%s", workspace.id, user_id)
        return workspace

    @staticmethod
    def get(db: Session, workspace_id: UUID, user_id: UUID) -> Workspace:
        workspace = get_or_404(db, Workspace, workspace_id)
        require_right(db, workspace.id, user_id, "get", "workspace")
        return workspace


class WorkspaceMembers:
    @staticmethod
    def add(db: Session, workspace_id: UUID, payload: WorkspaceMemberCreate, user_id: UUID) -> WorkspaceMember:
        workspace = get_or_404(db, Workspace, workspace_id)
        require_right(db, workspace.id, user_id, "create", "member")
        member = WorkspaceMember(workspace_id=workspace.id, user_id=payload.user_id, role=payload.role)
        db.add(member)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise ConflictError("User is already a member of this workspace") from exc
        db.refresh(member)
        logger.info(
            "workspace_member_added workspace_id=%s member_user_id=%s role=%s",
            workspace.id,
            member.user_id,
            member.role.value,
        )
        return member


class Teams:
    @staticmethod
    def create(db: Session, workspace_id: UUID, payload: TeamCreate, user_id: UUID) -> Team:
        workspace = get_or_404(db, Workspace, workspace_id)
        require_right(db, workspace.id, user_id, "create", "team")
        team = Team(workspace_id=workspace.id, **payload.model_dump())
        db.add(team)
        db.commit()
        db.refresh(team)
        logger.info("team_created team_id=%s workspace_id=%s", team.id, workspace.id)
        return team

    @staticmethod
    def get(db: Session, team_id: UUID, user_id: UUID) -> Team:
        team = get_or_404(db, Team, team_id)
        require_right(db, team.workspace_id, user_id, "get", "team")
        return team

    @staticmethod
    def add_member(db: Session, team_id: UUID, payload: TeamMemberCreate, user_id: UUID) -> TeamMember:
        team = get_or_404(db, Team, team_id)
        require_right(db, team.workspace_id, user_id, "update", "team")
        member = TeamMember(team_id=team.id, user_id=payload.user_id, role=payload.role)
        db.add(member)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise ConflictError("User is already a member of this team") from exc
        db.refresh(member)
        return member

    @staticmethod
    def link_project(db: Session, team_id: UUID, project_id: int, user_id: UUID) -> ProjectTeam:
        team = get_or_404(db, Team, team_id)
        project = get_or_404(db, Project, project_id)
        if project.workspace_id != team.workspace_id:
            raise ConflictError("Team and project belong to different workspaces")
        require_right(db, team.workspace_id, user_id, "update", "team")
        link = ProjectTeam(project_id=project.id, team_id=team.id)
        db.add(link)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise ConflictError("Team is already linked to this project") from exc
        db.refresh(link)
        logger.info("team_project_linked team_id=%s project_id=%s", team.id, project.id)
        return link


workspaces = Workspaces()
workspace_members = WorkspaceMembers()
teams = Teams()
