"""Workspace and team role checks.

Workspace rights come from the caller's workspace role. Team rights
additionally require workspace ``get`` on ``team`` and then depend on the
caller's role inside the team.
"""

from __future__ import annotations

import logging
from typing import Literal
from uuid import UUID

from sqlalchemy.orm import Session

from sprintboard.errors import PermissionDeniedError
from sprintboard.models.workspaces import ProjectTeam, Team, TeamMember, TeamRole, WorkspaceMember, WorkspaceRole

logger = logging.getLogger(__name__)

Action = Literal["create", "get", "update", "delete", "assign"]
Resource = Literal["workspace", "project", "member", "team"]
TeamResource = Literal["member", "project", "epic", "task"]

_ALL = frozenset({"create", "get", "update", "delete", "assign"})
_READ = frozenset({"get"})
_WRITE_NO_DELETE = frozenset({"create", "get", "update"})

# role -> resource -> allowed actions; a missing resource means no rights
WORKSPACE_RIGHTS: dict[WorkspaceRole, dict[str, frozenset[str]]] = {
    WorkspaceRole.PROJECT_MANAGER: {
        "workspace": _READ,
        "project": _ALL,
        "member": frozenset({"get", "update"}),
        "team": _ALL,
    },
    WorkspaceRole.DEVELOPER: {
        "workspace": _READ,
        "project": _WRITE_NO_DELETE,
        "member": _READ,
        "team": frozenset({"get", "create"}),
    },
    WorkspaceRole.DESIGNER: {
        "workspace": _READ,
        "project": _WRITE_NO_DELETE,
        "member": _READ,
        "team": frozenset({"get", "create"}),
    },
    WorkspaceRole.TESTER: {
        "workspace": _READ,
        "project": frozenset({"get", "update"}),
        "member": _READ,
        "team": _READ,
    },
    WorkspaceRole.GUEST: {
        "workspace": _READ,
        "project": _READ,
        "member": _READ,
        "team": _READ,
    },
}

TEAM_RIGHTS: dict[TeamRole, dict[str, frozenset[str]]] = {
    TeamRole.MEMBER: {
        "member": _READ,
        "project": frozenset({"get", "update"}),
        "epic": frozenset({"get", "update"}),
        "task": frozenset({"get", "update"}),
    },
    TeamRole.CONTRIBUTOR: {"member": _READ, "project": _READ, "epic": _READ, "task": _READ},
}


def get_workspace_role(db: Session, workspace_id: UUID, user_id: UUID) -> WorkspaceRole | None:
    member = (
        db.query(WorkspaceMember)
        .filter(WorkspaceMember.workspace_id == workspace_id)
        .filter(WorkspaceMember.user_id == user_id)
        .first()
    )
    return member.role if member else None


def _workspace_has_members(db: Session, workspace_id: UUID) -> bool:
    return db.query(WorkspaceMember.id).filter(WorkspaceMember.workspace_id == workspace_id).first() is not None


def has_right(db: Session, workspace_id: UUID, user_id: UUID, action: Action, resource: Resource) -> bool:
    """Return whether ``user_id`` may perform ``action`` on ``resource``.

    A workspace without any member is open to everyone.
    """
    role = get_workspace_role(db, workspace_id, user_id)
    if role is None:
        return not _workspace_has_members(db, workspace_id)
    if role in (WorkspaceRole.SUPER_ADMIN, WorkspaceRole.WORKSPACE_OWNER):
        return True
    if role == WorkspaceRole.WORKSPACE_ADMIN:
        return not (resource == "workspace" and action == "delete")
    if role == WorkspaceRole.VIEWER:
        return action == "get"
    return action in WORKSPACE_RIGHTS.get(role, {}).get(resource, frozenset())


def has_team_right(db: Session, team_id: UUID, user_id: UUID, action: Action, resource: TeamResource) -> bool:
    member = db.query(TeamMember).filter(TeamMember.team_id == team_id).filter(TeamMember.user_id == user_id).first()
    if member is None:
        return False
    team = db.get(Team, team_id)
    if team is None:
        return False
    if not has_right(db, team.workspace_id, user_id, "get", "team"):
        return False
    if member.role == TeamRole.LEADER:
        return True
    if member.role == TeamRole.OBSERVER:
        return action == "get"
    return action in TEAM_RIGHTS.get(member.role, {}).get(resource, frozenset())


def project_team_id(db: Session, project_id: int) -> UUID | None:
    link = db.query(ProjectTeam).filter(ProjectTeam.project_id == project_id).order_by(ProjectTeam.id).first()
    return link.team_id if link else None


def require_right(db: Session, workspace_id: UUID, user_id: UUID, action: Action, resource: Resource) -> None:
    if not has_right(db, workspace_id, user_id, action, resource):
        logger.info(
            "permission_denied workspace_id=%s user_id=%s action=%s resource=%s",
            workspace_id,
            user_id,
            action,
            resource,
        )
        raise PermissionDeniedError(f"You don't have permission to {action} {resource} in this workspace")


def require_project_right(
    db: Session,
    project,
    user_id: UUID,
    action: Action,
    resource: TeamResource,
) -> None:
    """Check a right on something inside ``project``.

    Goes through the team linked to the project, or the workspace ``project``
    right when the project has no team.
    """
    team_id = project_team_id(db, project.id)
    if team_id is None:
        require_right(db, project.workspace_id, user_id, action, "project")
        return
    if not has_team_right(db, team_id, user_id, action, resource):
        logger.info(
            "permission_denied team_id=%s user_id=%s action=%s resource=%s",
            team_id,
            user_id,
            action,
            resource,
        )
        raise PermissionDeniedError(f"You don't have permission to {action} {resource} in this team")
