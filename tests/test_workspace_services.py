import uuid

import pytest

from sprintboard.errors import ConflictError, PermissionDeniedError
from sprintboard.models.workspaces import TeamRole, WorkspaceMember, WorkspaceRole
from sprintboard.schemas.projects import ProjectCreate
from sprintboard.schemas.workspaces import TeamCreate, TeamMemberCreate, WorkspaceCreate, WorkspaceMemberCreate
from sprintboard.services import projects as projects_service
from sprintboard.services import workspaces as workspaces_service


def test_creator_becomes_workspace_owner(db_session, workspace, user_id):
    member = (
        db_session.query(WorkspaceMember)
        .filter(WorkspaceMember.workspace_id == workspace.id)
        .filter(WorkspaceMember.user_id == user_id)
        .one()
    )
    assert member.role == WorkspaceRole.WORKSPACE_OWNER


def test_duplicate_workspace_slug_conflicts(db_session, workspace, user_id):
    with pytest.raises(ConflictError):
        workspaces_service.workspaces.create(db_session, WorkspaceCreate(name="x", slug=workspace.slug), user_id)


def test_adding_a_member_twice_conflicts(db_session, workspace, user_id):
    newcomer = uuid.uuid4()
    payload = WorkspaceMemberCreate(user_id=newcomer, role=WorkspaceRole.DEVELOPER)
    workspaces_service.workspace_members.add(db_session, workspace.id, payload, user_id)

    with pytest.raises(ConflictError):
        workspaces_service.workspace_members.add(db_session, workspace.id, payload, user_id)


def test_developer_cannot_add_members(db_session, workspace, user_id):
    developer = uuid.uuid4()
    workspaces_service.workspace_members.add(
        db_session, workspace.id, WorkspaceMemberCreate(user_id=developer), user_id
    )

    with pytest.raises(PermissionDeniedError):
        workspaces_service.workspace_members.add(
            db_session, workspace.id, WorkspaceMemberCreate(user_id=uuid.uuid4()), developer
        )


def test_team_members_and_project_link(db_session, workspace, project, user_id):
    team = workspaces_service.teams.create(db_session, workspace.id, TeamCreate(name="Core"), user_id)
    member = workspaces_service.teams.add_member(
        db_session, team.id, TeamMemberCreate(user_id=user_id, role=TeamRole.LEADER), user_id
    )
    link = workspaces_service.teams.link_project(db_session, team.id, project.id, user_id)

    assert member.team_id == team.id
    assert link.project_id == project.id
    assert link.team_id == team.id


def test_team_cannot_link_project_of_other_workspace(db_session, workspace, user_id):
    other_workspace = workspaces_service.workspaces.create(db_session, WorkspaceCreate(name="Elsewhere"), user_id)
    foreign = projects_service.projects.create(db_session, other_workspace.id, ProjectCreate(name="Foreign"), user_id)
    team = workspaces_service.teams.create(db_session, workspace.id, TeamCreate(name="Core"), user_id)

    with pytest.raises(ConflictError):
        workspaces_service.teams.link_project(db_session, team.id, foreign.id, user_id)
