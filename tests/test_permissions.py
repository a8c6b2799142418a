import uuid

import pytest

from sprintboard.errors import PermissionDeniedError
from sprintboard.models.workspaces import (
    ProjectTeam,
    Team,
    TeamMember,
    TeamRole,
    Workspace,
    WorkspaceMember,
    WorkspaceRole,
)
from sprintboard.services.permissions import has_right, has_team_right, require_project_right


def _member(db_session, workspace, role):
    user = uuid.uuid4()
    db_session.add(WorkspaceMember(workspace_id=workspace.id, user_id=user, role=role))
    db_session.flush()
    return user


def _team(db_session, workspace):
    team = Team(workspace_id=workspace.id, name="Core")
    db_session.add(team)
    db_session.flush()
    return team


def _team_member(db_session, workspace, team, team_role, workspace_role=WorkspaceRole.DEVELOPER):
    user = _member(db_session, workspace, workspace_role)
    db_session.add(TeamMember(team_id=team.id, user_id=user, role=team_role))
    db_session.flush()
    return user


def test_workspace_without_members_is_open(db_session):
    workspace = Workspace(name="Empty", slug=f"empty-{uuid.uuid4().hex[:6]}")
    db_session.add(workspace)
    db_session.flush()

    assert has_right(db_session, workspace.id, uuid.uuid4(), "delete", "project") is True


def test_non_member_is_denied_once_workspace_has_members(db_session, workspace):
    assert has_right(db_session, workspace.id, uuid.uuid4(), "get", "project") is False


def test_owner_has_every_right(db_session, workspace, user_id):
    assert has_right(db_session, workspace.id, user_id, "delete", "workspace") is True


@pytest.mark.parametrize(
    ("role", "action", "resource", "expected"),
    [
        (WorkspaceRole.WORKSPACE_ADMIN, "delete", "workspace", False),
        (WorkspaceRole.WORKSPACE_ADMIN, "delete", "project", True),
        (WorkspaceRole.PROJECT_MANAGER, "delete", "project", True),
        (WorkspaceRole.PROJECT_MANAGER, "update", "workspace", False),
        (WorkspaceRole.DEVELOPER, "update", "project", True),
        (WorkspaceRole.DEVELOPER, "delete", "project", False),
        (WorkspaceRole.TESTER, "create", "project", False),
        (WorkspaceRole.TESTER, "update", "project", True),
        (WorkspaceRole.VIEWER, "get", "team", True),
        (WorkspaceRole.VIEWER, "update", "project", False),
        (WorkspaceRole.GUEST, "get", "project", True),
        (WorkspaceRole.GUEST, "create", "team", False),
    ],
)
def test_workspace_role_rights(db_session, workspace, role, action, resource, expected):
    user = _member(db_session, workspace, role)
    assert has_right(db_session, workspace.id, user, action, resource) is expected


@pytest.mark.parametrize(
    ("team_role", "action", "resource", "expected"),
    [
        (TeamRole.LEADER, "delete", "task", True),
        (TeamRole.MEMBER, "update", "task", True),
        (TeamRole.MEMBER, "create", "task", False),
        (TeamRole.MEMBER, "update", "member", False),
        (TeamRole.CONTRIBUTOR, "get", "epic", True),
        (TeamRole.CONTRIBUTOR, "update", "epic", False),
        (TeamRole.OBSERVER, "get", "task", True),
        (TeamRole.OBSERVER, "update", "task", False),
    ],
)
def test_team_role_rights(db_session, workspace, team_role, action, resource, expected):
    team = _team(db_session, workspace)
    user = _team_member(db_session, workspace, team, team_role)
    assert has_team_right(db_session, team.id, user, action, resource) is expected


def test_team_right_requires_team_membership(db_session, workspace, user_id):
    team = _team(db_session, workspace)
    assert has_team_right(db_session, team.id, user_id, "get", "task") is False


def test_project_right_goes_through_linked_team(db_session, workspace, project):
    team = _team(db_session, workspace)
    db_session.add(ProjectTeam(project_id=project.id, team_id=team.id))
    db_session.flush()
    observer = _team_member(db_session, workspace, team, TeamRole.OBSERVER)

    require_project_right(db_session, project, observer, "get", "task")
    with pytest.raises(PermissionDeniedError):
        require_project_right(db_session, project, observer, "create", "task")


def test_project_right_falls_back_to_workspace_without_team(db_session, workspace, project):
    viewer = _member(db_session, workspace, WorkspaceRole.VIEWER)

    require_project_right(db_session, project, viewer, "get", "epic")
    with pytest.raises(PermissionDeniedError):
        require_project_right(db_session, project, viewer, "create", "epic")
