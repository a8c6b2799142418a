"""Query builders for project-related models."""

from __future__ import annotations

from typing import ClassVar, Self
from uuid import UUID

from sqlalchemy import or_, select

from sprintboard.models.projects import Epic, Project, Sprint, Task
from sprintboard.models.workspaces import ProjectTeam, TeamMember
from sprintboard.queries.base import BaseQuery

_COMMON_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "createdBy": "created_by",
    "updatedBy": "updated_by",
}


class ProjectQuery(BaseQuery[Project]):
    """Query builder for Project model.

    Usage:
        projects = (
            ProjectQuery(db)
            .where(predicate)
            .order_by((SortKey("name", "asc"),))
            .paginate(25, 0)
            .all()
        )
    """

    model_class = Project
    searchable_fields: ClassVar[tuple[str, ...]] = ("name", "description")
    field_mapping: ClassVar[dict[str, str]] = {
        **_COMMON_FIELDS,
        "workspaceId": "workspace_id",
        "fullDescription": "full_description",
        "projectManagerId": "project_manager_id",
        "startDate": "start_date",
        "endDate": "end_date",
        "isPublic": "is_public",
        "isArchived": "is_archived",
    }

    def visible_to(self, user_id: UUID) -> Self:
        """Projects the user manages or reaches through a linked team."""
        team_projects = (
            select(ProjectTeam.project_id)
            .join(TeamMember, TeamMember.team_id == ProjectTeam.team_id)
            .where(TeamMember.user_id == user_id)
        )
        clone = self._clone()
        clone._query = clone._query.filter(
            or_(Project.project_manager_id == user_id, Project.id.in_(team_projects))
        )
        return clone


class SprintQuery(BaseQuery[Sprint]):
    model_class = Sprint
    searchable_fields: ClassVar[tuple[str, ...]] = ("name", "description")
    field_mapping: ClassVar[dict[str, str]] = {
        **_COMMON_FIELDS,
        "projectId": "project_id",
        "startDate": "start_date",
        "endDate": "end_date",
    }


class EpicQuery(BaseQuery[Epic]):
    model_class = Epic
    searchable_fields: ClassVar[tuple[str, ...]] = ("title", "description")
    field_mapping: ClassVar[dict[str, str]] = {
        **_COMMON_FIELDS,
        "projectId": "project_id",
        "dueDate": "due_date",
    }


class TaskQuery(BaseQuery[Task]):
    model_class = Task
    searchable_fields: ClassVar[tuple[str, ...]] = ("title", "description")
    field_mapping: ClassVar[dict[str, str]] = {
        **_COMMON_FIELDS,
        "epicId": "epic_id",
        "dueDate": "due_date",
    }
