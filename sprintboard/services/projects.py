from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from sprintboard.config import settings
from sprintboard.errors import ConflictError, InvalidArgumentError
from sprintboard.models.projects import Epic, Project, Sprint, Task
from sprintboard.models.workspaces import Workspace
from sprintboard.queries.projects import EpicQuery, ProjectQuery, SprintQuery, TaskQuery
from sprintboard.schemas.projects import (
    EpicCreate,
    EpicRead,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
    SprintCreate,
    SprintRead,
    TaskCreate,
    TaskRead,
)
from sprintboard.schemas.search import Page, SearchRequest
from sprintboard.services.common import get_or_404, slugify
from sprintboard.services.filter_contract import Equals
from sprintboard.services.permissions import require_project_right, require_right
from sprintboard.services.search import run_search

logger = logging.getLogger(__name__)

SPRINT_DEFAULT_TAKE = 50


def _unique_slug_or_409(db: Session, workspace_id: UUID, name: str, exclude_id: int | None = None) -> str:
    slug = slugify(name)
    if not slug:
        raise InvalidArgumentError("Project name must contain letters or digits")
    query = db.query(Project.id).filter(Project.workspace_id == workspace_id).filter(Project.slug == slug)
    if exclude_id is not None:
        query = query.filter(Project.id != exclude_id)
    if query.first():
        raise ConflictError(f"Project with slug '{slug}' already exists in this workspace")
    return slug


class Projects:
    @staticmethod
    def create(db: Session, workspace_id: UUID, payload: ProjectCreate, user_id: UUID) -> Project:
        workspace = get_or_404(db, Workspace, workspace_id)
        require_right(db, workspace.id, user_id, "create", "project")
        slug = _unique_slug_or_409(db, workspace.id, payload.name)
        data = payload.model_dump()
        data["name"] = data["name"].strip()
        if data.get("project_manager_id") is None:
            data["project_manager_id"] = user_id
        project = Project(workspace_id=workspace.id, slug=slug, created_by=user_id, updated_by=user_id, **data)
        db.add(project)
        db.commit()
        db.refresh(project)
        logger.info("project_created project_id=%s workspace_id=%s", project.id, workspace.id)
        return project

    @staticmethod
    def get(db: Session, project_id: int, user_id: UUID) -> Project:
        project = get_or_404(db, Project, project_id)
        require_right(db, project.workspace_id, user_id, "get", "project")
        return project

    @staticmethod
    def update(db: Session, project_id: int, payload: ProjectUpdate, user_id: UUID) -> Project:
        project = get_or_404(db, Project, project_id)
        require_right(db, project.workspace_id, user_id, "update", "project")
        data = payload.model_dump(exclude_unset=True)
        if not data:
            raise InvalidArgumentError("No data provided for update")
        if data.get("name") is not None:
            data["name"] = data["name"].strip()
            if data["name"] != project.name:
                data["slug"] = _unique_slug_or_409(db, project.workspace_id, data["name"], exclude_id=project.id)
        start_date = data.get("start_date", project.start_date)
        end_date = data.get("end_date", project.end_date)
        if start_date and end_date and start_date > end_date:
            raise InvalidArgumentError("start_date must not be after end_date")
        for field, value in data.items():
            setattr(project, field, value)
        project.updated_by = user_id
        db.commit()
        db.refresh(project)
        return project

    @staticmethod
    def archive(db: Session, project_id: int, user_id: UUID) -> Project:
        project = get_or_404(db, Project, project_id)
        require_right(db, project.workspace_id, user_id, "delete", "project")
        project.is_archived = True
        project.updated_by = user_id
        db.commit()
        db.refresh(project)
        logger.info("project_archived project_id=%s", project.id)
        return project

    @staticmethod
    def search(
        db: Session,
        workspace_id: UUID,
        request: SearchRequest | dict[str, Any] | None,
        user_id: UUID,
    ) -> Page[ProjectRead]:
        workspace = get_or_404(db, Workspace, workspace_id)
        require_right(db, workspace.id, user_id, "get", "project")
        return run_search(
            db,
            ProjectQuery,
            ProjectRead,
            entity="project",
            scope={"workspace_id": workspace.id},
            request=request,
            default_take=settings.search_default_take,
            default_filters=(Equals("is_archived", False),),
            base_query=ProjectQuery(db).visible_to(user_id),
        )


class Sprints:
    @staticmethod
    def create(db: Session, project_id: int, payload: SprintCreate, user_id: UUID) -> Sprint:
        project = get_or_404(db, Project, project_id)
        require_right(db, project.workspace_id, user_id, "update", "project")
        data = payload.model_dump()
        data["version"] = Decimal(str(data["version"]))
        sprint = Sprint(project_id=project.id, created_by=user_id, updated_by=user_id, **data)
        db.add(sprint)
        db.commit()
        db.refresh(sprint)
        logger.info("sprint_created sprint_id=%s project_id=%s", sprint.id, project.id)
        return sprint

    @staticmethod
    def get(db: Session, sprint_id: int, user_id: UUID) -> Sprint:
        sprint = get_or_404(db, Sprint, sprint_id)
        project = get_or_404(db, Project, sprint.project_id)
        require_right(db, project.workspace_id, user_id, "get", "project")
        return sprint

    @staticmethod
    def search(
        db: Session,
        project_id: int,
        request: SearchRequest | dict[str, Any] | None,
        user_id: UUID,
    ) -> Page[SprintRead]:
        project = get_or_404(db, Project, project_id)
        require_right(db, project.workspace_id, user_id, "get", "project")
        return run_search(
            db,
            SprintQuery,
            SprintRead,
            entity="sprint",
            scope={"project_id": project.id},
            request=request,
            default_take=SPRINT_DEFAULT_TAKE,
        )


class Epics:
    @staticmethod
    def create(db: Session, project_id: int, payload: EpicCreate, user_id: UUID) -> Epic:
        project = get_or_404(db, Project, project_id)
        require_project_right(db, project, user_id, "create", "epic")
        epic = Epic(project_id=project.id, created_by=user_id, updated_by=user_id, **payload.model_dump())
        db.add(epic)
        db.commit()
        db.refresh(epic)
        logger.info("epic_created epic_id=%s project_id=%s", epic.id, project.id)
        return epic

    @staticmethod
    def get(db: Session, epic_id: int, user_id: UUID) -> Epic:
        epic = get_or_404(db, Epic, epic_id)
        project = get_or_404(db, Project, epic.project_id)
        require_project_right(db, project, user_id, "get", "epic")
        return epic

    @staticmethod
    def search(
        db: Session,
        project_id: int,
        request: SearchRequest | dict[str, Any] | None,
        user_id: UUID,
    ) -> Page[EpicRead]:
        project = get_or_404(db, Project, project_id)
        require_project_right(db, project, user_id, "get", "epic")
        return run_search(
            db,
            EpicQuery,
            EpicRead,
            entity="epic",
            scope={"project_id": project.id},
            request=request,
            default_take=settings.search_default_take,
        )


class Tasks:
    @staticmethod
    def _epic_in_project(db: Session, project_id: int, epic_id: int) -> tuple[Project, Epic]:
        project = get_or_404(db, Project, project_id)
        epic = get_or_404(db, Epic, epic_id)
        if epic.project_id != project.id:
            raise InvalidArgumentError("Epic does not belong to the specified project")
        return project, epic

    @staticmethod
    def create(db: Session, project_id: int, epic_id: int, payload: TaskCreate, user_id: UUID) -> Task:
        project, epic = Tasks._epic_in_project(db, project_id, epic_id)
        require_project_right(db, project, user_id, "create", "task")
        task = Task(epic_id=epic.id, created_by=user_id, updated_by=user_id, **payload.model_dump())
        db.add(task)
        db.commit()
        db.refresh(task)
        logger.info("task_created task_id=%s epic_id=%s", task.id, epic.id)
        return task

    @staticmethod
    def get(db: Session, task_id: int, user_id: UUID) -> Task:
        task = get_or_404(db, Task, task_id)
        epic = get_or_404(db, Epic, task.epic_id)
        project = get_or_404(db, Project, epic.project_id)
        require_project_right(db, project, user_id, "get", "task")
        return task

    @staticmethod
    def search(
        db: Session,
        project_id: int,
        epic_id: int,
        request: SearchRequest | dict[str, Any] | None,
        user_id: UUID,
    ) -> Page[TaskRead]:
        project, epic = Tasks._epic_in_project(db, project_id, epic_id)
        require_project_right(db, project, user_id, "get", "task")
        return run_search(
            db,
            TaskQuery,
            TaskRead,
            entity="task",
            scope={"epic_id": epic.id},
            request=request,
            default_take=settings.search_default_take,
        )


projects = Projects()
sprints = Sprints()
epics = Epics()
tasks = Tasks()
