import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from sprintboard.api.deps import get_current_user_id, get_db
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
from sprintboard.services import projects as projects_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/workspaces/{workspace_id}/projects",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    tags=["projects"],
)
def create_project(
    workspace_id: UUID,
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("create_project workspace_id=%s user_id=%s", workspace_id, user_id)
    return projects_service.projects.create(db, workspace_id, payload, user_id)


@router.post(
    "/workspaces/{workspace_id}/projects/search",
    response_model=Page[ProjectRead],
    tags=["projects"],
)
def search_projects(
    workspace_id: UUID,
    payload: SearchRequest | None = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("search_projects workspace_id=%s user_id=%s", workspace_id, user_id)
    return projects_service.projects.search(db, workspace_id, payload, user_id)


@router.get("/projects/{project_id}", response_model=ProjectRead, tags=["projects"])
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return projects_service.projects.get(db, project_id, user_id)


@router.patch("/projects/{project_id}", response_model=ProjectRead, tags=["projects"])
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("update_project project_id=%s user_id=%s", project_id, user_id)
    return projects_service.projects.update(db, project_id, payload, user_id)


@router.post("/projects/{project_id}/archive", response_model=ProjectRead, tags=["projects"])
def archive_project(
    project_id: int,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("archive_project project_id=%s user_id=%s", project_id, user_id)
    return projects_service.projects.archive(db, project_id, user_id)


@router.post(
    "/projects/{project_id}/sprints",
    response_model=SprintRead,
    status_code=status.HTTP_201_CREATED,
    tags=["sprints"],
)
def create_sprint(
    project_id: int,
    payload: SprintCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("create_sprint project_id=%s user_id=%s", project_id, user_id)
    return projects_service.sprints.create(db, project_id, payload, user_id)


@router.post("/projects/{project_id}/sprints/search", response_model=Page[SprintRead], tags=["sprints"])
def search_sprints(
    project_id: int,
    payload: SearchRequest | None = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("search_sprints project_id=%s user_id=%s", project_id, user_id)
    return projects_service.sprints.search(db, project_id, payload, user_id)


@router.get("/sprints/{sprint_id}", response_model=SprintRead, tags=["sprints"])
def get_sprint(
    sprint_id: int,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return projects_service.sprints.get(db, sprint_id, user_id)


@router.post(
    "/projects/{project_id}/epics",
    response_model=EpicRead,
    status_code=status.HTTP_201_CREATED,
    tags=["epics"],
)
def create_epic(
    project_id: int,
    payload: EpicCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("create_epic project_id=%s user_id=%s", project_id, user_id)
    return projects_service.epics.create(db, project_id, payload, user_id)


@router.post("/projects/{project_id}/epics/search", response_model=Page[EpicRead], tags=["epics"])
def search_epics(
    project_id: int,
    payload: SearchRequest | None = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("search_epics project_id=%s user_id=%s", project_id, user_id)
    return projects_service.epics.search(db, project_id, payload, user_id)


@router.get("/epics/{epic_id}", response_model=EpicRead, tags=["epics"])
def get_epic(
    epic_id: int,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return projects_service.epics.get(db, epic_id, user_id)


@router.post(
    "/projects/{project_id}/epics/{epic_id}/tasks",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    tags=["tasks"],
)
def create_task(
    project_id: int,
    epic_id: int,
    payload: TaskCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("create_task project_id=%s epic_id=%s user_id=%s", project_id, epic_id, user_id)
    return projects_service.tasks.create(db, project_id, epic_id, payload, user_id)


@router.post(
    "/projects/{project_id}/epics/{epic_id}/tasks/search",
    response_model=Page[TaskRead],
    tags=["tasks"],
)
def search_tasks(
    project_id: int,
    epic_id: int,
    payload: SearchRequest | None = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("search_tasks project_id=%s epic_id=%s user_id=%s", project_id, epic_id, user_id)
    return projects_service.tasks.search(db, project_id, epic_id, payload, user_id)


@router.get("/tasks/{task_id}", response_model=TaskRead, tags=["tasks"])
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return projects_service.tasks.get(db, task_id, user_id)
