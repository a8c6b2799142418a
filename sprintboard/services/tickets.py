from __future__ import annotations

import logging
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from sprintboard.config import settings
from sprintboard.errors import InvalidArgumentError
from sprintboard.models.projects import Project, Sprint
from sprintboard.models.tickets import Ticket, TicketStatus
from sprintboard.queries.tickets import TicketQuery
from sprintboard.schemas.search import Page, SearchRequest
from sprintboard.schemas.tickets import TicketCreate, TicketRead, TicketUpdate
from sprintboard.services.common import get_or_404
from sprintboard.services.permissions import require_right
from sprintboard.services.search import run_search

logger = logging.getLogger(__name__)

TICKET_NUMBER_PADDING = 4
_DECIMAL_FIELDS = ("story_points", "estimated_hours", "actual_hours")


def _ticket_prefix(project: Project) -> str:
    head = project.slug.split("-")[0] if project.slug else ""
    return (head[:8] or "TICKET").upper()


def _format_number(prefix: str, padding: int, value: int) -> str:
    return f"{prefix}-{value:0{padding}d}"


def _next_ticket_number(db: Session, project: Project) -> str:
    locked = db.query(Project).filter(Project.id == project.id).with_for_update().one()
    value = (locked.ticket_sequence or 0) + 1
    locked.ticket_sequence = value
    db.flush()
    return _format_number(_ticket_prefix(locked), TICKET_NUMBER_PADDING, value)


def _ensure_sprint_in_project(db: Session, sprint_id: int | None, project_id: int) -> None:
    if sprint_id is None:
        return
    sprint = get_or_404(db, Sprint, sprint_id)
    if sprint.project_id != project_id:
        raise InvalidArgumentError("Sprint does not belong to the specified project")


def _ensure_parent_in_project(db: Session, parent_ticket_id: int | None, project_id: int) -> None:
    if parent_ticket_id is None:
        return
    parent = get_or_404(db, Ticket, parent_ticket_id, "Parent ticket")
    if parent.project_id != project_id:
        raise InvalidArgumentError("Parent ticket does not belong to the specified project")


def _to_decimals(data: dict[str, Any]) -> dict[str, Any]:
    for field in _DECIMAL_FIELDS:
        if data.get(field) is not None:
            data[field] = Decimal(str(data[field]))
    return data


class Tickets:
    @staticmethod
    def create(db: Session, project_id: int, payload: TicketCreate, user_id: UUID) -> Ticket:
        project = get_or_404(db, Project, project_id)
        require_right(db, project.workspace_id, user_id, "update", "project")
        _ensure_sprint_in_project(db, payload.sprint_id, project.id)
        _ensure_parent_in_project(db, payload.parent_ticket_id, project.id)

        data = _to_decimals(payload.model_dump())
        if data.get("assigned_to") is None:
            data["assigned_to"] = user_id
        ticket = Ticket(
            project_id=project.id,
            ticket_number=_next_ticket_number(db, project),
            created_by=user_id,
            updated_by=user_id,
            **data,
        )
        if ticket.status == TicketStatus.PROD:
            ticket.completed_at = datetime.now(UTC)
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
        logger.info(
            "ticket_created ticket_id=%s ticket_number=%s project_id=%s",
            ticket.id,
            ticket.ticket_number,
            project.id,
        )
        return ticket

    @staticmethod
    def get(db: Session, ticket_id: int, user_id: UUID) -> Ticket:
        ticket = get_or_404(db, Ticket, ticket_id)
        project = get_or_404(db, Project, ticket.project_id)
        require_right(db, project.workspace_id, user_id, "get", "project")
        return ticket

    @staticmethod
    def update(db: Session, ticket_id: int, payload: TicketUpdate, user_id: UUID) -> Ticket:
        ticket = get_or_404(db, Ticket, ticket_id)
        project = get_or_404(db, Project, ticket.project_id)
        require_right(db, project.workspace_id, user_id, "update", "project")
        data = _to_decimals(payload.model_dump(exclude_unset=True))
        if not data:
            raise InvalidArgumentError("No data provided for update")
        if "sprint_id" in data:
            _ensure_sprint_in_project(db, data["sprint_id"], project.id)
        status = data.get("status")
        if status is not None and status != ticket.status:
            ticket.completed_at = datetime.now(UTC) if status == TicketStatus.PROD else None
        for field, value in data.items():
            setattr(ticket, field, value)
        ticket.updated_by = user_id
        db.commit()
        db.refresh(ticket)
        return ticket

    @staticmethod
    def search(
        db: Session,
        project_id: int,
        request: SearchRequest | dict[str, Any] | None,
        user_id: UUID,
    ) -> Page[TicketRead]:
        project = get_or_404(db, Project, project_id)
        require_right(db, project.workspace_id, user_id, "get", "project")
        return run_search(
            db,
            TicketQuery,
            TicketRead,
            entity="ticket",
            scope={"project_id": project.id},
            request=request,
            default_take=settings.search_default_take,
        )


tickets = Tickets()
