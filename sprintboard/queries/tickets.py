"""Query builders for ticket-related models."""

from __future__ import annotations

from typing import ClassVar

from sprintboard.models.tickets import Ticket
from sprintboard.queries.base import BaseQuery


class TicketQuery(BaseQuery[Ticket]):
    """Query builder for Ticket model.

    Usage:
        tickets = (
            TicketQuery(db)
            .where(predicate)
            .order_by(DEFAULT_ORDERING)
            .paginate(25, 0)
            .all()
        )
    """

    model_class = Ticket
    searchable_fields: ClassVar[tuple[str, ...]] = ("title", "description")
    field_mapping: ClassVar[dict[str, str]] = {
        "createdAt": "created_at",
        "updatedAt": "updated_at",
        "createdBy": "created_by",
        "updatedBy": "updated_by",
        "projectId": "project_id",
        "sprintId": "sprint_id",
        "parentTicketId": "parent_ticket_id",
        "ticketNumber": "ticket_number",
        "storyPoints": "story_points",
        "estimatedHours": "estimated_hours",
        "actualHours": "actual_hours",
        "assignedTo": "assigned_to",
        "dueDate": "due_date",
        "completedAt": "completed_at",
        # Legacy filter keys and sort aliases
        "sprint_ids": "sprint_id",
        "status_in": "status",
        "assign_to_in": "assigned_to",
        "name": "title",
        "value": "story_points",
    }
