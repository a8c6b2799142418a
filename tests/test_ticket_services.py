import uuid
from datetime import date

import pytest

from sprintboard.errors import InvalidArgumentError, NotFoundError
from sprintboard.models.tickets import TicketStatus
from sprintboard.schemas.projects import ProjectCreate, SprintCreate
from sprintboard.schemas.tickets import TicketCreate, TicketUpdate
from sprintboard.services import projects as projects_service
from sprintboard.services import tickets as tickets_service


def _create(db_session, project, user_id, **overrides):
    payload = TicketCreate(**({"title": "Untitled"} | overrides))
    return tickets_service.tickets.create(db_session, project.id, payload, user_id)


def test_ticket_numbers_are_sequential_per_project(db_session, project, user_id):
    first = _create(db_session, project, user_id)
    second = _create(db_session, project, user_id)

    assert first.ticket_number == "AUTH-0001"
    assert second.ticket_number == "AUTH-0002"


def test_ticket_defaults_assignee_to_creator(db_session, project, user_id):
    ticket = _create(db_session, project, user_id)
    assert ticket.assigned_to == user_id
    assert ticket.created_by == user_id


def test_ticket_sprint_must_belong_to_project(db_session, workspace, project, user_id):
    other = projects_service.projects.create(db_session, workspace.id, ProjectCreate(name="Other"), user_id)
    sprint = projects_service.sprints.create(
        db_session, other.id, SprintCreate(name="S1", start_date=date(2024, 1, 1)), user_id
    )

    with pytest.raises(InvalidArgumentError, match="Sprint does not belong"):
        _create(db_session, project, user_id, sprint_id=sprint.id)


def test_ticket_with_missing_sprint_is_not_found(db_session, project, user_id):
    with pytest.raises(NotFoundError):
        _create(db_session, project, user_id, sprint_id=424242)


def test_update_to_prod_sets_completed_at(db_session, project, user_id):
    ticket = _create(db_session, project, user_id)

    updated = tickets_service.tickets.update(db_session, ticket.id, TicketUpdate(status="PROD"), user_id)
    assert updated.status == TicketStatus.PROD
    assert updated.completed_at is not None

    reopened = tickets_service.tickets.update(db_session, ticket.id, TicketUpdate(status="ACTIVE"), user_id)
    assert reopened.completed_at is None


def test_ticket_search_maps_camel_case_filters(db_session, project, user_id):
    assignee = uuid.uuid4()
    wanted = _create(db_session, project, user_id, title="Fix login", assigned_to=assignee, story_points=5)
    _create(db_session, project, user_id, title="Fix logout", story_points=5)

    page = tickets_service.tickets.search(
        db_session,
        project.id,
        {"search": "fix", "filters": {"assignedTo": str(assignee), "storyPoints": {"gte": 3}}},
        user_id,
    )

    assert [item.id for item in page.items] == [wanted.id]
    assert page.items[0].story_points == 5.0
