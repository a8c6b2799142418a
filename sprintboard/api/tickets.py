import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from sprintboard.api.deps import get_current_user_id, get_db
from sprintboard.schemas.search import Page, SearchRequest
from sprintboard.schemas.tickets import TicketCreate, TicketRead, TicketUpdate
from sprintboard.services import tickets as tickets_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/projects/{project_id}/tickets",
    response_model=TicketRead,
    status_code=status.HTTP_201_CREATED,
    tags=["tickets"],
)
def create_ticket(
    project_id: int,
    payload: TicketCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("create_ticket project_id=%s user_id=%s", project_id, user_id)
    return tickets_service.tickets.create(db, project_id, payload, user_id)


@router.post("/projects/{project_id}/tickets/search", response_model=Page[TicketRead], tags=["tickets"])
def search_tickets(
    project_id: int,
    payload: SearchRequest | None = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("search_tickets project_id=%s user_id=%s", project_id, user_id)
    return tickets_service.tickets.search(db, project_id, payload, user_id)


@router.get("/tickets/{ticket_id}", response_model=TicketRead, tags=["tickets"])
def get_ticket(
    ticket_id: int,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return tickets_service.tickets.get(db, ticket_id, user_id)


@router.patch("/tickets/{ticket_id}", response_model=TicketRead, tags=["tickets"])
def update_ticket(
    ticket_id: int,
    payload: TicketUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    logger.info("update_ticket ticket_id=%s user_id=%s", ticket_id, user_id)
    return tickets_service.tickets.update(db, ticket_id, payload, user_id)
