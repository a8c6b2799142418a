import enum
import uuid
from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sprintboard.db import Base


class TicketStatus(enum.Enum):
    TODO = "TODO"
    ACTIVE = "ACTIVE"
    IN_REVIEW = "IN_REVIEW"
    VALIDATED = "VALIDATED"
    PROD = "PROD"
    CANCELLED = "CANCELLED"
    REFUSED = "REFUSED"


class TicketPriority(enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class TicketCategory(enum.Enum):
    BUG = "BUG"
    TASK = "TASK"
    FEATURE = "FEATURE"


class Ticket(Base):
    __tablename__ = "tickets"
    __table_args__ = (UniqueConstraint("project_id", "ticket_number", name="uq_tickets_project_number"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    sprint_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("sprints.id"), index=True)
    parent_ticket_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("tickets.id"))
    ticket_number: Mapped[str] = mapped_column(String(40), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[TicketStatus] = mapped_column(Enum(TicketStatus), default=TicketStatus.TODO)
    priority: Mapped[TicketPriority] = mapped_column(Enum(TicketPriority), default=TicketPriority.MEDIUM)
    category: Mapped[TicketCategory] = mapped_column(Enum(TicketCategory), default=TicketCategory.TASK)
    story_points: Mapped[Decimal | None] = mapped_column(Numeric(6, 2))
    estimated_hours: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    actual_hours: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)
    due_date: Mapped[date | None] = mapped_column(Date)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    implementation_notes: Mapped[str | None] = mapped_column(Text)
    testing_notes: Mapped[str | None] = mapped_column(Text)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    updated_by: Mapped[uuid.UUID | None] = mapped_column(Uuid)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )

    project = relationship("Project", back_populates="tickets")
    sprint = relationship("Sprint", back_populates="tickets")
    parent_ticket = relationship("Ticket", remote_side="Ticket.id")
