"""Query builders for database operations.

This module provides composable query builder classes that encapsulate
filter logic, making services cleaner and queries more testable.

Usage:
    from sprintboard.queries import TicketQuery

    results = (
        TicketQuery(db)
        .where(predicate)
        .order_by(ordering)
        .paginate(limit=25, offset=0)
        .all()
    )
"""

from sprintboard.queries.base import BaseQuery
from sprintboard.queries.projects import EpicQuery, ProjectQuery, SprintQuery, TaskQuery
from sprintboard.queries.tickets import TicketQuery

__all__ = [
    "BaseQuery",
    "EpicQuery",
    "ProjectQuery",
    "SprintQuery",
    "TaskQuery",
    "TicketQuery",
]
