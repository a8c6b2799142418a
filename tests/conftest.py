import uuid
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sprintboard import models  # noqa: F401
from sprintboard.db import Base
from sprintboard.models.projects import Project
from sprintboard.models.tickets import Ticket
from sprintboard.schemas.projects import ProjectCreate
from sprintboard.schemas.workspaces import WorkspaceCreate
from sprintboard.services import projects as projects_service
from sprintboard.services import workspaces as workspaces_service


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _configure_sqlite(dbapi_connection, _connection_record):
        # Let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest correctly.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autoflush=False,
        autocommit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture()
def user_id():
    return uuid.uuid4()


@pytest.fixture()
def workspace(db_session, user_id):
    payload = WorkspaceCreate(name=f"Acme {uuid.uuid4().hex[:8]}")
    return workspaces_service.workspaces.create(db_session, payload, user_id)


@pytest.fixture()
def project(db_session, workspace, user_id):
    payload = ProjectCreate(name="Auth Platform", description="Login and identity")
    return projects_service.projects.create(db_session, workspace.id, payload, user_id)


@pytest.fixture()
def make_ticket(db_session):
    """Insert tickets directly with increasing ``created_at`` values."""
    base_time = datetime(2024, 1, 1, tzinfo=UTC)
    counter = {"n": 0}

    def _make(project: Project, **overrides) -> Ticket:
        counter["n"] += 1
        values = {
            "title": f"Ticket {counter['n']}",
            "ticket_number": f"T-{counter['n']:04d}",
            "created_at": base_time + timedelta(minutes=counter["n"]),
        }
        values.update(overrides)
        ticket = Ticket(project_id=project.id, **values)
        db_session.add(ticket)
        db_session.flush()
        return ticket

    return _make
