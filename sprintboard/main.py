from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from sprintboard import models  # noqa: F401
from sprintboard.api.projects import router as projects_router
from sprintboard.api.tickets import router as tickets_router
from sprintboard.api.workspaces import router as workspaces_router
from sprintboard.db import Base, get_engine
from sprintboard.errors import register_error_handlers
from sprintboard.logging import configure_logging
from sprintboard.observability import ObservabilityMiddleware
from sprintboard.telemetry import setup_otel


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # No migration tooling; tables are created if missing.
    Base.metadata.create_all(bind=get_engine())
    yield


app = FastAPI(title="sprintboard API", lifespan=lifespan)

configure_logging()
setup_otel(app)
app.add_middleware(ObservabilityMiddleware)
register_error_handlers(app)


def _include_api_router(router):
    app.include_router(router)
    app.include_router(router, prefix="/api/v1")


_include_api_router(workspaces_router)
_include_api_router(projects_router)
_include_api_router(tickets_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.head("/health")
def head_health():
    return Response(status_code=200)


@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
