"""Request logging and search metrics."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from prometheus_client import Counter, Histogram

from sprintboard.logging import get_logger

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = get_logger(__name__)

SEARCH_REQUESTS = Counter(
    "search_requests_total",
    "Total search requests",
    ["entity", "outcome"],  # outcome: success, invalid, error
)

SEARCH_DURATION = Histogram(
    "search_duration_seconds",
    "Time spent running a search (query + count)",
    ["entity"],
)

SEARCH_RECEIVED = "search.received"
SEARCH_PREDICATE_BUILT = "search.predicate_built"
SEARCH_COMPLETED = "search.completed"
SEARCH_FAILED = "search.failed"


@dataclass(frozen=True)
class SearchEvent:
    name: str
    entity: str
    fields: dict[str, Any] = field(default_factory=dict)


class SearchObserver(Protocol):
    def emit(self, event: SearchEvent) -> None: ...


class LoggingSearchObserver:
    """Default observer: one log line per event plus Prometheus metrics."""

    def emit(self, event: SearchEvent) -> None:
        detail = " ".join(f"{key}={value}" for key, value in event.fields.items())
        if event.name == SEARCH_FAILED:
            logger.warning("%s entity=%s %s", event.name, event.entity, detail)
            SEARCH_REQUESTS.labels(entity=event.entity, outcome=event.fields.get("outcome", "error")).inc()
            return
        logger.info("%s entity=%s %s", event.name, event.entity, detail)
        if event.name == SEARCH_COMPLETED:
            SEARCH_REQUESTS.labels(entity=event.entity, outcome="success").inc()
            duration = event.fields.get("duration_seconds")
            if duration is not None:
                SEARCH_DURATION.labels(entity=event.entity).observe(duration)


default_observer = LoggingSearchObserver()


class ObservabilityMiddleware:
    """ASGI middleware logging method, path, status and duration per request."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "http_request method=%s path=%s status=%s duration_ms=%.1f",
                scope.get("method"),
                scope.get("path"),
                status_code,
                duration_ms,
            )
