"""Main FastAPI application for the brain dump backend."""
from fastapi import FastAPI, Request

from braindump.api.routes.brain_dump import router as brain_dump_router
from braindump.core.config import settings
from braindump.core.logging import configure_logging
from braindump.core.middleware import RequestIDMiddleware
from braindump.observability.client import init_opik
from braindump.observability.tracing import trace
from braindump.worker.runner import start_worker, stop_worker

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(brain_dump_router)


@app.on_event("startup")
async def startup() -> None:
    """Initialize observability and start consuming queued tasks."""
    init_opik()
    start_worker()


@app.on_event("shutdown")
async def shutdown() -> None:
    stop_worker()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
