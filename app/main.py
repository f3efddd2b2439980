"""FastAPI application entrypoint for the widget API."""

from collections.abc import Awaitable
from collections.abc import Callable
from datetime import datetime
from datetime import timezone
import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import Response

from app.api.tokens import router as tokens_router
from app.api.widgets import router as widgets_router
from app.core.config import get_settings
from app.core.errors import register_error_handlers
from app.db import models as _models  # noqa: F401

logger = logging.getLogger(__name__)

settings = get_settings()
logger.info("Starting widget API with settings=%s", settings.safe_for_logging())

app = FastAPI(title="Widget API")
register_error_handlers(app, docs_base_url=settings.docs_base_url)
app.include_router(tokens_router)
app.include_router(widgets_router)


@app.middleware("http")
async def add_day_header(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Stamp every response with the current UTC weekday name."""
    response = await call_next(request)
    response.headers["X-Day"] = datetime.now(timezone.utc).strftime("%A")
    return response


@app.get("/health")
def health() -> dict[str, str]:
    """Health check stub endpoint for service readiness."""
    return {"status": "ok"}
