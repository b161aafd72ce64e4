"""HTTP exposition — serve a Checker's status as JSON with FastAPI.

  GET /healthz: 200 when ok, 503 when any check fails, 500 if the
               status cannot be serialized
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.responses import PlainTextResponse, Response
from pydantic_core import PydanticSerializationError

from .checker import Checker

logger = logging.getLogger(__name__)

DEFAULT_PATH = "/healthz"


def render(checker: Checker) -> Response:
    """Build the HTTP response for the checker's current status."""
    status = checker.status()
    code = 200 if status.ok else 503

    try:
        body = status.model_dump_json()
    except PydanticSerializationError as e:
        logger.exception("Failed to serialize health status")
        return PlainTextResponse(f"internal healthz error: {e}", status_code=500)

    return Response(content=body, status_code=code, media_type="application/json")


def create_router(checker: Checker, path: str = DEFAULT_PATH) -> APIRouter:
    """Router exposing ``checker`` at ``path``, for mounting in an existing app."""
    router = APIRouter(tags=["health"])

    @router.get(path, response_class=Response)
    def healthz() -> Response:
        return render(checker)

    return router


def create_app(checker: Checker | None = None, path: str = DEFAULT_PATH) -> FastAPI:
    """Standalone FastAPI app serving only the health endpoint.

    A checker created here is closed when the app shuts down; a checker
    passed in is left to its owner.
    """
    owned = checker is None
    checker = checker or Checker()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if owned:
            checker.close()
            logger.info("Health checker closed")

    app = FastAPI(title="healthz", lifespan=lifespan)
    app.state.checker = checker
    app.include_router(create_router(checker, path))
    return app
