"""FastAPI application wiring for mapwar."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mapwar import __version__, schemas
from mapwar.api import routes
from mapwar.api.runtime import ApiState, MatchNotFoundError, build_state
from mapwar.config import get_settings
from mapwar.domain.errors import GameActionError

logger = logging.getLogger(__name__)


async def _match_not_found(request: Request, exc: MatchNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"detail": "match not found"}
    )


async def _action_rejected(request: Request, exc: GameActionError) -> JSONResponse:
    logger.debug("rejected %s %s: %s", request.method, request.url.path, exc)
    payload = schemas.ActionRejected(reason=exc.reason, message=str(exc))
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=payload.model_dump(mode="json", by_alias=True),
    )


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Build the app; ``state_factory`` runs once per lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        api_state = state_factory()
        app.state.api_state = api_state
        logger.info(
            "mapwar %s up (tick interval %.2fs, at most %d matches)",
            __version__,
            api_state.ticks.interval_seconds,
            api_state.settings.max_matches,
        )
        try:
            yield
        finally:
            await api_state.shutdown()
            logger.info("mapwar shut down with %d matches open", len(api_state.matches))

    app = FastAPI(title="mapwar API", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )
    app.add_exception_handler(MatchNotFoundError, _match_not_found)
    app.add_exception_handler(GameActionError, _action_rejected)
    app.include_router(routes.router)
    return app


app = create_app()
