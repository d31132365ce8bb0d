"""HTTP routes for the mapwar API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from mapwar import __version__, schemas
from mapwar.api.runtime import ApiState, MatchLimitError
from mapwar.domain.errors import PlayerNotFound

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "version": __version__,
        "matches": len(state.matches),
        "tick_interval_seconds": state.ticks.interval_seconds,
    }


@router.post(
    "/matches",
    response_model=schemas.MatchRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_match(request: schemas.MatchCreate, state: ApiStateDep) -> schemas.MatchRead:
    try:
        match = state.matches.create_match(request)
    except MatchLimitError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if request.auto_tick:
        await state.ticks.set_enabled(match.token, True)
    return await match.snapshot(ticking=state.ticks.is_enabled(match.token))


@router.get("/matches/{token}", response_model=schemas.MatchRead)
async def get_match(
    token: str,
    state: ApiStateDep,
    player: Annotated[str | None, Query(description="Player token to fog the view for")] = None,
) -> schemas.MatchRead:
    match = state.matches.get(token)
    try:
        return await match.snapshot(player, ticking=state.ticks.is_enabled(token))
    except PlayerNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post(
    "/matches/{token}/actions",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={status.HTTP_409_CONFLICT: {"model": schemas.ActionRejected}},
)
async def submit_action(token: str, request: schemas.ActionSubmit, state: ApiStateDep) -> None:
    match = state.matches.get(token)
    await match.submit_action(request.player_token, request.action.to_domain())


@router.post("/matches/{token}/step", response_model=schemas.StepResult)
async def step_match(token: str, state: ApiStateDep) -> schemas.StepResult:
    match = state.matches.get(token)
    record = await match.advance()
    winner = await match.winner()
    return schemas.StepResult(
        step=record.step,
        events=[schemas.event_from_domain(event) for event in record.events],
        winner=int(winner) if winner is not None else None,
    )


@router.get("/matches/{token}/events", response_model=list[schemas.StepResult])
async def list_events(token: str, state: ApiStateDep) -> list[schemas.StepResult]:
    match = state.matches.get(token)
    return [
        schemas.StepResult(
            step=record.step,
            events=[schemas.event_from_domain(event) for event in record.events],
        )
        for record in await match.history()
    ]


@router.post("/matches/{token}/schedule", response_model=schemas.MatchRead)
async def update_schedule(
    token: str,
    request: schemas.ScheduleUpdate,
    state: ApiStateDep,
) -> schemas.MatchRead:
    match = state.matches.get(token)
    await state.ticks.set_enabled(token, request.enabled)
    return await match.snapshot(ticking=state.ticks.is_enabled(token))


@router.delete("/matches/{token}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_match(token: str, state: ApiStateDep) -> None:
    state.matches.get(token)
    await state.ticks.set_enabled(token, False)
    state.matches.remove(token)
