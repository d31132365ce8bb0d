"""Runtime primitives backing the mapwar HTTP API."""

from __future__ import annotations

import asyncio
import logging
import secrets
from collections import deque
from dataclasses import dataclass
from uuid import uuid4

from mapwar import schemas
from mapwar.config import Settings, get_settings
from mapwar.domain import layout, visibility
from mapwar.domain import models as dm
from mapwar.domain.game import GameState
from mapwar.utils.rng import seed_from_text

logger = logging.getLogger(__name__)


class MatchNotFoundError(LookupError):
    """Raised when a match token is unknown."""


class MatchLimitError(RuntimeError):
    """Raised when the server already hosts the configured number of matches."""


@dataclass(slots=True)
class StepRecord:
    """Events produced by one resolved step."""

    step: int
    events: list[dm.AnimationEvent]


class Match:
    """One running game, serialising every access to its ``GameState``."""

    def __init__(self, token: str, state: GameState, *, seed: int, history: int) -> None:
        self.token = token
        self.seed = seed
        self._state = state
        self._lock = asyncio.Lock()
        self._history: deque[StepRecord] = deque(maxlen=history)

    async def submit_action(self, player_token: str, action: dm.GameAction) -> None:
        """Validate and commit ``action``; ``GameActionError`` propagates."""

        async with self._lock:
            self._state.process_action(dm.PlayerToken(player_token), action)

    async def advance(self) -> StepRecord:
        async with self._lock:
            events = self._state.step_time()
            record = StepRecord(step=self._state.steps_resolved, events=events)
            self._history.append(record)
        return record

    async def winner(self) -> dm.PlayerIndex | None:
        async with self._lock:
            return self._state.winner()

    async def history(self) -> list[StepRecord]:
        async with self._lock:
            return list(self._history)

    async def snapshot(
        self, viewer_token: str | None = None, *, ticking: bool = False
    ) -> schemas.MatchRead:
        """Render the current world, fogged for ``viewer_token`` when given."""

        async with self._lock:
            return self._render(viewer_token, ticking)

    def _render(self, viewer_token: str | None, ticking: bool) -> schemas.MatchRead:
        state = self._state
        viewer: dm.PlayerIndex | None = None
        visible: set[int] | None = None
        if viewer_token is not None:
            viewer = state.player_index(dm.PlayerToken(viewer_token))
            visible = visibility.visible_territories(state, viewer, state.rules)

        territories = []
        for index, terr in enumerate(state.territories):
            item = schemas.TerritoryRead(
                index=index,
                sort=terr.sort,
                render_info=terr.render_info,
                adjacent=[int(n) for n in terr.adjacent],
            )
            if visible is not None and index not in visible:
                territories.append(item.model_copy(update={"visible": False}))
                continue
            if terr.contents is not None:
                update: dict[str, object] = {
                    "owner": int(terr.contents.owner),
                    "units": terr.contents.units,
                }
                # Standing orders are private to their owner.
                if viewer is None or terr.contents.owner == viewer:
                    update["command"] = schemas.command_from_domain(terr.command)
                item = item.model_copy(update=update)
            territories.append(item)

        players = [
            schemas.PlayerRead(
                index=index,
                is_alive=player.is_alive,
                defense_level=player.defense_level,
                attack_level=player.attack_level,
                vision_level=player.vision_level,
                growth_level=player.growth_level,
            )
            for index, player in enumerate(state.player_states)
        ]
        winner = state.winner()
        return schemas.MatchRead(
            token=self.token,
            step=state.steps_resolved,
            ticking=ticking,
            winner=int(winner) if winner is not None else None,
            viewer=int(viewer) if viewer is not None else None,
            territories=territories,
            players=players,
        )


class MatchRegistry:
    """Independent matches keyed by their token."""

    def __init__(self, *, max_matches: int, history: int, default_seed: int | None = None) -> None:
        self._matches: dict[str, Match] = {}
        self._max_matches = max_matches
        self._history = history
        self._default_seed = default_seed

    def __len__(self) -> int:
        return len(self._matches)

    def create_match(self, request: schemas.MatchCreate) -> Match:
        """Lay out a grid map, seat the roster, and register the match."""

        if len(self._matches) >= self._max_matches:
            raise MatchLimitError(f"match limit of {self._max_matches} reached")

        seed = request.seed
        if isinstance(seed, str):
            seed = seed_from_text(seed)
        if seed is None:
            seed = self._default_seed
        if seed is None:
            seed = secrets.randbits(64)

        territories = layout.generate_grid_layout(
            request.width,
            request.height,
            len(request.players),
            starting_units=request.starting_units,
            seed=seed,
        )
        players = [layout.PlayerSpec(token=token) for token in request.players]
        state = layout.build_game(territories, players, seed=seed)

        token = uuid4().hex
        match = Match(token, state, seed=seed, history=self._history)
        self._matches[token] = match
        logger.info(
            "created match %s (%dx%d, %d players, seed %d)",
            token,
            request.width,
            request.height,
            len(request.players),
            seed,
        )
        return match

    def get(self, token: str) -> Match:
        try:
            return self._matches[token]
        except KeyError:
            raise MatchNotFoundError(f"match {token!r} not found") from None

    def remove(self, token: str) -> None:
        self._matches.pop(token, None)


class TickManager:
    """Background scheduler that steps ticking matches at a fixed cadence.

    Stopping is explicit: :meth:`stop` signals the loop, which finishes the
    step in progress (if any) and exits.
    """

    MIN_INTERVAL_SECONDS = 0.05

    def __init__(self, matches: MatchRegistry, *, interval_seconds: float) -> None:
        self._matches = matches
        self._interval = max(interval_seconds, self.MIN_INTERVAL_SECONDS)
        self._enabled: set[str] = set()
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def enabled_matches(self) -> set[str]:
        return set(self._enabled)

    def is_enabled(self, token: str) -> bool:
        return token in self._enabled

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def set_enabled(self, token: str, enabled: bool) -> None:
        if enabled:
            self._enabled.add(token)
            self._ensure_running()
        else:
            self._enabled.discard(token)
            if not self._enabled:
                await self.stop()

    def _ensure_running(self) -> None:
        if self._task is None or self._task.done():
            self._stop_event = asyncio.Event()
            loop = asyncio.get_running_loop()
            self._task = loop.create_task(self._run_loop(), name="mapwar-tick-loop")

    async def stop(self) -> None:
        task = self._task
        if task is None:
            return
        self._stop_event.set()
        await task
        self._task = None

    async def _run_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
                    break
                except TimeoutError:
                    pass
                await self._run_cycle()
        finally:
            self._task = None

    async def _run_cycle(self) -> None:
        for token in list(self._enabled):
            try:
                match = self._matches.get(token)
            except MatchNotFoundError:
                logger.warning("match %s no longer registered; disabling autotick", token)
                self._enabled.discard(token)
                continue
            await match.advance()
            winner = await match.winner()
            if winner is not None:
                logger.info("match %s won by player %s; disabling autotick", token, winner)
                self._enabled.discard(token)
        if not self._enabled:
            logger.info("no ticking matches left; stopping tick loop")
            self._stop_event.set()


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(self, *, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.matches = MatchRegistry(
            max_matches=self.settings.max_matches,
            history=self.settings.event_history,
            default_seed=self.settings.default_seed,
        )
        self.ticks = TickManager(
            self.matches, interval_seconds=self.settings.tick_interval_seconds
        )

    async def shutdown(self) -> None:
        await self.ticks.stop()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
