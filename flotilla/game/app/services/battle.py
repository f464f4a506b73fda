"""Battle flow orchestration: human vs AI matches and AI turn driving."""

from __future__ import annotations

import logging
import random
import time
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum

from flotilla.game.ai.cheating_hunt import CheatingHuntAI
from flotilla.game.ai.parity_hunt import ParityHuntAI
from flotilla.game.ai.random_hunt import RandomHuntAI
from flotilla.game.ai.strategy import AIStrategy
from flotilla.game.app.events import MatchEventHub, events_for
from flotilla.game.app.state_machine import MatchPhase, phase_of
from flotilla.game.core.board import Board
from flotilla.game.core.fleet import random_fleet, validate_fleet
from flotilla.game.core.models import BOARD_SIZE, Coord, ShipPlacement, ShotResult, Side
from flotilla.game.core.rules import (
    Clock,
    GameOverSummary,
    MatchSnapshot,
    MatchState,
    MoveResolution,
    MoveResultEvent,
    apply_move,
    create_match,
    game_over_summary,
    snapshot,
)
from flotilla.game.infra.config import MatchSettings

logger = logging.getLogger(__name__)

Sleep = Callable[[float], None]


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, name: str) -> Difficulty:
        """Parse a difficulty name; unknown names select MEDIUM."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            logger.warning("unknown_difficulty name=%r fallback=%s", name, cls.MEDIUM.value)
            return cls.MEDIUM


@dataclass(frozen=True, slots=True)
class StartMatchResult:
    """Outcome of starting a new match."""

    state: MatchState | None
    ai_strategy: AIStrategy | None
    status: str
    success: bool


@dataclass(frozen=True, slots=True)
class PlayerTurnResult:
    """Outcome of a full player action (player shot + AI replies)."""

    shot: MoveResultEvent | None
    ai_shots: tuple[MoveResultEvent, ...]
    status: str
    snapshot: MatchSnapshot | None
    summary: GameOverSummary | None = None

    @property
    def accepted(self) -> bool:
        return self.shot is not None


def build_ai_strategy(
    difficulty: Difficulty | str,
    rng: random.Random,
    settings: MatchSettings | None = None,
) -> AIStrategy:
    """Construct AI strategy from selected difficulty."""
    settings = settings or MatchSettings()
    selected = difficulty if isinstance(difficulty, Difficulty) else Difficulty.parse(difficulty)
    if selected is Difficulty.EASY:
        return RandomHuntAI(rng)
    if selected is Difficulty.HARD:
        return CheatingHuntAI(rng, cheat_probability=settings.hard_cheat_probability)
    return ParityHuntAI(rng, random_probability=settings.medium_random_probability)


def ai_board(state: MatchState, side: Side, strategy: AIStrategy) -> Board:
    """Board handed to ``strategy`` playing ``side``: the redacted view unless it cheats."""
    if strategy.sees_ships:
        return state.board_of(side.other)
    return state.view_of(side)


def drive_ai_turn(
    state: MatchState,
    side: Side,
    strategy: AIStrategy,
    *,
    clock: Clock = time.monotonic,
    delay_seconds: float = 0.0,
    sleep: Sleep = time.sleep,
) -> list[MoveResolution]:
    """Let ``strategy`` fire for ``side`` until it misses or wins.

    Returns every accepted resolution in order; the last one holds the final
    state. Bounded by the number of board cells.
    """
    resolutions: list[MoveResolution] = []
    for _ in range(BOARD_SIZE * BOARD_SIZE):
        if state.game_over or state.turn is not side:
            break
        board = ai_board(state, side, strategy)
        if not board.attackable_cells():
            logger.error("ai_turn_board_resolved match_id=%s side=%s", state.match_id, side.value)
            break
        shot = strategy.choose_shot(board)
        if delay_seconds > 0:
            sleep(delay_seconds)
        resolution = apply_move(state, side, shot, clock=clock)
        if resolution.event is None:
            logger.warning(
                "ai_shot_rejected match_id=%s side=%s x=%d y=%d", state.match_id, side.value, shot.x, shot.y
            )
            continue
        strategy.notify_result(shot, resolution.event.result.is_hit, resolution.event.result.is_sunk)
        resolutions.append(resolution)
        state = resolution.state
    return resolutions


class BattleService:
    """Runs one human-vs-AI match at a time; the human always moves first."""

    def __init__(
        self,
        rng: random.Random,
        settings: MatchSettings | None = None,
        *,
        events: MatchEventHub | None = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = time.sleep,
    ) -> None:
        self._rng = rng
        self._settings = settings or MatchSettings()
        self._events = events or MatchEventHub()
        self._clock = clock
        self._sleep = sleep
        self._state: MatchState | None = None
        self._strategy: AIStrategy | None = None

    @property
    def events(self) -> MatchEventHub:
        return self._events

    @property
    def state(self) -> MatchState | None:
        return self._state

    @property
    def phase(self) -> MatchPhase:
        return phase_of(self._state)

    def snapshot(self) -> MatchSnapshot | None:
        if self._state is None:
            return None
        return snapshot(self._state, Side.PLAYER)

    def start_match(
        self,
        player_fleet: Sequence[ShipPlacement],
        difficulty: Difficulty | str,
        *,
        match_id: str | None = None,
    ) -> StartMatchResult:
        """Validate the human fleet, generate the AI fleet and start a match."""
        validation = validate_fleet(player_fleet)
        if not validation.valid:
            return StartMatchResult(
                state=None, ai_strategy=None, status=f"Invalid fleet: {validation.reason}", success=False
            )
        ai_fleet = random_fleet(
            self._rng,
            ship_attempts=self._settings.placement_ship_attempts,
            fleet_attempts=self._settings.placement_fleet_attempts,
        )
        if ai_fleet is None:
            return StartMatchResult(
                state=None, ai_strategy=None, status="Failed to generate the AI fleet.", success=False
            )

        strategy = build_ai_strategy(difficulty, self._rng, self._settings)
        state = create_match(
            match_id or f"ai_{uuid.uuid4().hex[:12]}",
            player_fleet,
            ai_fleet,
            first_turn=Side.PLAYER,
            clock=self._clock,
        )
        self._state = state
        self._strategy = strategy
        logger.info("battle_started match_id=%s difficulty=%s", state.match_id, strategy.name)
        return StartMatchResult(
            state=state,
            ai_strategy=strategy,
            status=f"Game started ({strategy.name}). Your turn.",
            success=True,
        )

    def player_move(self, x: int, y: int) -> PlayerTurnResult:
        """Apply the player's shot and, after a miss, the AI's full reply."""
        state = self._state
        if state is None or self._strategy is None:
            return PlayerTurnResult(shot=None, ai_shots=(), status="No match in progress.", snapshot=None)

        resolution = apply_move(state, Side.PLAYER, Coord(x, y), clock=self._clock)
        if resolution.event is None:
            return PlayerTurnResult(
                shot=None,
                ai_shots=(),
                status="Invalid target. Choose another enemy cell.",
                snapshot=snapshot(state, Side.PLAYER),
                summary=game_over_summary(state),
            )
        self._commit(resolution)
        status = _describe("You", resolution.event)

        ai_shots: list[MoveResultEvent] = []
        if not self._state_or_fail().game_over:
            for ai_resolution in drive_ai_turn(
                self._state_or_fail(),
                Side.OPPONENT,
                self._strategy,
                clock=self._clock,
                delay_seconds=self._settings.ai_move_delay_seconds,
                sleep=self._sleep,
            ):
                self._commit(ai_resolution)
                if ai_resolution.event is not None:
                    ai_shots.append(ai_resolution.event)
                    status = _describe("AI", ai_resolution.event)

        final = self._state_or_fail()
        return PlayerTurnResult(
            shot=resolution.event,
            ai_shots=tuple(ai_shots),
            status=status,
            snapshot=snapshot(final, Side.PLAYER),
            summary=game_over_summary(final),
        )

    def abandon(self) -> None:
        """Drop the current match; nothing external needs releasing."""
        if self._state is not None:
            logger.info("battle_abandoned match_id=%s", self._state.match_id)
        self._state = None
        self._strategy = None

    def _commit(self, resolution: MoveResolution) -> None:
        self._state = resolution.state
        summary = game_over_summary(resolution.state)
        view = snapshot(resolution.state, Side.PLAYER)
        for event in events_for(resolution, summary, view):
            self._events.publish(event)

    def _state_or_fail(self) -> MatchState:
        if self._state is None:
            raise RuntimeError("No match in progress.")
        return self._state


def play_ai_match(
    player: AIStrategy,
    opponent: AIStrategy,
    rng: random.Random,
    settings: MatchSettings | None = None,
    *,
    match_id: str | None = None,
    clock: Clock = time.monotonic,
) -> MatchState | None:
    """Play a full AI-vs-AI match; ``None`` if a fleet could not be generated."""
    settings = settings or MatchSettings()
    fleets = []
    for _ in range(2):
        fleet = random_fleet(
            rng,
            ship_attempts=settings.placement_ship_attempts,
            fleet_attempts=settings.placement_fleet_attempts,
        )
        if fleet is None:
            return None
        fleets.append(fleet)

    state = create_match(match_id or f"sim_{uuid.uuid4().hex[:12]}", fleets[0], fleets[1], clock=clock)
    strategies = {Side.PLAYER: player, Side.OPPONENT: opponent}
    # Each full turn consumes at least one cell, so two boards bound the loop.
    for _ in range(2 * BOARD_SIZE * BOARD_SIZE):
        if state.game_over:
            break
        resolutions = drive_ai_turn(state, state.turn, strategies[state.turn], clock=clock)
        if not resolutions:
            break
        state = resolutions[-1].state
    return state


def _describe(actor: str, event: MoveResultEvent) -> str:
    where = f"({event.x}, {event.y})"
    if event.result is ShotResult.WIN:
        outcome = "You win." if actor == "You" else f"{actor} wins."
        return f"{actor} fired at {where}: sunk the last ship. {outcome}"
    if event.result is ShotResult.SUNK:
        return f"{actor} fired at {where}: sunk a {event.ship_length}-deck ship."
    return f"{actor} fired at {where}: {event.result.value}."
