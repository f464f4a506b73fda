"""Match state and turn resolution logic."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace

from flotilla.game.core.board import Board
from flotilla.game.core.fleet import build_board
from flotilla.game.core.models import Coord, ShipPlacement, ShotResult, Side
from flotilla.game.core.shot_resolution import mark_view, resolve_shot

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

_BOARD_FIELDS = {Side.PLAYER: "player_board", Side.OPPONENT: "opponent_board"}
_VIEW_FIELDS = {Side.PLAYER: "player_view", Side.OPPONENT: "opponent_view"}


@dataclass(frozen=True, slots=True)
class MatchState:
    """Immutable state of one match.

    ``player_view`` is what the player has learned about the opponent's board
    and ``opponent_view`` the reverse; views never contain SHIP cells.
    """

    match_id: str
    player_board: Board
    opponent_board: Board
    player_view: Board
    opponent_view: Board
    turn: Side = Side.PLAYER
    winner: Side | None = None
    move_count: int = 0
    started_at: float = 0.0
    finished_at: float | None = None

    @property
    def game_over(self) -> bool:
        return self.winner is not None

    def board_of(self, side: Side) -> Board:
        """Return the true fleet board owned by ``side``."""
        return getattr(self, _BOARD_FIELDS[side])

    def view_of(self, side: Side) -> Board:
        """Return what ``side`` knows about the other side's board."""
        return getattr(self, _VIEW_FIELDS[side])


@dataclass(frozen=True, slots=True)
class MoveResultEvent:
    """Outcome of one resolved move, relayed to the other participant."""

    x: int
    y: int
    result: ShotResult
    ship_id: str | None = None
    ship_length: int | None = None
    game_over: bool = False
    winner_id: str | None = None

    @property
    def coord(self) -> Coord:
        return Coord(self.x, self.y)


@dataclass(frozen=True, slots=True)
class MoveResolution:
    """New match state and the event it produced; ``event`` is None for ignored moves."""

    state: MatchState
    event: MoveResultEvent | None = None
    attacker: Side | None = None

    @property
    def accepted(self) -> bool:
        return self.event is not None


@dataclass(frozen=True, slots=True)
class MatchSnapshot:
    """Everything a renderer may see for one side after a transition."""

    own_board: Board
    opponent_board: Board
    is_my_turn: bool
    game_over: bool
    winner: str | None


@dataclass(frozen=True, slots=True)
class GameOverSummary:
    winner_id: str
    total_moves: int
    duration_seconds: float


def create_match(
    match_id: str,
    player_fleet: Sequence[ShipPlacement],
    opponent_fleet: Sequence[ShipPlacement],
    *,
    first_turn: Side = Side.PLAYER,
    require_composition: bool = True,
    clock: Clock = time.monotonic,
) -> MatchState:
    """Create a match from two fleets; raises ValueError if either is invalid.

    ``require_composition=False`` accepts any rule-abiding set of ships, which
    scenario tests use for small fleets.
    """
    state = MatchState(
        match_id=match_id,
        player_board=build_board(player_fleet, require_composition=require_composition),
        opponent_board=build_board(opponent_fleet, require_composition=require_composition),
        player_view=Board.empty(),
        opponent_view=Board.empty(),
        turn=first_turn,
        started_at=clock(),
    )
    logger.info("match_created match_id=%s first_turn=%s", match_id, first_turn.value)
    return state


def apply_move(
    state: MatchState,
    side: Side,
    coord: Coord,
    *,
    clock: Clock = time.monotonic,
) -> MoveResolution:
    """Resolve ``side`` firing at ``coord``.

    Out-of-turn moves, moves after game over, out-of-bounds coordinates and
    cells already fired at are ignored: the returned state is the input state.
    """
    if state.game_over or side is not state.turn:
        logger.debug("move_ignored match_id=%s side=%s reason=turn", state.match_id, side.value)
        return MoveResolution(state=state)
    view = state.view_of(side)
    if not view.is_attackable(coord):
        logger.debug(
            "move_ignored match_id=%s side=%s x=%d y=%d reason=cell",
            state.match_id,
            side.value,
            coord.x,
            coord.y,
        )
        return MoveResolution(state=state)

    defender = side.other
    outcome = resolve_shot(state.board_of(defender), coord)
    if outcome is None:
        logger.debug("move_ignored match_id=%s side=%s reason=resolved", state.match_id, side.value)
        return MoveResolution(state=state)

    changes: dict[str, object] = {
        _BOARD_FIELDS[defender]: outcome.board,
        _VIEW_FIELDS[side]: mark_view(view, outcome, coord),
        "move_count": state.move_count + 1,
    }
    if outcome.result is ShotResult.MISS:
        changes["turn"] = defender
    elif outcome.result is ShotResult.WIN:
        changes["winner"] = side
        changes["finished_at"] = clock()

    new_state = replace(state, **changes)
    sunk_ship = outcome.ship if outcome.result.is_sunk else None
    event = MoveResultEvent(
        x=coord.x,
        y=coord.y,
        result=outcome.result,
        ship_id=sunk_ship.ship_id if sunk_ship else None,
        ship_length=sunk_ship.length if sunk_ship else None,
        game_over=new_state.game_over,
        winner_id=side.value if new_state.game_over else None,
    )
    if sunk_ship is not None:
        logger.info(
            "ship_sunk match_id=%s attacker=%s ship_id=%s length=%d",
            state.match_id,
            side.value,
            sunk_ship.ship_id,
            sunk_ship.length,
        )
    if new_state.game_over:
        logger.info(
            "game_over match_id=%s winner=%s moves=%d",
            state.match_id,
            side.value,
            new_state.move_count,
        )
    return MoveResolution(state=new_state, event=event, attacker=side)


def snapshot(state: MatchState, side: Side) -> MatchSnapshot:
    """Project match state for one side."""
    return MatchSnapshot(
        own_board=state.board_of(side),
        opponent_board=state.view_of(side),
        is_my_turn=not state.game_over and state.turn is side,
        game_over=state.game_over,
        winner=state.winner.value if state.winner is not None else None,
    )


def game_over_summary(state: MatchState) -> GameOverSummary | None:
    if state.winner is None:
        return None
    finished = state.finished_at if state.finished_at is not None else state.started_at
    return GameOverSummary(
        winner_id=state.winner.value,
        total_moves=state.move_count,
        duration_seconds=max(0.0, finished - state.started_at),
    )
