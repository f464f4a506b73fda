"""Online match flow: apply decoded remote events to the local match view.

The remote authority resolves our shots against the opponent's hidden fleet
and relays opponent shots at ours. Locally we only hold our true board and
the redacted view of the opponent. Duplicate, stale or out-of-turn deliveries
are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from flotilla.game.core.board import Board
from flotilla.game.core.fleet import build_board, validate_fleet
from flotilla.game.core.models import CellState, Coord, ShipPlacement, ShotResult
from flotilla.game.core.rules import GameOverSummary, MatchSnapshot, MoveResultEvent
from flotilla.game.core.shot_resolution import resolve_shot

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OnlineMatchState:
    match_id: str
    player_id: str
    opponent_id: str
    own_board: Board
    opponent_view: Board
    is_my_turn: bool
    winner_id: str | None = None
    summary: GameOverSummary | None = None

    @property
    def game_over(self) -> bool:
        return self.winner_id is not None

    def snapshot(self) -> MatchSnapshot:
        return MatchSnapshot(
            own_board=self.own_board,
            opponent_board=self.opponent_view,
            is_my_turn=self.is_my_turn and not self.game_over,
            game_over=self.game_over,
            winner=self.winner_id,
        )


class OnlineMatch:
    """Local side of a remotely refereed match."""

    def __init__(self, state: OnlineMatchState) -> None:
        self._state = state

    @classmethod
    def start(
        cls,
        match_id: str,
        fleet: Sequence[ShipPlacement],
        *,
        player_id: str,
        opponent_id: str,
        my_turn: bool,
    ) -> OnlineMatch:
        """Start from our submitted fleet; raises ValueError if it is invalid."""
        validation = validate_fleet(fleet)
        if not validation.valid:
            raise ValueError(validation.reason)
        logger.info("online_match_started match_id=%s my_turn=%s", match_id, my_turn)
        return cls(
            OnlineMatchState(
                match_id=match_id,
                player_id=player_id,
                opponent_id=opponent_id,
                own_board=build_board(fleet),
                opponent_view=Board.empty(),
                is_my_turn=my_turn,
            )
        )

    @property
    def state(self) -> OnlineMatchState:
        return self._state

    def can_fire(self, x: int, y: int) -> bool:
        """Whether a move intent at ``(x, y)`` may be sent now."""
        state = self._state
        return (
            not state.game_over
            and state.is_my_turn
            and state.opponent_view.is_attackable(Coord(x, y))
        )

    def apply_own_result(self, event: MoveResultEvent) -> bool:
        """Apply the referee's verdict on our shot; returns whether anything changed."""
        state = self._state
        coord = event.coord
        if state.game_over or not state.is_my_turn or not state.opponent_view.is_attackable(coord):
            logger.debug(
                "online_result_ignored match_id=%s x=%d y=%d my_turn=%s",
                state.match_id,
                coord.x,
                coord.y,
                state.is_my_turn,
            )
            return False

        view = state.opponent_view
        if event.result is ShotResult.MISS:
            view = view.with_cell(coord, CellState.MISS)
        else:
            view = view.with_cell(coord, CellState.HIT)
            if event.result.is_sunk:
                line = _hit_line(view, coord)
                if event.ship_length is not None and len(line) != event.ship_length:
                    logger.warning(
                        "online_sunk_length_mismatch match_id=%s expected=%d found=%d",
                        state.match_id,
                        event.ship_length,
                        len(line),
                    )
                view = view.with_cells(line, CellState.SUNK)

        winner_id = state.winner_id
        if event.result is ShotResult.WIN or event.game_over:
            winner_id = event.winner_id or state.player_id
        self._state = replace(
            state,
            opponent_view=view,
            is_my_turn=event.result is not ShotResult.MISS,
            winner_id=winner_id,
        )
        return True

    def apply_opponent_move(self, x: int, y: int) -> MoveResultEvent | None:
        """Resolve an opponent shot on our fleet and return the event to relay."""
        state = self._state
        coord = Coord(x, y)
        if state.game_over or state.is_my_turn:
            logger.debug("online_opponent_move_ignored match_id=%s x=%d y=%d reason=turn", state.match_id, x, y)
            return None
        outcome = resolve_shot(state.own_board, coord)
        if outcome is None:
            logger.debug("online_opponent_move_ignored match_id=%s x=%d y=%d", state.match_id, x, y)
            return None

        won = outcome.result is ShotResult.WIN
        self._state = replace(
            state,
            own_board=outcome.board,
            is_my_turn=outcome.result is ShotResult.MISS,
            winner_id=state.opponent_id if won else None,
        )
        sunk_ship = outcome.ship if outcome.result.is_sunk else None
        return MoveResultEvent(
            x=x,
            y=y,
            result=outcome.result,
            ship_id=sunk_ship.ship_id if sunk_ship else None,
            ship_length=sunk_ship.length if sunk_ship else None,
            game_over=won,
            winner_id=state.opponent_id if won else None,
        )

    def set_turn(self, my_turn: bool) -> None:
        if not self._state.game_over:
            self._state = replace(self._state, is_my_turn=my_turn)

    def finish(self, summary: GameOverSummary) -> None:
        logger.info(
            "online_match_finished match_id=%s winner=%s moves=%d",
            self._state.match_id,
            summary.winner_id,
            summary.total_moves,
        )
        self._state = replace(
            self._state, winner_id=summary.winner_id, summary=summary, is_my_turn=False
        )


def _hit_line(view: Board, coord: Coord) -> list[Coord]:
    """Contiguous HIT cells through ``coord`` along whichever axis has more than one."""
    horizontal = _run(view, coord, 1, 0)
    if len(horizontal) > 1:
        return horizontal
    return _run(view, coord, 0, 1)


def _run(view: Board, coord: Coord, dx: int, dy: int) -> list[Coord]:
    cells = [coord]
    for sign in (-1, 1):
        step = Coord(coord.x + sign * dx, coord.y + sign * dy)
        while view.in_bounds(step) and view.state_at(step) is CellState.HIT:
            cells.append(step)
            step = Coord(step.x + sign * dx, step.y + sign * dy)
    return sorted(cells, key=lambda cell: (cell.y, cell.x))
