"""Shot outcome evaluation (miss/hit/sunk) against a true board."""

from __future__ import annotations

from dataclasses import dataclass

from flotilla.game.core.board import Board, Ship
from flotilla.game.core.models import CellState, Coord, ShotResult


@dataclass(frozen=True, slots=True)
class ShotOutcome:
    """Updated defender board plus what the shot did."""

    board: Board
    result: ShotResult
    ship: Ship | None = None


def resolve_shot(board: Board, coord: Coord) -> ShotOutcome | None:
    """Resolve a shot against a board, or ``None`` if the cell cannot be fired at.

    A sunk ship has every one of its cells switched to SUNK; a shot that sinks
    the last ship is reported as WIN.
    """
    if not board.is_attackable(coord):
        return None

    if board.state_at(coord) is CellState.EMPTY:
        return ShotOutcome(board=board.with_cell(coord, CellState.MISS), result=ShotResult.MISS)

    ship = board.ship_at(coord)
    if ship is None:
        raise ValueError(f"SHIP cell {coord} is not covered by any ship.")
    hit_ship = ship.with_hit(coord)
    updated = board.with_cell(coord, CellState.HIT).with_ship_hit(ship.ship_id, coord)
    if not hit_ship.is_sunk:
        return ShotOutcome(board=updated, result=ShotResult.HIT, ship=hit_ship)

    updated = updated.with_cells(hit_ship.positions, CellState.SUNK)
    result = ShotResult.WIN if updated.all_ships_sunk else ShotResult.SUNK
    return ShotOutcome(board=updated, result=result, ship=hit_ship)


def mark_view(view: Board, outcome: ShotOutcome, coord: Coord) -> Board:
    """Mirror a resolved shot onto the attacker's redacted view."""
    if outcome.result is ShotResult.MISS:
        return view.with_cell(coord, CellState.MISS)
    if outcome.result is ShotResult.HIT or outcome.ship is None:
        return view.with_cell(coord, CellState.HIT)
    return view.with_cells(outcome.ship.positions, CellState.SUNK)
