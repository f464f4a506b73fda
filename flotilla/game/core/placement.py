"""Ship placement validation rules.

All checks are pure functions over placements; nothing here touches a board.
A placement is legal when it is fully on the board, shares no cell with an
already placed ship and does not touch one, diagonals included.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum

from flotilla.game.core.models import (
    BOARD_SIZE,
    MAX_SHIP_LENGTH,
    MIN_SHIP_LENGTH,
    Coord,
    Orientation,
    ShipPlacement,
    cells_for_placement,
)


class PlacementError(StrEnum):
    """Reason code for a rejected placement."""

    INVALID_LENGTH = "invalid_length"
    OUT_OF_BOUNDS = "out_of_bounds"
    OVERLAP = "overlap"
    ADJACENT = "adjacent"
    FLEET_COMPOSITION = "fleet_composition"


@dataclass(frozen=True, slots=True)
class PlacementResult:
    """Outcome of validating one placement or a whole fleet."""

    valid: bool
    error: PlacementError | None = None
    reason: str = ""

    @classmethod
    def ok(cls) -> PlacementResult:
        return cls(valid=True)

    @classmethod
    def rejected(cls, error: PlacementError, reason: str) -> PlacementResult:
        return cls(valid=False, error=error, reason=reason)


def is_within_bounds(
    x: int, y: int, length: int, orientation: Orientation, size: int = BOARD_SIZE
) -> bool:
    """Return whether every cell of the ship lies on the board."""
    if not (0 <= x < size and 0 <= y < size):
        return False
    if orientation is Orientation.HORIZONTAL:
        return x + length - 1 < size
    return y + length - 1 < size


def occupied_cells(x: int, y: int, length: int, orientation: Orientation) -> list[Coord]:
    """Return the ordered cells a ship would occupy."""
    return cells_for_placement(ShipPlacement(x, y, length, orientation))


def overlaps(candidate: Iterable[Coord], existing: Iterable[ShipPlacement]) -> bool:
    """Return whether any candidate cell is already occupied."""
    taken = _occupied(existing)
    return any(cell in taken for cell in candidate)


def touches(candidate: Iterable[Coord], existing: Iterable[ShipPlacement]) -> bool:
    """Return whether any candidate cell is on or next to an existing ship."""
    taken = _occupied(existing)
    for cell in candidate:
        if any(neighbor in taken for neighbor in cell.moore_neighborhood()):
            return True
    return False


def validate_length(length: int) -> PlacementResult:
    if not MIN_SHIP_LENGTH <= length <= MAX_SHIP_LENGTH:
        return PlacementResult.rejected(
            PlacementError.INVALID_LENGTH,
            f"Ship length must be between {MIN_SHIP_LENGTH} and {MAX_SHIP_LENGTH}.",
        )
    return PlacementResult.ok()


def validate_placement(
    x: int,
    y: int,
    length: int,
    orientation: Orientation,
    existing: Sequence[ShipPlacement],
) -> PlacementResult:
    """Check bounds, overlap and adjacency, in that order."""
    length_check = validate_length(length)
    if not length_check.valid:
        return length_check
    if not is_within_bounds(x, y, length, orientation):
        return PlacementResult.rejected(
            PlacementError.OUT_OF_BOUNDS, "Ship does not fit on the board."
        )
    cells = occupied_cells(x, y, length, orientation)
    if overlaps(cells, existing):
        return PlacementResult.rejected(PlacementError.OVERLAP, "Ships cannot overlap.")
    if touches(cells, existing):
        return PlacementResult.rejected(PlacementError.ADJACENT, "Ships cannot touch each other.")
    return PlacementResult.ok()


def validate_ship(placement: ShipPlacement, existing: Sequence[ShipPlacement]) -> PlacementResult:
    return validate_placement(
        placement.x, placement.y, placement.length, placement.orientation, existing
    )


def _occupied(existing: Iterable[ShipPlacement]) -> set[Coord]:
    taken: set[Coord] = set()
    for placement in existing:
        taken.update(cells_for_placement(placement))
    return taken
