"""Core domain models used by game logic."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum

BOARD_SIZE = 10
MIN_SHIP_LENGTH = 1
MAX_SHIP_LENGTH = 4

# (length, count), largest first.
FLEET_COMPOSITION: tuple[tuple[int, int], ...] = (
    (4, 1),
    (3, 2),
    (2, 3),
    (1, 4),
)

FLEET_LENGTHS: tuple[int, ...] = tuple(
    length for length, count in FLEET_COMPOSITION for _ in range(count)
)


class Orientation(StrEnum):
    """Ship orientation."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    def toggled(self) -> Orientation:
        if self is Orientation.HORIZONTAL:
            return Orientation.VERTICAL
        return Orientation.HORIZONTAL


class CellState(IntEnum):
    """State of a single board cell, stored as int8 in the board grid."""

    EMPTY = 0
    SHIP = 1
    HIT = 2
    MISS = 3
    SUNK = 4

    @property
    def symbol(self) -> str:
        return CELL_SYMBOLS[self]

    @property
    def attackable(self) -> bool:
        """Whether the cell was never fired upon."""
        return self in (CellState.EMPTY, CellState.SHIP)


CELL_SYMBOLS: dict[CellState, str] = {
    CellState.EMPTY: ".",
    CellState.SHIP: "S",
    CellState.HIT: "X",
    CellState.MISS: "o",
    CellState.SUNK: "#",
}


class ShotResult(StrEnum):
    """Result of a single resolved shot."""

    MISS = "miss"
    HIT = "hit"
    SUNK = "sunk"
    WIN = "win"

    @property
    def is_hit(self) -> bool:
        return self is not ShotResult.MISS

    @property
    def is_sunk(self) -> bool:
        return self in (ShotResult.SUNK, ShotResult.WIN)


class Side(StrEnum):
    """Match participant."""

    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> Side:
        if self is Side.PLAYER:
            return Side.OPPONENT
        return Side.PLAYER


@dataclass(frozen=True, slots=True)
class Coord:
    """Board coordinate; x is the column, y the row."""

    x: int
    y: int

    def in_bounds(self, size: int = BOARD_SIZE) -> bool:
        return 0 <= self.x < size and 0 <= self.y < size

    def orthogonal_neighbors(self) -> tuple[Coord, ...]:
        return (
            Coord(self.x - 1, self.y),
            Coord(self.x + 1, self.y),
            Coord(self.x, self.y - 1),
            Coord(self.x, self.y + 1),
        )

    def moore_neighborhood(self) -> tuple[Coord, ...]:
        """Return the cell itself and its eight surrounding cells."""
        return tuple(
            Coord(self.x + dx, self.y + dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1)
        )


@dataclass(frozen=True, slots=True)
class Cell:
    """Read-only view of one board cell."""

    x: int
    y: int
    state: CellState


@dataclass(frozen=True, slots=True)
class ShipPlacement:
    """Placement of a single ship by its origin cell."""

    x: int
    y: int
    length: int
    orientation: Orientation

    @property
    def origin(self) -> Coord:
        return Coord(self.x, self.y)


def cells_for_placement(placement: ShipPlacement) -> list[Coord]:
    """Compute occupied cells for a ship placement."""
    result: list[Coord] = []
    for i in range(placement.length):
        if placement.orientation is Orientation.HORIZONTAL:
            result.append(Coord(placement.x + i, placement.y))
        else:
            result.append(Coord(placement.x, placement.y + i))
    return result
