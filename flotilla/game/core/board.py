"""Immutable board and ship value types."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

import numpy as np

from flotilla.game.core.models import BOARD_SIZE, Cell, CellState, Coord


def _empty_grid(size: int = BOARD_SIZE) -> np.ndarray:
    return _freeze(np.full((size, size), CellState.EMPTY, dtype=np.int8))


def _freeze(grid: np.ndarray) -> np.ndarray:
    grid.setflags(write=False)
    return grid


@dataclass(frozen=True, slots=True)
class Ship:
    """A placed ship and the subset of its cells that were hit."""

    ship_id: str
    length: int
    positions: tuple[Coord, ...]
    hits: frozenset[Coord] = frozenset()

    def __post_init__(self) -> None:
        if len(self.positions) != self.length:
            raise ValueError(f"{self.ship_id}: {len(self.positions)} positions for length {self.length}.")
        if not self.hits <= set(self.positions):
            raise ValueError(f"{self.ship_id}: hits outside ship positions.")

    @property
    def is_sunk(self) -> bool:
        return len(self.hits) == len(self.positions)

    def contains(self, coord: Coord) -> bool:
        return coord in self.positions

    def is_hit(self, coord: Coord) -> bool:
        return coord in self.hits

    def with_hit(self, coord: Coord) -> Ship:
        """Return a copy of this ship with ``coord`` added to its hits."""
        if coord not in self.positions:
            raise ValueError(f"{coord} is not part of {self.ship_id}.")
        return replace(self, hits=self.hits | {coord})


@dataclass(frozen=True, slots=True, eq=False)
class Board:
    """Numpy-backed 10x10 board; every update returns a new board.

    The grid is indexed ``[y, x]`` and is read-only, so boards can be shared
    freely between snapshots.
    """

    grid: np.ndarray = field(default_factory=_empty_grid)
    ships: tuple[Ship, ...] = ()

    @classmethod
    def empty(cls, size: int = BOARD_SIZE) -> Board:
        return cls(grid=_empty_grid(size))

    @property
    def size(self) -> int:
        return int(self.grid.shape[0])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return np.array_equal(self.grid, other.grid) and self.ships == other.ships

    __hash__ = None  # type: ignore[assignment]

    def in_bounds(self, coord: Coord) -> bool:
        """Return whether the coordinate is in board bounds."""
        return coord.in_bounds(self.size)

    def state_at(self, coord: Coord) -> CellState:
        """Return the state at ``coord``; raises IndexError when off the board."""
        if not self.in_bounds(coord):
            raise IndexError(f"{coord} is outside the {self.size}x{self.size} board.")
        return CellState(int(self.grid[coord.y, coord.x]))

    def cell(self, x: int, y: int) -> Cell | None:
        """Return the cell at ``(x, y)`` or ``None`` when out of bounds."""
        coord = Coord(x, y)
        if not self.in_bounds(coord):
            return None
        return Cell(x, y, self.state_at(coord))

    def is_attackable(self, coord: Coord) -> bool:
        return self.in_bounds(coord) and self.state_at(coord).attackable

    def cells_in_state(self, *states: CellState) -> list[Coord]:
        mask = np.isin(self.grid, [int(state) for state in states])
        return [Coord(int(x), int(y)) for y, x in np.argwhere(mask)]

    def attackable_cells(self) -> list[Coord]:
        return self.cells_in_state(CellState.EMPTY, CellState.SHIP)

    def with_cell(self, coord: Coord, state: CellState) -> Board:
        if not self.in_bounds(coord):
            return self
        return self.with_cells((coord,), state)

    def with_cells(self, coords: Iterable[Coord], state: CellState) -> Board:
        grid = self.grid.copy()
        for coord in coords:
            if self.in_bounds(coord):
                grid[coord.y, coord.x] = state
        return replace(self, grid=_freeze(grid))

    def with_ship(self, ship: Ship) -> Board:
        """Return a board with ``ship`` added and its cells marked."""
        if any(existing.ship_id == ship.ship_id for existing in self.ships):
            raise ValueError(f"Duplicate ship id: {ship.ship_id}.")
        grid = self.grid.copy()
        for coord in ship.positions:
            if not self.in_bounds(coord):
                raise ValueError(f"{ship.ship_id} is out of bounds at {coord}.")
            if grid[coord.y, coord.x] != CellState.EMPTY:
                raise ValueError(f"{ship.ship_id} overlaps at {coord}.")
            grid[coord.y, coord.x] = CellState.SHIP
        return Board(grid=_freeze(grid), ships=(*self.ships, ship))

    def ship(self, ship_id: str) -> Ship | None:
        for ship in self.ships:
            if ship.ship_id == ship_id:
                return ship
        return None

    def ship_at(self, coord: Coord) -> Ship | None:
        for ship in self.ships:
            if ship.contains(coord):
                return ship
        return None

    def with_ship_hit(self, ship_id: str, coord: Coord) -> Board:
        """Return a board whose ship ``ship_id`` has ``coord`` hit."""
        if self.ship(ship_id) is None:
            raise ValueError(f"Unknown ship id: {ship_id}.")
        ships = tuple(
            ship.with_hit(coord) if ship.ship_id == ship_id else ship for ship in self.ships
        )
        return replace(self, ships=ships)

    @property
    def all_ships_sunk(self) -> bool:
        return bool(self.ships) and all(ship.is_sunk for ship in self.ships)

    def redacted(self) -> Board:
        """Return the opponent's view of this board: no ships, no SHIP cells."""
        grid = np.where(self.grid == CellState.SHIP, CellState.EMPTY, self.grid).astype(np.int8)
        return Board(grid=_freeze(grid))

    def rows(self) -> tuple[str, ...]:
        """Render the grid as one symbol string per row."""
        return tuple(
            "".join(CellState(int(value)).symbol for value in row) for row in self.grid
        )
