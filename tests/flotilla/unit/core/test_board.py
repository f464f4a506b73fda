import pytest

from flotilla.game.core.board import Board, Ship
from flotilla.game.core.models import CellState, Coord


def _destroyer(ship_id: str = "ship_0") -> Ship:
    return Ship(ship_id=ship_id, length=2, positions=(Coord(1, 1), Coord(2, 1)))


def test_empty_board_is_fully_attackable() -> None:
    board = Board.empty()
    assert board.size == 10
    assert len(board.attackable_cells()) == 100
    assert board.rows() == ("." * 10,) * 10
    assert not board.all_ships_sunk


def test_with_ship_returns_new_board_and_keeps_original() -> None:
    board = Board.empty()
    placed = board.with_ship(_destroyer())
    assert board.state_at(Coord(1, 1)) is CellState.EMPTY
    assert placed.state_at(Coord(1, 1)) is CellState.SHIP
    assert placed.rows()[1] == ".SS......."
    assert placed.ship_at(Coord(2, 1)) == _destroyer()
    assert not placed.grid.flags.writeable


def test_with_ship_rejects_overlap_duplicate_and_out_of_bounds() -> None:
    board = Board.empty().with_ship(_destroyer())
    with pytest.raises(ValueError):
        board.with_ship(_destroyer())
    with pytest.raises(ValueError):
        board.with_ship(Ship(ship_id="ship_1", length=1, positions=(Coord(2, 1),)))
    with pytest.raises(ValueError):
        board.with_ship(Ship(ship_id="ship_2", length=1, positions=(Coord(10, 0),)))


def test_ship_hits_and_sinking() -> None:
    ship = _destroyer()
    with pytest.raises(ValueError):
        ship.with_hit(Coord(5, 5))
    damaged = ship.with_hit(Coord(1, 1))
    assert damaged.is_hit(Coord(1, 1))
    assert not damaged.is_sunk
    assert damaged.with_hit(Coord(2, 1)).is_sunk


def test_with_ship_hit_rejects_unknown_ship() -> None:
    board = Board.empty().with_ship(_destroyer())
    with pytest.raises(ValueError):
        board.with_ship_hit("missing", Coord(1, 1))


def test_cell_lookup_and_redaction() -> None:
    board = Board.empty().with_ship(_destroyer()).with_cell(Coord(0, 0), CellState.MISS)
    assert board.cell(10, 0) is None
    assert board.cell(0, 0).state is CellState.MISS
    hidden = board.redacted()
    assert hidden.ships == ()
    assert hidden.cells_in_state(CellState.SHIP) == []
    assert hidden.state_at(Coord(0, 0)) is CellState.MISS


def test_board_equality_compares_grid_and_ships() -> None:
    assert Board.empty() == Board.empty()
    assert Board.empty() != Board.empty().with_ship(_destroyer())


def test_state_at_rejects_off_board_coordinates() -> None:
    board = Board.empty().with_ship(Ship(ship_id="edge", length=1, positions=(Coord(9, 0),)))
    assert board.state_at(Coord(9, 0)) is CellState.SHIP
    with pytest.raises(IndexError):
        board.state_at(Coord(-1, 0))
    with pytest.raises(IndexError):
        board.state_at(Coord(0, 10))


def test_repeated_hit_does_not_sink_ship() -> None:
    ship = _destroyer()
    repeated = ship.with_hit(Coord(1, 1)).with_hit(Coord(1, 1))
    assert len(repeated.hits) == 1
    assert repeated.is_sunk is False
