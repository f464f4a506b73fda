import random

from flotilla.game.ai.random_hunt import RandomHuntAI
from flotilla.game.ai.strategy import FALLBACK_SHOT
from flotilla.game.core.board import Board
from flotilla.game.core.models import CellState, Coord


def _view_with_hits(*cells: Coord) -> Board:
    return Board.empty().with_cells(cells, CellState.HIT)


def test_first_hit_queues_in_bounds_neighbours() -> None:
    ai = RandomHuntAI(random.Random(1))
    ai.notify_result(Coord(0, 0), hit=True, sunk=False)
    assert ai.hits == (Coord(0, 0),)
    assert ai.target_queue == (Coord(1, 0), Coord(0, 1))
    assert ai.choose_shot(_view_with_hits(Coord(0, 0))) == Coord(1, 0)


def test_queue_skips_cells_already_fired_at() -> None:
    ai = RandomHuntAI(random.Random(1))
    ai.notify_result(Coord(4, 4), hit=True, sunk=False)
    view = _view_with_hits(Coord(4, 4)).with_cell(Coord(3, 4), CellState.MISS)
    assert ai.choose_shot(view) == Coord(5, 4)


def test_second_hit_switches_to_line_targeting() -> None:
    ai = RandomHuntAI(random.Random(1))
    ai.notify_result(Coord(4, 4), hit=True, sunk=False)
    ai.notify_result(Coord(5, 4), hit=True, sunk=False)
    assert ai.target_queue == ()
    view = _view_with_hits(Coord(4, 4), Coord(5, 4))
    assert ai.choose_shot(view) == Coord(3, 4)
    assert ai.choose_shot(view.with_cell(Coord(3, 4), CellState.MISS)) == Coord(6, 4)


def test_vertical_line_targeting() -> None:
    ai = RandomHuntAI(random.Random(1))
    ai.notify_result(Coord(2, 0), hit=True, sunk=False)
    ai.notify_result(Coord(2, 1), hit=True, sunk=False)
    assert ai.choose_shot(_view_with_hits(Coord(2, 0), Coord(2, 1))) == Coord(2, 2)


def test_sunk_and_reset_return_to_hunting() -> None:
    ai = RandomHuntAI(random.Random(1))
    ai.notify_result(Coord(4, 4), hit=True, sunk=False)
    ai.notify_result(Coord(5, 4), hit=True, sunk=True)
    assert ai.hits == () and ai.target_queue == ()
    ai.notify_result(Coord(1, 1), hit=True, sunk=False)
    ai.reset()
    assert ai.hits == () and ai.target_queue == ()


def test_miss_does_not_change_targeting_state() -> None:
    ai = RandomHuntAI(random.Random(1))
    ai.notify_result(Coord(4, 4), hit=False, sunk=False)
    assert ai.hits == () and ai.target_queue == ()


def test_resolved_board_falls_back_to_origin() -> None:
    ai = RandomHuntAI(random.Random(1))
    board = Board.empty()
    board = board.with_cells(board.attackable_cells(), CellState.MISS)
    assert ai.choose_shot(board) == FALLBACK_SHOT
