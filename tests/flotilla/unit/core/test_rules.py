from flotilla.game.core.models import CellState, Coord, ShotResult, Side
from flotilla.game.core.rules import apply_move, create_match, game_over_summary, snapshot


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        self.now += 1.5
        return self.now


def test_single_ship_match_end_to_end(battleship_only) -> None:
    clock = FakeClock()
    state = create_match("m1", battleship_only, battleship_only, require_composition=False, clock=clock)
    results = []
    for x in range(4):
        resolution = apply_move(state, Side.PLAYER, Coord(x, 0), clock=clock)
        assert resolution.event is not None
        results.append(resolution.event)
        state = resolution.state

    assert [event.result for event in results[:3]] == [ShotResult.HIT] * 3
    assert not any(event.result.is_sunk for event in results[:3])
    assert results[3].result is ShotResult.WIN and results[3].result.is_sunk
    assert results[3].game_over
    assert results[3].winner_id == "player"
    assert results[3].ship_id == "ship_0" and results[3].ship_length == 4

    summary = game_over_summary(state)
    assert summary is not None
    assert summary.winner_id == "player"
    assert summary.total_moves == 4
    assert summary.duration_seconds == 1.5


def test_miss_passes_turn_and_hit_keeps_it(valid_fleet) -> None:
    state = create_match("m2", valid_fleet, valid_fleet)
    hit = apply_move(state, Side.PLAYER, Coord(0, 0))
    assert hit.state.turn is Side.PLAYER
    miss = apply_move(hit.state, Side.PLAYER, Coord(9, 9))
    assert miss.event is not None and miss.event.result is ShotResult.MISS
    assert miss.state.turn is Side.OPPONENT
    assert miss.state.move_count == 2


def test_repeat_out_of_turn_and_out_of_bounds_moves_are_ignored(valid_fleet) -> None:
    state = create_match("m3", valid_fleet, valid_fleet)
    first = apply_move(state, Side.PLAYER, Coord(0, 0)).state

    repeat = apply_move(first, Side.PLAYER, Coord(0, 0))
    assert not repeat.accepted
    assert repeat.state is first

    assert apply_move(first, Side.OPPONENT, Coord(5, 5)).state is first
    assert apply_move(first, Side.PLAYER, Coord(10, 0)).state is first
    assert apply_move(first, Side.PLAYER, Coord(0, -1)).state is first


def test_sunk_ship_cells_all_marked(valid_fleet) -> None:
    state = create_match("m4", valid_fleet, valid_fleet)
    for x in range(5, 8):
        state = apply_move(state, Side.PLAYER, Coord(x, 0)).state
    sunk = {Coord(5, 0), Coord(6, 0), Coord(7, 0)}
    assert set(state.opponent_board.cells_in_state(CellState.SUNK)) == sunk
    assert set(state.player_view.cells_in_state(CellState.SUNK)) == sunk
    assert state.opponent_board.ship("ship_1").is_sunk


def test_no_moves_after_game_over(battleship_only) -> None:
    state = create_match("m5", battleship_only, battleship_only, require_composition=False)
    for x in range(4):
        state = apply_move(state, Side.PLAYER, Coord(x, 0)).state
    assert state.game_over
    assert apply_move(state, Side.PLAYER, Coord(5, 5)).state is state
    assert apply_move(state, Side.OPPONENT, Coord(5, 5)).state is state


def test_snapshot_hides_opponent_ships(valid_fleet) -> None:
    state = create_match("m6", valid_fleet, valid_fleet)
    state = apply_move(state, Side.PLAYER, Coord(0, 0)).state
    view = snapshot(state, Side.PLAYER)
    assert view.is_my_turn
    assert view.opponent_board.cells_in_state(CellState.SHIP) == []
    assert view.opponent_board.state_at(Coord(0, 0)) is CellState.HIT
    assert len(view.own_board.cells_in_state(CellState.SHIP)) == 20
    assert not snapshot(state, Side.OPPONENT).is_my_turn
    assert game_over_summary(state) is None
