from flotilla.game.app.state_machine import MatchPhase, phase_of
from flotilla.game.core.models import Coord, Side
from flotilla.game.core.rules import apply_move, create_match


def test_phase_follows_match_state(battleship_only) -> None:
    assert phase_of(None) is MatchPhase.INITIALIZING
    state = create_match("sm", battleship_only, battleship_only, require_composition=False)
    assert phase_of(state) is MatchPhase.PLAYER_TURN
    state = apply_move(state, Side.PLAYER, Coord(9, 9)).state
    assert phase_of(state) is MatchPhase.OPPONENT_TURN
    for x in range(4):
        state = apply_move(state, Side.OPPONENT, Coord(x, 0)).state
    assert phase_of(state) is MatchPhase.GAME_OVER
