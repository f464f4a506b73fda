"""Match phase derived from match state."""

from enum import Enum, auto

from flotilla.game.core.models import Side
from flotilla.game.core.rules import MatchState


class MatchPhase(Enum):
    """Top-level match phases."""

    INITIALIZING = auto()
    PLAYER_TURN = auto()
    OPPONENT_TURN = auto()
    GAME_OVER = auto()


def phase_of(state: MatchState | None) -> MatchPhase:
    if state is None:
        return MatchPhase.INITIALIZING
    if state.game_over:
        return MatchPhase.GAME_OVER
    if state.turn is Side.PLAYER:
        return MatchPhase.PLAYER_TURN
    return MatchPhase.OPPONENT_TURN
