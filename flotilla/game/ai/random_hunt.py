"""Easy AI: uniformly random hunting."""

from __future__ import annotations

from flotilla.game.ai.strategy import AIStrategy
from flotilla.game.core.board import Board
from flotilla.game.core.models import Coord


class RandomHuntAI(AIStrategy):
    """Fires at a random untouched cell until something is hit."""

    name = "easy"

    def _hunt(self, board: Board) -> Coord | None:
        return self._random_cell(board)
