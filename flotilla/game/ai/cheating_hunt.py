"""Hard AI: hunts by peeking at the defender's true board."""

from __future__ import annotations

import logging
import random

from flotilla.game.ai.strategy import AIStrategy
from flotilla.game.core.board import Board
from flotilla.game.core.models import CellState, Coord

logger = logging.getLogger(__name__)

DEFAULT_CHEAT_PROBABILITY = 0.7


class CheatingHuntAI(AIStrategy):
    """With ``cheat_probability`` fires straight at a hidden ship cell.

    Only hunting cheats; finishing a hit ship uses the shared target logic.
    """

    name = "hard"
    sees_ships = True

    def __init__(
        self, rng: random.Random, cheat_probability: float = DEFAULT_CHEAT_PROBABILITY
    ) -> None:
        super().__init__(rng)
        self._cheat_probability = cheat_probability

    @property
    def cheat_probability(self) -> float:
        return self._cheat_probability

    def _hunt(self, board: Board) -> Coord | None:
        if self._rng.random() < self._cheat_probability:
            ship_cells = board.cells_in_state(CellState.SHIP)
            if ship_cells:
                shot = self._rng.choice(ship_cells)
                logger.debug("ai_cheat strategy=%s x=%d y=%d", self.name, shot.x, shot.y)
                return shot
        return self._random_cell(board)
