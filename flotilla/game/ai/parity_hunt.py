"""Medium AI: checkerboard hunting with occasional random shots."""

from __future__ import annotations

import logging
import random

from flotilla.game.ai.strategy import AIStrategy
from flotilla.game.core.board import Board
from flotilla.game.core.models import Coord

logger = logging.getLogger(__name__)

DEFAULT_RANDOM_PROBABILITY = 0.1


def is_parity_cell(coord: Coord) -> bool:
    """Cells with even ``x + y``; every ship of length 2+ covers at least one."""
    return (coord.x + coord.y) % 2 == 0


class ParityHuntAI(AIStrategy):
    """Hunts only on parity cells, except for a small share of random shots."""

    name = "medium"

    def __init__(
        self, rng: random.Random, random_probability: float = DEFAULT_RANDOM_PROBABILITY
    ) -> None:
        super().__init__(rng)
        self._random_probability = random_probability

    @property
    def random_probability(self) -> float:
        return self._random_probability

    def _hunt(self, board: Board) -> Coord | None:
        if self._rng.random() < self._random_probability:
            return self._random_cell(board)
        candidates = [cell for cell in board.attackable_cells() if is_parity_cell(cell)]
        if not candidates:
            logger.debug("ai_parity_exhausted strategy=%s", self.name)
            return self._random_cell(board)
        return self._rng.choice(candidates)
