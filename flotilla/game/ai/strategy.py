"""AI strategy contract and the shared hunt/target/line state machine."""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from collections import deque
from enum import StrEnum

from flotilla.game.core.board import Board
from flotilla.game.core.models import Coord

logger = logging.getLogger(__name__)

FALLBACK_SHOT = Coord(0, 0)


class LineDirection(StrEnum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class AIStrategy(ABC):
    """Opponent AI that picks cells to fire at and learns from the results.

    With no pending hits the strategy hunts using ``_hunt``. After a first hit
    its orthogonal neighbours are queued and tried in order. Once two hits line
    up the queue is dropped and the cells just past both ends of the line are
    tried instead. A sunk notification returns the strategy to hunting.
    """

    name = "base"
    # Whether the strategy is handed the defender's true board instead of the redacted view.
    sees_ships = False

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng
        self._hits: list[Coord] = []
        self._target_queue: deque[Coord] = deque()

    @property
    def hits(self) -> tuple[Coord, ...]:
        return tuple(self._hits)

    @property
    def target_queue(self) -> tuple[Coord, ...]:
        return tuple(self._target_queue)

    def choose_shot(self, board: Board) -> Coord:
        """Return the next coordinate to fire at on ``board``."""
        target = self._finish_target(board)
        if target is not None:
            return target
        shot = self._hunt(board)
        if shot is None:
            logger.error("ai_no_attackable_cells strategy=%s", self.name)
            return FALLBACK_SHOT
        logger.debug("ai_hunt strategy=%s x=%d y=%d", self.name, shot.x, shot.y)
        return shot

    def notify_result(self, coord: Coord, hit: bool, sunk: bool) -> None:
        """Update targeting state with the outcome of the last shot."""
        if not hit:
            return
        if sunk:
            logger.debug("ai_target_sunk strategy=%s x=%d y=%d", self.name, coord.x, coord.y)
            self._hits.clear()
            self._target_queue.clear()
            return
        self._hits.append(coord)
        if len(self._hits) == 1:
            self._target_queue.extend(
                cell for cell in coord.orthogonal_neighbors() if cell.in_bounds()
            )
        else:
            self._target_queue.clear()

    def reset(self) -> None:
        self._hits.clear()
        self._target_queue.clear()

    @abstractmethod
    def _hunt(self, board: Board) -> Coord | None:
        """Pick a cell while no ship is being chased."""

    def _random_cell(self, board: Board) -> Coord | None:
        cells = board.attackable_cells()
        if not cells:
            return None
        return self._rng.choice(cells)

    def _finish_target(self, board: Board) -> Coord | None:
        if not self._hits:
            return None

        direction = self._line_direction()
        if direction is not None:
            target = self._line_target(board, direction)
            if target is not None:
                logger.debug("ai_line strategy=%s direction=%s target=%s", self.name, direction, target)
                return target

        while self._target_queue:
            queued = self._target_queue.popleft()
            if board.is_attackable(queued):
                logger.debug("ai_target strategy=%s target=%s", self.name, queued)
                return queued

        first = self._hits[0]
        for neighbor in first.orthogonal_neighbors():
            if board.is_attackable(neighbor):
                return neighbor
        return None

    def _line_direction(self) -> LineDirection | None:
        if len(self._hits) < 2:
            return None
        first, last = self._hits[0], self._hits[-1]
        if first.x == last.x:
            return LineDirection.VERTICAL
        if first.y == last.y:
            return LineDirection.HORIZONTAL
        return None

    def _line_target(self, board: Board, direction: LineDirection) -> Coord | None:
        if direction is LineDirection.HORIZONTAL:
            ordered = sorted(self._hits, key=lambda cell: cell.x)
            candidates = (
                Coord(ordered[0].x - 1, ordered[0].y),
                Coord(ordered[-1].x + 1, ordered[-1].y),
            )
        else:
            ordered = sorted(self._hits, key=lambda cell: cell.y)
            candidates = (
                Coord(ordered[0].x, ordered[0].y - 1),
                Coord(ordered[-1].x, ordered[-1].y + 1),
            )
        for candidate in candidates:
            if board.is_attackable(candidate):
                return candidate
        return None
