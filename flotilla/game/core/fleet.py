"""Fleet validation, board construction and random placement."""

from __future__ import annotations

import logging
import random
from collections import Counter
from collections.abc import Sequence

from flotilla.game.core.board import Board, Ship
from flotilla.game.core.models import (
    BOARD_SIZE,
    FLEET_COMPOSITION,
    FLEET_LENGTHS,
    Orientation,
    ShipPlacement,
    cells_for_placement,
)
from flotilla.game.core.placement import PlacementError, PlacementResult, validate_ship

logger = logging.getLogger(__name__)

DEFAULT_SHIP_ATTEMPTS = 100
DEFAULT_FLEET_ATTEMPTS = 10


def validate_fleet(
    placements: Sequence[ShipPlacement], *, require_composition: bool = True
) -> PlacementResult:
    """Validate a full fleet submission, ship by ship, then its composition."""
    accepted: list[ShipPlacement] = []
    for index, placement in enumerate(placements):
        result = validate_ship(placement, accepted)
        if not result.valid:
            return PlacementResult.rejected(
                result.error or PlacementError.OUT_OF_BOUNDS,
                f"Ship #{index + 1} at ({placement.x}, {placement.y}): {result.reason}",
            )
        accepted.append(placement)

    if not require_composition:
        return PlacementResult.ok()
    expected = dict(FLEET_COMPOSITION)
    actual = Counter(placement.length for placement in placements)
    if actual != Counter(expected):
        wanted = ", ".join(f"{count}x{length}" for length, count in FLEET_COMPOSITION)
        return PlacementResult.rejected(
            PlacementError.FLEET_COMPOSITION, f"Fleet must contain exactly {wanted}."
        )
    return PlacementResult.ok()


def build_board(
    placements: Sequence[ShipPlacement], *, require_composition: bool = True
) -> Board:
    """Create a true board from a validated fleet."""
    result = validate_fleet(placements, require_composition=require_composition)
    if not result.valid:
        raise ValueError(result.reason)
    return board_from_placements(placements)


def board_from_placements(placements: Sequence[ShipPlacement]) -> Board:
    """Create a board from placements without applying placement rules."""
    board = Board.empty()
    for index, placement in enumerate(placements):
        board = board.with_ship(
            Ship(
                ship_id=f"ship_{index}",
                length=placement.length,
                positions=tuple(cells_for_placement(placement)),
            )
        )
    return board


def random_fleet(
    rng: random.Random,
    *,
    ship_attempts: int = DEFAULT_SHIP_ATTEMPTS,
    fleet_attempts: int = DEFAULT_FLEET_ATTEMPTS,
) -> tuple[ShipPlacement, ...] | None:
    """Generate a random valid fleet, or ``None`` once every attempt failed.

    Ships are placed largest first. When one ship cannot be placed within
    ``ship_attempts`` random tries the whole fleet is discarded and generation
    starts over, at most ``fleet_attempts`` times.
    """
    for attempt in range(1, fleet_attempts + 1):
        fleet = _try_generate_fleet(rng, ship_attempts)
        if fleet is not None:
            logger.debug("random_fleet generated attempt=%d ships=%d", attempt, len(fleet))
            return fleet
    logger.warning("random_fleet exhausted fleet_attempts=%d ship_attempts=%d", fleet_attempts, ship_attempts)
    return None


def _try_generate_fleet(rng: random.Random, ship_attempts: int) -> tuple[ShipPlacement, ...] | None:
    placed: list[ShipPlacement] = []
    for length in FLEET_LENGTHS:
        placement = _place_randomly(rng, length, placed, ship_attempts)
        if placement is None:
            return None
        placed.append(placement)
    return tuple(placed)


def _place_randomly(
    rng: random.Random,
    length: int,
    existing: Sequence[ShipPlacement],
    attempts: int,
) -> ShipPlacement | None:
    for _ in range(attempts):
        candidate = ShipPlacement(
            x=rng.randrange(BOARD_SIZE),
            y=rng.randrange(BOARD_SIZE),
            length=length,
            orientation=rng.choice((Orientation.HORIZONTAL, Orientation.VERTICAL)),
        )
        if validate_ship(candidate, existing).valid:
            return candidate
    return None
