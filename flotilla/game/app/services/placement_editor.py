"""Fleet setup session: place, rotate and remove ships before a match."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace

from flotilla.game.core.fleet import DEFAULT_FLEET_ATTEMPTS, DEFAULT_SHIP_ATTEMPTS, random_fleet, validate_fleet
from flotilla.game.core.models import FLEET_COMPOSITION, Orientation, ShipPlacement
from flotilla.game.core.placement import validate_placement

logger = logging.getLogger(__name__)

QUOTA_EXHAUSTED = "All ships of this length are already placed."
UNKNOWN_LENGTH = "No ship of this length belongs to the fleet."
GENERATION_FAILED = "Failed to generate a placement. Try again."


@dataclass(frozen=True, slots=True)
class PlacedShip:
    ship_id: str
    placement: ShipPlacement


@dataclass(frozen=True, slots=True)
class PlacementSession:
    """Immutable fleet-setup state; every edit returns a new session.

    ``error`` holds the message of the last rejected edit and is cleared by
    the next successful one.
    """

    ships: tuple[PlacedShip, ...] = ()
    error: str | None = None

    @property
    def placements(self) -> tuple[ShipPlacement, ...]:
        return tuple(ship.placement for ship in self.ships)

    def remaining(self) -> dict[int, int]:
        """Ships still to place, by length."""
        counts = dict(FLEET_COMPOSITION)
        for ship in self.ships:
            counts[ship.placement.length] -= 1
        return counts

    @property
    def is_complete(self) -> bool:
        return all(count == 0 for count in self.remaining().values())

    def ship(self, ship_id: str) -> PlacedShip | None:
        for ship in self.ships:
            if ship.ship_id == ship_id:
                return ship
        return None

    def place(self, x: int, y: int, length: int, orientation: Orientation) -> PlacementSession:
        remaining = self.remaining()
        if length not in remaining:
            return self._reject(UNKNOWN_LENGTH)
        if remaining[length] <= 0:
            return self._reject(QUOTA_EXHAUSTED)
        result = validate_placement(x, y, length, orientation, self.placements)
        if not result.valid:
            return self._reject(result.reason)
        ship_id = self._next_id(length)
        logger.info("placement_ship_placed ship_id=%s x=%d y=%d orientation=%s", ship_id, x, y, orientation.value)
        placed = PlacedShip(ship_id, ShipPlacement(x, y, length, orientation))
        return PlacementSession(ships=(*self.ships, placed))

    def remove(self, ship_id: str) -> PlacementSession:
        if self.ship(ship_id) is None:
            return self
        logger.info("placement_ship_removed ship_id=%s", ship_id)
        return PlacementSession(ships=tuple(ship for ship in self.ships if ship.ship_id != ship_id))

    def rotate(self, ship_id: str) -> PlacementSession:
        """Toggle a ship's orientation around its origin if it still fits."""
        target = self.ship(ship_id)
        if target is None:
            return self
        current = target.placement
        others = [ship.placement for ship in self.ships if ship.ship_id != ship_id]
        orientation = current.orientation.toggled()
        result = validate_placement(current.x, current.y, current.length, orientation, others)
        if not result.valid:
            logger.debug("placement_rotate_rejected ship_id=%s reason=%s", ship_id, result.error)
            return self._reject(result.reason)
        rotated = PlacedShip(ship_id, replace(current, orientation=orientation))
        return PlacementSession(
            ships=tuple(rotated if ship.ship_id == ship_id else ship for ship in self.ships)
        )

    def randomized(
        self,
        rng: random.Random,
        *,
        ship_attempts: int = DEFAULT_SHIP_ATTEMPTS,
        fleet_attempts: int = DEFAULT_FLEET_ATTEMPTS,
    ) -> PlacementSession:
        """Replace every ship with a generated fleet; keeps the session on failure."""
        fleet = random_fleet(rng, ship_attempts=ship_attempts, fleet_attempts=fleet_attempts)
        if fleet is None:
            return self._reject(GENERATION_FAILED)
        session = PlacementSession()
        for placement in fleet:
            session = PlacementSession(
                ships=(*session.ships, PlacedShip(session._next_id(placement.length), placement))
            )
        return session

    def cleared(self) -> PlacementSession:
        return PlacementSession()

    def without_error(self) -> PlacementSession:
        return replace(self, error=None)

    def finish(self) -> tuple[ShipPlacement, ...] | None:
        """Return the fleet to submit, or ``None`` while it is incomplete."""
        if not self.is_complete:
            logger.warning("placement_incomplete remaining=%s", self.remaining())
            return None
        result = validate_fleet(self.placements)
        if not result.valid:
            logger.warning("placement_invalid reason=%s", result.reason)
            return None
        return self.placements

    def _reject(self, reason: str) -> PlacementSession:
        return replace(self, error=reason)

    def _next_id(self, length: int) -> str:
        taken = {ship.ship_id for ship in self.ships}
        index = 0
        while f"ship_{length}_{index}" in taken:
            index += 1
        return f"ship_{length}_{index}"
