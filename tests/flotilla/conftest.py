from __future__ import annotations

import random

import pytest

from flotilla.game.core.models import Orientation, ShipPlacement


def make_valid_fleet() -> list[ShipPlacement]:
    return [
        ShipPlacement(0, 0, 4, Orientation.HORIZONTAL),
        ShipPlacement(5, 0, 3, Orientation.HORIZONTAL),
        ShipPlacement(0, 2, 3, Orientation.HORIZONTAL),
        ShipPlacement(4, 2, 2, Orientation.HORIZONTAL),
        ShipPlacement(7, 2, 2, Orientation.HORIZONTAL),
        ShipPlacement(0, 4, 2, Orientation.HORIZONTAL),
        ShipPlacement(3, 4, 1, Orientation.HORIZONTAL),
        ShipPlacement(5, 4, 1, Orientation.HORIZONTAL),
        ShipPlacement(7, 4, 1, Orientation.HORIZONTAL),
        ShipPlacement(9, 4, 1, Orientation.HORIZONTAL),
    ]


@pytest.fixture
def valid_fleet() -> list[ShipPlacement]:
    return make_valid_fleet()


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def battleship_only() -> list[ShipPlacement]:
    return [ShipPlacement(0, 0, 4, Orientation.HORIZONTAL)]
