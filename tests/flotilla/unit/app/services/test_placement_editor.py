import random

from flotilla.game.app.services.battle import BattleService
from flotilla.game.app.services.placement_editor import (
    GENERATION_FAILED,
    QUOTA_EXHAUSTED,
    UNKNOWN_LENGTH,
    PlacementSession,
)
from flotilla.game.core.fleet import validate_fleet
from flotilla.game.core.models import Orientation, ShipPlacement


def _session_from(placements) -> PlacementSession:
    session = PlacementSession()
    for p in placements:
        session = session.place(p.x, p.y, p.length, p.orientation)
        assert session.error is None, session.error
    return session


def test_place_tracks_quota_and_completion(valid_fleet) -> None:
    session = PlacementSession()
    assert session.remaining() == {4: 1, 3: 2, 2: 3, 1: 4}
    session = session.place(0, 0, 4, Orientation.HORIZONTAL)
    assert session.remaining()[4] == 0
    assert session.ships[0].ship_id == "ship_4_0"

    again = session.place(0, 9, 4, Orientation.HORIZONTAL)
    assert again.error == QUOTA_EXHAUSTED
    assert again.ships == session.ships

    full = _session_from(valid_fleet)
    assert full.is_complete
    assert full.finish() == tuple(valid_fleet)


def test_place_rejects_rule_violations_and_unknown_lengths() -> None:
    session = PlacementSession().place(0, 0, 2, Orientation.HORIZONTAL)
    touching = session.place(0, 1, 2, Orientation.HORIZONTAL)
    assert touching.error == "Ships cannot touch each other."
    assert len(touching.ships) == 1
    assert session.place(0, 0, 5, Orientation.HORIZONTAL).error == UNKNOWN_LENGTH
    assert touching.place(0, 2, 2, Orientation.HORIZONTAL).error is None


def test_rotate_revalidates_against_other_ships() -> None:
    session = PlacementSession().place(0, 0, 3, Orientation.HORIZONTAL)
    ship_id = session.ships[0].ship_id
    rotated = session.rotate(ship_id)
    assert rotated.ships[0].placement == ShipPlacement(0, 0, 3, Orientation.VERTICAL)

    blocked = session.place(1, 3, 1, Orientation.HORIZONTAL).rotate(ship_id)
    assert blocked.error == "Ships cannot touch each other."
    assert blocked.ships[0].placement.orientation is Orientation.HORIZONTAL

    edge = PlacementSession().place(0, 8, 3, Orientation.HORIZONTAL)
    assert edge.rotate(edge.ships[0].ship_id).error == "Ship does not fit on the board."
    assert session.rotate("missing") is session


def test_remove_frees_quota_without_reusing_live_ids() -> None:
    session = (
        PlacementSession()
        .place(0, 0, 1, Orientation.HORIZONTAL)
        .place(2, 0, 1, Orientation.HORIZONTAL)
    )
    assert [ship.ship_id for ship in session.ships] == ["ship_1_0", "ship_1_1"]
    session = session.remove("ship_1_0")
    assert session.remaining()[1] == 3
    session = session.place(4, 0, 1, Orientation.HORIZONTAL)
    assert sorted(ship.ship_id for ship in session.ships) == ["ship_1_0", "ship_1_1"]
    assert session.remove("nope") is session


def test_randomized_clear_and_incomplete_finish(seeded_rng) -> None:
    session = PlacementSession().randomized(seeded_rng)
    assert session.is_complete
    assert validate_fleet(session.placements).valid
    assert len({ship.ship_id for ship in session.ships}) == 10

    failed = PlacementSession().place(0, 0, 1, Orientation.HORIZONTAL).randomized(
        random.Random(1), ship_attempts=0, fleet_attempts=1
    )
    assert failed.error == GENERATION_FAILED
    assert len(failed.ships) == 1
    assert failed.without_error().error is None

    assert session.cleared() == PlacementSession()
    assert PlacementSession().finish() is None


def test_finished_session_starts_a_battle(seeded_rng) -> None:
    fleet = PlacementSession().randomized(seeded_rng).finish()
    assert fleet is not None
    result = BattleService(random.Random(8)).start_match(fleet, "easy")
    assert result.success
