"""Match notifications for side-effect consumers (sound, haptics, stats)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from flotilla.game.core.models import ShotResult, Side
from flotilla.game.core.rules import GameOverSummary, MatchSnapshot, MoveResolution


class MatchEventKind(StrEnum):
    SHOT_RESOLVED = "shot_resolved"
    SHIP_SUNK = "ship_sunk"
    GAME_OVER = "game_over"


@dataclass(frozen=True, slots=True)
class MatchEvent:
    """Informational notification; carries no state the match depends on.

    ``snapshot`` is the player-side projection of the match right after the
    move, so listeners never need to query the service.
    """

    kind: MatchEventKind
    match_id: str
    attacker: Side
    x: int
    y: int
    result: ShotResult
    ship_id: str | None = None
    ship_length: int | None = None
    summary: GameOverSummary | None = None
    snapshot: MatchSnapshot | None = None


MatchListener = Callable[[MatchEvent], None]


class MatchEventHub:
    """In-process pub/sub for match notifications.

    Events are published after the service has committed the new state.
    """

    def __init__(self) -> None:
        self._next_id = 1
        self._listeners: dict[int, MatchListener] = {}

    def subscribe(self, listener: MatchListener) -> int:
        """Register a listener and return its subscription id."""
        sub_id = self._next_id
        self._next_id += 1
        self._listeners[sub_id] = listener
        return sub_id

    def unsubscribe(self, sub_id: int) -> None:
        self._listeners.pop(sub_id, None)

    def publish(self, event: MatchEvent) -> int:
        """Publish one event and return number of invoked listeners."""
        invoked = 0
        for listener in tuple(self._listeners.values()):
            listener(event)
            invoked += 1
        return invoked


def events_for(
    resolution: MoveResolution,
    summary: GameOverSummary | None = None,
    snapshot: MatchSnapshot | None = None,
) -> list[MatchEvent]:
    """Translate an accepted move into the notifications it triggers."""
    event = resolution.event
    if event is None or resolution.attacker is None:
        return []
    common = {
        "match_id": resolution.state.match_id,
        "attacker": resolution.attacker,
        "x": event.x,
        "y": event.y,
        "result": event.result,
        "ship_id": event.ship_id,
        "ship_length": event.ship_length,
        "snapshot": snapshot,
    }
    events = [MatchEvent(kind=MatchEventKind.SHOT_RESOLVED, **common)]
    if event.result.is_sunk:
        events.append(MatchEvent(kind=MatchEventKind.SHIP_SUNK, **common))
    if event.game_over:
        events.append(MatchEvent(kind=MatchEventKind.GAME_OVER, summary=summary, **common))
    return events
