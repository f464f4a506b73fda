"""Application service-layer helpers."""

from flotilla.game.app.services.battle import (
    BattleService,
    Difficulty,
    PlayerTurnResult,
    StartMatchResult,
    build_ai_strategy,
    play_ai_match,
)
from flotilla.game.app.services.online import OnlineMatch, OnlineMatchState
from flotilla.game.app.services.placement_editor import PlacedShip, PlacementSession

__all__ = [
    "BattleService",
    "Difficulty",
    "OnlineMatch",
    "OnlineMatchState",
    "PlacedShip",
    "PlacementSession",
    "PlayerTurnResult",
    "StartMatchResult",
    "build_ai_strategy",
    "play_ai_match",
]
