"""Payload schema for the boundary contracts and conversion helpers."""

from __future__ import annotations

from flotilla.game.core.board import Board
from flotilla.game.core.models import Coord, Orientation, ShipPlacement, ShotResult
from flotilla.game.core.rules import GameOverSummary, MatchSnapshot, MoveResultEvent


class ProtocolError(ValueError):
    """Raised when an external payload cannot be decoded."""


def placements_to_payload(placements: list[ShipPlacement] | tuple[ShipPlacement, ...]) -> list[dict[str, object]]:
    return [
        {"x": p.x, "y": p.y, "length": p.length, "orientation": p.orientation.value}
        for p in placements
    ]


def payload_to_placements(payload: object) -> list[ShipPlacement]:
    """Convert a placement submission into placements (rules are checked elsewhere)."""
    if not isinstance(payload, list):
        raise ProtocolError("Placement submission must be a list.")
    placements: list[ShipPlacement] = []
    for item in payload:
        item = _require_object(item, "Each ship placement must be an object.")
        try:
            orientation = Orientation(str(item["orientation"]).lower())
        except (KeyError, ValueError) as exc:
            raise ProtocolError("Malformed ship orientation in placement submission.") from exc
        placements.append(
            ShipPlacement(
                x=_require_int(item, "x"),
                y=_require_int(item, "y"),
                length=_require_int(item, "length"),
                orientation=orientation,
            )
        )
    return placements


def payload_to_move_intent(payload: object) -> Coord:
    item = _require_object(payload, "Move intent must be an object.")
    return Coord(_require_int(item, "x"), _require_int(item, "y"))


def move_intent_to_payload(coord: Coord) -> dict[str, object]:
    return {"x": coord.x, "y": coord.y}


def move_result_to_payload(event: MoveResultEvent) -> dict[str, object]:
    payload: dict[str, object] = {
        "x": event.x,
        "y": event.y,
        "result": event.result.value,
        "game_over": event.game_over,
    }
    if event.ship_id is not None:
        payload["ship_id"] = event.ship_id
    if event.ship_length is not None:
        payload["ship_length"] = event.ship_length
    if event.winner_id is not None:
        payload["winner_id"] = event.winner_id
    return payload


def payload_to_move_result(payload: object) -> MoveResultEvent:
    item = _require_object(payload, "Move result must be an object.")
    try:
        result = ShotResult(str(item["result"]))
    except (KeyError, ValueError) as exc:
        raise ProtocolError("Move result must be one of miss, hit, sunk, win.") from exc
    ship_id = item.get("ship_id")
    if ship_id is not None and not isinstance(ship_id, str):
        raise ProtocolError("ship_id must be a string.")
    game_over = item.get("game_over", result is ShotResult.WIN)
    if not isinstance(game_over, bool):
        raise ProtocolError("game_over must be a boolean.")
    winner_id = item.get("winner_id")
    if winner_id is not None and not isinstance(winner_id, str):
        raise ProtocolError("winner_id must be a string.")
    return MoveResultEvent(
        x=_require_int(item, "x"),
        y=_require_int(item, "y"),
        result=result,
        ship_id=ship_id,
        ship_length=_require_int(item, "ship_length") if item.get("ship_length") is not None else None,
        game_over=game_over,
        winner_id=winner_id,
    )


def board_to_payload(board: Board, *, include_ships: bool) -> dict[str, object]:
    payload: dict[str, object] = {"rows": list(board.rows())}
    if include_ships:
        payload["ships"] = [
            {
                "ship_id": ship.ship_id,
                "length": ship.length,
                "positions": [[cell.x, cell.y] for cell in ship.positions],
                "hits": sorted([cell.x, cell.y] for cell in ship.hits),
                "sunk": ship.is_sunk,
            }
            for ship in board.ships
        ]
    return payload


def snapshot_to_payload(snapshot: MatchSnapshot) -> dict[str, object]:
    return {
        "own_board": board_to_payload(snapshot.own_board, include_ships=True),
        "opponent_board": board_to_payload(snapshot.opponent_board, include_ships=False),
        "is_my_turn": snapshot.is_my_turn,
        "game_over": snapshot.game_over,
        "winner": snapshot.winner,
    }


def summary_to_payload(summary: GameOverSummary) -> dict[str, object]:
    return {
        "winner_id": summary.winner_id,
        "total_moves": summary.total_moves,
        "duration_seconds": round(summary.duration_seconds, 3),
    }


def payload_to_summary(payload: object) -> GameOverSummary:
    item = _require_object(payload, "Game-over summary must be an object.")
    winner_id = item.get("winner_id")
    if not isinstance(winner_id, str) or not winner_id:
        raise ProtocolError("winner_id is required.")
    duration = item.get("duration_seconds")
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        raise ProtocolError("duration_seconds must be a number.")
    return GameOverSummary(
        winner_id=winner_id,
        total_moves=_require_int(item, "total_moves"),
        duration_seconds=float(duration),
    )


def _require_object(value: object, message: str) -> dict[str, object]:
    if not isinstance(value, dict):
        raise ProtocolError(message)
    return value


def _require_int(item: dict[str, object], key: str) -> int:
    value = item.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolError(f"{key} must be an integer.")
    return value
