"""JSON wire codec for the boundary contracts."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

import orjson

from flotilla.game.core.models import Coord, ShipPlacement
from flotilla.game.core.rules import GameOverSummary, MatchSnapshot, MoveResultEvent
from flotilla.game.protocol.schema import (
    ProtocolError,
    move_intent_to_payload,
    move_result_to_payload,
    payload_to_move_intent,
    payload_to_move_result,
    payload_to_placements,
    payload_to_summary,
    placements_to_payload,
    snapshot_to_payload,
    summary_to_payload,
)


def _loads(data: bytes | str) -> object:
    try:
        return orjson.loads(data)
    except orjson.JSONDecodeError as exc:
        raise ProtocolError(f"Invalid JSON payload: {exc}") from exc


T = TypeVar("T")


def _decode(data: bytes | str, convert: Callable[[object], T]) -> T:
    return convert(_loads(data))


def encode_placements(placements: Sequence[ShipPlacement]) -> bytes:
    return orjson.dumps(placements_to_payload(tuple(placements)))


def decode_placements(data: bytes | str) -> list[ShipPlacement]:
    return _decode(data, payload_to_placements)


def encode_move_intent(coord: Coord) -> bytes:
    return orjson.dumps(move_intent_to_payload(coord))


def decode_move_intent(data: bytes | str) -> Coord:
    return _decode(data, payload_to_move_intent)


def encode_move_result(event: MoveResultEvent) -> bytes:
    return orjson.dumps(move_result_to_payload(event))


def decode_move_result(data: bytes | str) -> MoveResultEvent:
    return _decode(data, payload_to_move_result)


def encode_snapshot(snapshot: MatchSnapshot) -> bytes:
    return orjson.dumps(snapshot_to_payload(snapshot))


def encode_summary(summary: GameOverSummary) -> bytes:
    return orjson.dumps(summary_to_payload(summary))


def decode_summary(data: bytes | str) -> GameOverSummary:
    return _decode(data, payload_to_summary)
