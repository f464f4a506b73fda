"""Env-file loading and match tuning settings."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from flotilla.game.ai.cheating_hunt import DEFAULT_CHEAT_PROBABILITY
from flotilla.game.ai.parity_hunt import DEFAULT_RANDOM_PROBABILITY
from flotilla.game.core.fleet import DEFAULT_FLEET_ATTEMPTS, DEFAULT_SHIP_ATTEMPTS

logger = logging.getLogger(__name__)


def parse_env_text(text: str) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines; comments, blank and malformed lines are skipped."""
    values: dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#"):
            continue
        value = value.strip()
        if value[:1] in ("'", '"') and len(value) > 1 and value.endswith(value[0]):
            value = value[1:-1]
        values[key] = value
    return values


def load_env_file(path: str = ".env", *, override_existing: bool = True) -> None:
    """Export an env file's values; existing variables are replaced unless told otherwise."""
    env_path = Path(path)
    if not env_path.is_file():
        return
    for key, value in parse_env_text(env_path.read_text(encoding="utf-8")).items():
        if override_existing or key not in os.environ:
            os.environ[key] = value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load ``.env`` then ``.env.local``; later files win."""
    for path in paths if paths is not None else (".env", ".env.local"):
        load_env_file(path, override_existing=override_existing)


@dataclass(frozen=True, slots=True)
class MatchSettings:
    """Tunable match policy; the probabilities are difficulty knobs."""

    hard_cheat_probability: float = DEFAULT_CHEAT_PROBABILITY
    medium_random_probability: float = DEFAULT_RANDOM_PROBABILITY
    placement_ship_attempts: int = DEFAULT_SHIP_ATTEMPTS
    placement_fleet_attempts: int = DEFAULT_FLEET_ATTEMPTS
    ai_move_delay_seconds: float = 0.0

    @classmethod
    def from_env(cls) -> MatchSettings:
        defaults = cls()
        return cls(
            hard_cheat_probability=_env_probability(
                "FLOTILLA_HARD_CHEAT_PROBABILITY", defaults.hard_cheat_probability
            ),
            medium_random_probability=_env_probability(
                "FLOTILLA_MEDIUM_RANDOM_PROBABILITY", defaults.medium_random_probability
            ),
            placement_ship_attempts=_env_number(
                "FLOTILLA_PLACEMENT_SHIP_ATTEMPTS", defaults.placement_ship_attempts, int, minimum=1
            ),
            placement_fleet_attempts=_env_number(
                "FLOTILLA_PLACEMENT_FLEET_ATTEMPTS", defaults.placement_fleet_attempts, int, minimum=1
            ),
            ai_move_delay_seconds=_env_number(
                "FLOTILLA_AI_MOVE_DELAY_SECONDS", defaults.ai_move_delay_seconds, float, minimum=0.0
            ),
        )


def _env_probability(name: str, default: float) -> float:
    value = _env_number(name, default, float, minimum=0.0)
    return min(1.0, value)


_N = TypeVar("_N", int, float)


def _env_number(
    name: str, default: _N, parse: Callable[[str], _N], *, minimum: _N
) -> _N:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = parse(raw)
    except ValueError:
        logger.warning("config_invalid name=%s value=%r default=%s", name, raw, default)
        return default
    return max(minimum, value)
