"""Application entry point: headless AI-vs-AI matches."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from collections.abc import Sequence

from flotilla.game.app.services.battle import Difficulty, build_ai_strategy, play_ai_match
from flotilla.game.core.rules import game_over_summary
from flotilla.game.infra.config import MatchSettings, load_default_env_files
from flotilla.game.infra.logging import setup_logging
from flotilla.game.protocol.codec import encode_summary

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Flotilla matches between AI strategies.")
    choices = [difficulty.value for difficulty in Difficulty]
    parser.add_argument("--difficulty", default=Difficulty.MEDIUM.value, choices=choices)
    parser.add_argument("--opponent", default=Difficulty.HARD.value, choices=choices)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--games", type=int, default=1)
    parser.add_argument("--log-file", action="store_true", help="Also write a JSON-lines run log.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the requested matches and print one summary per line."""
    args = _build_parser().parse_args(argv)
    load_default_env_files()
    setup_logging(write_file=args.log_file)
    settings = MatchSettings.from_env()
    rng = random.Random(args.seed)

    failures = 0
    for index in range(max(0, args.games)):
        player = build_ai_strategy(args.difficulty, rng, settings)
        opponent = build_ai_strategy(args.opponent, rng, settings)
        state = play_ai_match(player, opponent, rng, settings, match_id=f"cli_{index}")
        summary = game_over_summary(state) if state is not None else None
        if summary is None:
            logger.error("match_unfinished index=%d", index)
            failures += 1
            continue
        sys.stdout.write(encode_summary(summary).decode("utf-8") + "\n")
    sys.stdout.flush()
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
