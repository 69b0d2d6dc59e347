import argparse
import asyncio
import logging

from engine.game import GameEngine
from engine.models import Difficulty, TableConfig

from .console import play
from .server import run_server

logging.basicConfig(level=logging.INFO)


def main() -> None:
    parser = argparse.ArgumentParser(description="Heads-up hold'em tutorial host")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8765)
    parser.add_argument("--starting-stack", type=int, default=2_000)
    parser.add_argument("--sb", type=int, default=50)
    parser.add_argument("--bb", type=int, default=100)
    parser.add_argument(
        "--difficulty",
        choices=[level.value for level in Difficulty],
        default=Difficulty.EASY.value,
    )
    parser.add_argument(
        "--guided",
        action="store_true",
        help="Pause before every bot move until the client sends 'advance'",
    )
    parser.add_argument(
        "--bot-delay-ms",
        type=int,
        default=1_500,
        help="Delay before automatic bot moves in milliseconds (0 acts immediately)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for deck shuffles (every server table uses it)")
    parser.add_argument("--console", action="store_true", help="Play in this terminal instead of serving")
    args = parser.parse_args()

    config = TableConfig(
        starting_stack=args.starting_stack,
        sb=args.sb,
        bb=args.bb,
        difficulty=Difficulty(args.difficulty),
        guided_mode=args.guided,
        bot_delay_ms=args.bot_delay_ms,
    )

    if args.console:
        logging.getLogger().setLevel(logging.WARNING)
        play(GameEngine(config, seed=args.seed))
        return
    asyncio.run(run_server(args.host, args.port, config, seed=args.seed))


if __name__ == "__main__":
    main()
