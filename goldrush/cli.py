"""
Command-line interface for the gold-retrieval agent.

Usage:
    python -m goldrush.cli play -p 31415              Play against a local game engine
    python -m goldrush.cli play -p 31415 --host HOST  Play against a remote one
    python -m goldrush.cli -l DEBUG play -p 31415     Verbose planning logs
"""

import argparse
import logging
import sys

from goldrush.agent import GoldAgent
from goldrush.api.environment import GameConnection
from goldrush.config import load_config, setup_logging

logger = logging.getLogger(__name__)


def cmd_play(args: argparse.Namespace) -> int:
    """Connect to the game engine and play one game."""
    config = args.config_obj
    host = args.host or config.client.host
    port = args.port if args.port is not None else config.client.port

    agent = GoldAgent(config.agent, log_map=config.logging.log_map)

    try:
        with GameConnection(host, port, timeout=config.client.timeout) as connection:
            moves = agent.play(connection)
    except ConnectionError as e:
        logger.error(f"Game aborted: {e}")
        print(f"Error: {e}")
        return 1

    print(f"Game finished after {moves} moves")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Gold Rush - an agent that fetches the gold and brings it home",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level override",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # play command
    play_parser = subparsers.add_parser("play", help="Play a game against the game engine")
    play_parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Game engine port (defaults to the configured port)",
    )
    play_parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Game engine host (defaults to the configured host)",
    )
    play_parser.set_defaults(func=cmd_play)

    args = parser.parse_args(argv)

    # Load config and set up logging
    config = load_config(args.config)
    if args.log_level:
        config.logging.level = args.log_level
    setup_logging(config.logging)

    if args.command is None:
        parser.print_help()
        return 1

    args.config_obj = config
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
