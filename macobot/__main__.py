"""Command line entry point: ``python -m macobot`` / ``macobot``."""

import argparse
import asyncio
import sys

from macobot.config import SUPPORTED_BACKENDS, BotConfig, __version__
from macobot.launcher import launch


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="macobot",
        description="Run commands from a chat channel and stream their output back",
    )
    parser.add_argument("--backend", choices=SUPPORTED_BACKENDS, help="Chat backend (default: mattermost)")
    parser.add_argument("--addr", help="Mattermost server address")
    parser.add_argument("--login", help="Bot login")
    parser.add_argument("--password", help="Bot password")
    parser.add_argument("--team", help="Bot team")
    parser.add_argument("--channel", help="Command channel")
    parser.add_argument("--command", help="Command file (default: ./macobot.sh)")
    parser.add_argument("--issue_link", help="Format #NNN with this link, e.g. 'https://tracker/issues/%%s '")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = BotConfig.from_env().apply_overrides(args)
    sys.exit(asyncio.run(launch(config)))


if __name__ == "__main__":
    main()
