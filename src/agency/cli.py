"""Command-line entry point: run a script or ask a single question."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from . import __version__
from .config import load_config
from .llm import create_from_config
from .script import ScriptInterpreter


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agency", description="Drive an OpenAI-compatible chat endpoint."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML config file (default: $AGENCY_CONFIG or config/default.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.environ.get("LOG_LEVEL", "WARNING"),
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Execute a script file line by line.")
    run.add_argument("script", type=str, help="Path to the script file")

    ask = sub.add_parser("ask", help="Send one prompt and print the answer.")
    ask.add_argument("prompt", type=str, help="The user message")
    ask.add_argument("--system", type=str, default=None, help="Optional system prompt")
    ask.add_argument(
        "--no-stream",
        action="store_true",
        help="Wait for the full answer instead of streaming it",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config(args.config)

    with create_from_config(cfg) as llm:
        if args.command == "run":
            interp = ScriptInterpreter()
            if interp.load(args.script) is None:
                return 1
            interp.run(llm)
            return 0

        if args.system:
            llm.set_system_prompt(args.system)
        if args.no_stream:
            llm.complete(args.prompt, show=True)
        else:
            llm.complete(args.prompt, stream=True)
            sys.stdout.write("\n")
        return 0


if __name__ == "__main__":
    sys.exit(main())
