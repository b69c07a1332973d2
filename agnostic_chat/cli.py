"""Command line entry point: `agnostic-chat demo` and `agnostic-chat serve`."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="agnostic-chat",
        description="Run the same chat examples against several model backends.",
    )
    parser.add_argument("--env-file", default=None, help="Optional path to a .env file.")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, ...).")
    sub = parser.add_subparsers(dest="command")

    demo = sub.add_parser("demo", help="Run the three examples against every backend.")
    demo.add_argument(
        "--backend",
        action="append",
        default=None,
        help="Backend name to run (repeatable). Defaults to BACKENDS from the environment.",
    )
    demo.add_argument("--fake", action="store_true", help="Use an offline fake backend.")

    serve = sub.add_parser("serve", help="Serve the HTTP API with uvicorn.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "demo"
        args.backend = None
        args.fake = False
    return args


async def _demo(backends: Optional[List[str]], fake: bool) -> None:
    from agnostic_chat.providers.factory import build_registry
    from agnostic_chat.services.examples import run_examples
    from agnostic_chat.services.harness import DispatchHarness

    registry = build_registry(["fake"] if fake else backends)
    await run_examples(DispatchHarness(registry))


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    if args.env_file:
        # must run before config is imported
        load_dotenv(dotenv_path=args.env_file, override=True)

    from agnostic_chat.core import config
    from agnostic_chat.core.logging_utils import configure_logging

    configure_logging(args.log_level or config.LOG_LEVEL)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("agnostic_chat.main:app", host=args.host, port=args.port)
        return 0

    try:
        asyncio.run(_demo(args.backend, args.fake))
    except Exception as e:
        logger.exception("demo failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
