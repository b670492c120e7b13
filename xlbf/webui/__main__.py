from __future__ import annotations

import argparse
import logging
from typing import Optional

import uvicorn

from xlbf.cli import configure_logging

from .app import DEFAULT_MAX_STEPS, create_app

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Serve XL Brainfuck sessions over HTTP")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="TCP port (default: 8000)")
    parser.add_argument(
        "--max-steps",
        type=int,
        default=DEFAULT_MAX_STEPS,
        help=f"Instruction budget for interpret requests that do not set one (default: {DEFAULT_MAX_STEPS})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine activity to stderr")
    args = parser.parse_args(argv)
    configure_logging(args.verbose, default_level=logging.WARNING)

    if args.max_steps <= 0:
        parser.error("--max-steps must be a positive integer")

    logger.info("Serving on %s:%d with a budget of %d steps", args.host, args.port, args.max_steps)
    uvicorn.run(create_app(max_steps=args.max_steps), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
