from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .errors import BrainfuckSyntaxError
from .tape import CellType
from .translator import CTranslator

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool, default_level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else default_level,
        format="%(message)s",
        stream=sys.stderr,
    )


def _read_source(path: str) -> str:
    source_path = Path(path)
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    # Only the eight command characters matter; other bytes are comments.
    return source_path.read_text(encoding="utf-8", errors="replace")


def _write_output(path: str, data: str) -> None:
    output_path = Path(path)
    output_path.write_text(data, encoding="utf-8")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Translate a Brainfuck source file into C")
    parser.add_argument("memsize", type=int, help="Number of cells allocated to the tape")
    parser.add_argument("source", help="Path to the Brainfuck source file")
    parser.add_argument("dest", help="Destination file for the generated C code")
    parser.add_argument(
        "--cell-type",
        choices=[cell_type.value for cell_type in CellType],
        default=CellType.INT32.value,
        help="Integral type of each tape cell (default: int32)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Also log the source and generated code")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.memsize <= 0:
        print("You must supply a valid positive integer for the size of memory allocated.", file=sys.stderr)
        return 1

    logger.info("Reading brainfuck source file ...")
    try:
        source_text = _read_source(args.source)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Unable to read brainfuck source file: {exc}", file=sys.stderr)
        return 1
    logger.info("Source file size: %d.", len(source_text))
    logger.debug("Content read:\n%s", source_text)

    cell_type = CellType(args.cell_type)
    translator = CTranslator(tape_size=args.memsize, cell_type_name=cell_type.c_name)
    logger.info("Translating brainfuck code to C code ...")
    try:
        c_code = translator.translate(source_text)
    except BrainfuckSyntaxError as exc:
        print(f"Translation error: {exc}", file=sys.stderr)
        return 1
    logger.debug("Translated C code:\n%s", c_code)

    logger.info("Writing into C destination file ...")
    try:
        _write_output(args.dest, c_code)
    except OSError as exc:
        print(f"Unable to create C destination file: {exc}", file=sys.stderr)
        return 1

    logger.info("Operation complete.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
