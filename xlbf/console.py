from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

from . import terminal
from .bf_interpreter import BrainfuckInterpreter
from .cli import configure_logging
from .errors import BrainfuckError
from .tape import CellType

logger = logging.getLogger(__name__)

PROMPT = "COMMAND "
RESET_COMMAND = "reset"
DEFAULT_BUFFER_SIZE = 1024


@dataclass
class ConsoleSession:
    interpreter: BrainfuckInterpreter
    buffer_size: int = DEFAULT_BUFFER_SIZE

    def read_program(self) -> Optional[str]:
        """Collect lines until an empty one or until the buffer is full.

        Returns ``None`` when the reset command was entered. Raises
        ``EOFError`` once input is exhausted and nothing is pending.
        """
        pieces: List[str] = []
        size = 0
        while True:
            try:
                line = input(PROMPT)
            except EOFError:
                if pieces:
                    return "".join(pieces)
                raise
            if line == RESET_COMMAND:
                self.reset()
                return None
            chunk = line + "\n"
            room = self.buffer_size - size
            pieces.append(chunk[:room])
            size += min(len(chunk), room)
            if not line or size >= self.buffer_size:
                return "".join(pieces)

    def reset(self) -> None:
        self.interpreter.reset()
        print("CONSOLE: Environment reset.")

    def execute(self, code: str) -> bool:
        print("OUTPUT: ", end="", flush=True)
        try:
            self.interpreter.run(code)
        except BrainfuckError as exc:
            print()
            print(str(exc), file=sys.stderr)
            return False
        print()
        return True


def run_repl(session: ConsoleSession) -> None:
    print("== XL BRAINFUCK CONSOLE ==")
    print(f"# Enter {RESET_COMMAND} to reinitialize the brainfuck environment.")
    print("# Other inputs will be interpreted as brainfuck code.")
    while True:
        try:
            code = session.read_program()
        except EOFError:
            print()
            break
        if code is None:
            continue
        session.execute(code)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Interactive Brainfuck console")
    parser.add_argument(
        "--tape-size",
        type=int,
        default=1024,
        help="Number of cells on the tape (default: 1024)",
    )
    parser.add_argument(
        "--cell-type",
        choices=[cell_type.value for cell_type in CellType],
        default=CellType.INT32.value,
        help="Integral type of each cell (default: int32)",
    )
    parser.add_argument(
        "--buffer-size",
        type=int,
        default=DEFAULT_BUFFER_SIZE,
        help="Maximum characters collected per program (default: 1024)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine activity to stderr")
    args = parser.parse_args(argv)
    configure_logging(args.verbose, default_level=logging.WARNING)

    if args.tape_size < 1:
        print("Tape size must be a positive integer.", file=sys.stderr)
        return 1
    if args.buffer_size < 1:
        print("Buffer size must be a positive integer.", file=sys.stderr)
        return 1

    interpreter = BrainfuckInterpreter(
        tape_size=args.tape_size,
        cell_type=CellType(args.cell_type),
        input_source=terminal.read_char,
        output_sink=terminal.write_text,
    )
    session = ConsoleSession(interpreter, buffer_size=args.buffer_size)
    try:
        run_repl(session)
    except KeyboardInterrupt:
        print()
        logger.debug("Console interrupted")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
