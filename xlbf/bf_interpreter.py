from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from .brackets import BracketMatcher
from .errors import AccessKind, BrainfuckError
from .tape import CellType, TapeStore
from .translator import CTranslator

logger = logging.getLogger(__name__)

InputSource = Callable[[], int]
OutputSink = Callable[[str], None]


class StepLimitExceeded(RuntimeError):
    """Raised when Brainfuck execution exceeds the configured step budget."""


@dataclass
class ExecutionState:
    step: int
    pc: int
    command: Optional[str]
    pointer: int
    tape_start: int
    tape: List[int]
    output: str
    code_length: int


@dataclass
class BrainfuckInterpreter:
    """An engine session: one resident tape shared by successive runs.

    The tape keeps its cells and cursor between calls to :meth:`run` until
    :meth:`reset` is invoked.
    """

    tape_size: int = 1024
    cell_type: CellType = CellType.INT32
    input_source: Optional[InputSource] = None
    output_sink: Optional[OutputSink] = None

    tape: TapeStore = field(init=False, repr=False)
    output_buffer: List[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.tape = TapeStore(self.tape_size, self.cell_type)
        self.cell_type = self.tape.cell_type
        self.output_buffer = []

    @property
    def pointer(self) -> int:
        return self.tape.cursor

    @property
    def output(self) -> str:
        """Text emitted by the most recent run, including a failed one."""
        return "".join(self.output_buffer)

    def reset(self) -> None:
        self.tape.reset()
        self.output_buffer = []

    def run(
        self,
        code: str,
        input_data: Optional[Iterable[int]] = None,
        max_steps: Optional[int] = None,
    ) -> str:
        for _ in self._execute(code, input_data, max_steps):
            pass
        return self.output

    def step(
        self,
        code: str,
        input_data: Optional[Iterable[int]] = None,
        max_steps: Optional[int] = None,
        tape_window: int = 10,
    ) -> Iterator[ExecutionState]:
        code_length = len(code)
        pc = 0
        steps = 0
        for pc, command, steps in self._execute(code, input_data, max_steps):
            yield self._snapshot(pc, command, steps, code_length, tape_window)

        # Emit final snapshot indicating completion
        yield self._snapshot(pc, None, steps, code_length, tape_window)

    def _execute(
        self,
        code: str,
        input_data: Optional[Iterable[int]],
        max_steps: Optional[int],
    ) -> Iterator[Tuple[int, str, int]]:
        self.output_buffer = []
        input_iter = iter(input_data) if input_data is not None else None
        matcher = BracketMatcher(code)
        pc = 0
        steps = 0
        code_length = len(code)
        logger.debug("Running %d characters from cursor %d", code_length, self.tape.cursor)

        while pc < code_length:
            if max_steps is not None and steps >= max_steps:
                raise StepLimitExceeded("Brainfuck program exceeded allowed step count")

            command = code[pc]
            try:
                pc = self._execute_instruction(command, pc, matcher, input_iter)
            except BrainfuckError as exc:
                logger.debug("Run halted: %s", exc)
                raise
            steps += 1
            yield pc, command, steps

        logger.debug("Run finished after %d steps", steps)

    def translate(self, code: str) -> str:
        """Translate ``code`` to C sized and typed like this session's tape."""
        translator = CTranslator(tape_size=self.tape.size, cell_type_name=self.tape.cell_type.c_name)
        return translator.translate(code)

    def _execute_instruction(
        self,
        command: str,
        pc: int,
        matcher: BracketMatcher,
        input_iter: Optional[Iterator[int]],
    ) -> int:
        new_pc = pc + 1
        tape = self.tape
        if command == ">":
            tape.move_right()
        elif command == "<":
            tape.move_left()
        elif command == "+":
            tape.add(1, position=pc)
        elif command == "-":
            tape.add(-1, position=pc)
        elif command == ".":
            self._emit(_to_char(tape.read(position=pc)))
        elif command == ":":
            self._emit(str(tape.read(position=pc)))
        elif command == ",":
            tape.check(AccessKind.WRITE, position=pc)
            tape.write(self._read_input(input_iter), position=pc)
        elif command == "[":
            value = tape.read(position=pc)
            partner = matcher.match(pc)
            if value == 0:
                new_pc = partner + 1
        elif command == "]":
            new_pc = matcher.match(pc)
        return new_pc

    def _read_input(self, input_iter: Optional[Iterator[int]]) -> int:
        if input_iter is not None:
            return next(input_iter, 0)
        if self.input_source is not None:
            return self.input_source()
        return 0

    def _emit(self, text: str) -> None:
        self.output_buffer.append(text)
        if self.output_sink is not None:
            self.output_sink(text)

    def _snapshot(
        self,
        pc: int,
        command: Optional[str],
        step: int,
        code_length: int,
        tape_window: int,
    ) -> ExecutionState:
        start, tape_view = self.tape.window(tape_window)
        return ExecutionState(
            step=step,
            pc=pc,
            command=command,
            pointer=self.tape.cursor,
            tape_start=start,
            tape=tape_view,
            output=self.output,
            code_length=code_length,
        )


def _to_char(value: int) -> str:
    if 0 <= value <= 0x10FFFF and not 0xD800 <= value <= 0xDFFF:
        return chr(value)
    # Negatives, surrogates and values past the Unicode range print their
    # low byte, the same truncation as C's %c conversion.
    return chr(value & 0xFF)


__all__ = [
    "BrainfuckInterpreter",
    "ExecutionState",
    "InputSource",
    "OutputSink",
    "StepLimitExceeded",
]
