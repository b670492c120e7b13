from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import BrainfuckSyntaxError

logger = logging.getLogger(__name__)


HEADERS = (
    "#include <stdio.h>",
    "#include <stdlib.h>",
    "#include <stddef.h>",
    '#include "conio.h"',
)


@dataclass
class TranslationResult:
    source: str
    depth: int

    @property
    def balanced(self) -> bool:
        return self.depth == 0


@dataclass
class CodeGenState:
    lines: List[str]
    depth: int = 0

    def emit(self, statement: str = "", extra: int = 0) -> None:
        # Loop bodies sit one level deeper than main()'s own statements.
        if not statement:
            self.lines.append("")
            return
        level = max(0, self.depth + 1 + extra)
        self.lines.append("\t" * level + statement)


class CTranslator:
    """Translates Brainfuck into a self-contained C program.

    Runs of ``<``/``>`` and of ``+``/``-`` are collated into one statement
    carrying their net effect. Nothing is validated while scanning: bracket
    balance is judged from the loop depth once the whole program has been
    emitted, and the tape is never bounds checked.
    """

    def __init__(self, tape_size: int = 1024, cell_type_name: str = "int") -> None:
        if tape_size < 1:
            raise ValueError(f"Tape size must be at least 1, got {tape_size}")
        self.tape_size = tape_size
        self.cell_type_name = cell_type_name

    def translate(self, code: str) -> str:
        result = self.translate_unchecked(code)
        if not result.balanced:
            missing = "]" if result.depth > 0 else "["
            raise BrainfuckSyntaxError(missing, depth=result.depth)
        return result.source

    def translate_unchecked(self, code: str) -> TranslationResult:
        state = CodeGenState(lines=[])
        self._emit_intro(state)

        length = len(code)
        index = 0
        while index < length:
            command = code[index]
            if command in "<>":
                offset, index = _collate(code, index, "><")
                statement = _movement_statement(offset)
                if index < length and code[index] in "+-":
                    delta, index = _collate(code, index, "+-")
                    statement = " ".join(filter(None, (statement, _arithmetic_statement(delta))))
                if statement:
                    state.emit(statement)
                continue
            if command in "+-":
                delta, index = _collate(code, index, "+-")
                statement = _arithmetic_statement(delta)
                if statement:
                    state.emit(statement)
                continue
            if command == ".":
                state.emit('printf("%c", tape[i]);')
            elif command == ",":
                state.emit("tape[i] = _getch();")
            elif command == "[":
                state.emit("while (tape[i] != 0) {")
                state.depth += 1
            elif command == "]":
                state.depth -= 1
                state.emit("}")
            index += 1

        self._emit_outro(state)
        source = "\n".join(state.lines) + "\n"
        logger.debug(
            "Translated %d characters into %d lines of C (final depth %d)",
            length,
            len(state.lines),
            state.depth,
        )
        return TranslationResult(source=source, depth=state.depth)

    def _emit_intro(self, state: CodeGenState) -> None:
        state.lines.extend(HEADERS)
        state.emit()
        state.emit("int main() {", extra=-1)
        state.emit()
        type_name = self.cell_type_name
        state.emit(f"{type_name} *tape = ({type_name} *)calloc({self.tape_size}, sizeof({type_name}));")
        state.emit("ptrdiff_t i = 0;")
        state.emit()

    def _emit_outro(self, state: CodeGenState) -> None:
        state.emit()
        state.emit("free(tape);")
        state.emit("_getch();")
        state.emit()
        state.emit("return 0;")
        state.emit()
        state.emit("}", extra=-1)


def translate(program: str, cell_type_name: str = "int", tape_size: int = 1024) -> str:
    return CTranslator(tape_size=tape_size, cell_type_name=cell_type_name).translate(program)


def _collate(code: str, index: int, ops: str) -> Tuple[int, int]:
    """Sum a run of ``ops[0]`` (+1) and ``ops[1]`` (-1) starting at ``index``."""
    up, down = ops
    total = 0
    while index < len(code) and code[index] in ops:
        total += 1 if code[index] == up else -1
        index += 1
    return total, index


def _movement_statement(offset: int) -> Optional[str]:
    return _unit_or_compound("i", offset)


def _arithmetic_statement(delta: int) -> Optional[str]:
    return _unit_or_compound("tape[i]", delta)


def _unit_or_compound(target: str, amount: int) -> Optional[str]:
    if amount == 0:
        return None
    if amount == 1:
        return f"{target}++;"
    if amount == -1:
        return f"{target}--;"
    if amount > 0:
        return f"{target} += {amount};"
    return f"{target} -= {-amount};"


__all__ = ["CTranslator", "TranslationResult", "translate"]
