from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .errors import AccessKind, AccessViolation

logger = logging.getLogger(__name__)


_C_TYPE_NAMES: Dict[Tuple[int, bool], str] = {
    (8, True): "char",
    (8, False): "unsigned char",
    (16, True): "short",
    (16, False): "unsigned short",
    (32, True): "int",
    (32, False): "unsigned",
    (64, True): "long long",
    (64, False): "unsigned long long",
}


def cell_type_name(bits: int, signed: bool = True) -> str:
    """Return the C primitive name for a cell of the given width.

    Unknown widths fall back to ``char``, the narrowest type.
    """
    return _C_TYPE_NAMES.get((bits, signed), "char")


class CellType(str, Enum):
    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"

    @property
    def signed(self) -> bool:
        return not self.value.startswith("u")

    @property
    def bits(self) -> int:
        return int(self.value.lstrip("uint"))

    @property
    def minimum(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def maximum(self) -> int:
        if self.signed:
            return (1 << (self.bits - 1)) - 1
        return (1 << self.bits) - 1

    @property
    def c_name(self) -> str:
        return cell_type_name(self.bits, self.signed)

    def wrap(self, value: int) -> int:
        return ((value - self.minimum) % (1 << self.bits)) + self.minimum


@dataclass
class TapeStore:
    size: int = 1024
    cell_type: CellType = CellType.INT32

    cells: List[int] = field(init=False, repr=False)
    cursor: int = field(init=False)

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"Tape size must be at least 1, got {self.size}")
        self.cell_type = CellType(self.cell_type)
        self.cells = [0] * self.size
        self.cursor = self.min_address

    @property
    def min_address(self) -> int:
        return 0

    @property
    def max_address(self) -> int:
        return self.size - 1

    def in_range(self) -> bool:
        return self.min_address <= self.cursor <= self.max_address

    def check(self, access: AccessKind, position: Optional[int] = None) -> None:
        if not self.in_range():
            raise AccessViolation(access, self.cursor, position)

    def read(self, position: Optional[int] = None) -> int:
        self.check(AccessKind.READ, position)
        return self.cells[self.cursor]

    def write(self, value: int, position: Optional[int] = None) -> None:
        self.check(AccessKind.WRITE, position)
        self.cells[self.cursor] = self.cell_type.wrap(value)

    def add(self, delta: int, position: Optional[int] = None) -> None:
        self.check(AccessKind.WRITE, position)
        self.cells[self.cursor] = self.cell_type.wrap(self.cells[self.cursor] + delta)

    # Moves are never bounds checked; only the next dereference is.
    def move_right(self) -> None:
        self.cursor += 1

    def move_left(self) -> None:
        self.cursor -= 1

    def reset(self) -> None:
        self.cells[:] = [0] * self.size
        self.cursor = self.min_address
        logger.debug("Tape of %d %s cells reset", self.size, self.cell_type.value)

    def window(self, radius: int = 10) -> Tuple[int, List[int]]:
        start = min(max(self.min_address, self.cursor - radius), self.size)
        end = max(min(self.size, self.cursor + radius + 1), start)
        return start, self.cells[start:end].copy()


__all__ = ["CellType", "TapeStore", "cell_type_name"]
