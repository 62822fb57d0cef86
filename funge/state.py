"""Machine state — operand stack, instruction pointer, direction, string mode."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from funge.grid import ProgramGrid
from funge.isa import CELL_MASK, COLS, ROWS, Direction


class OperandStack:
    """LIFO of cells.  Popping an empty stack yields 0 instead of failing."""

    def __init__(self, values: Optional[Iterable[int]] = None):
        self._items: List[int] = []
        for v in values or ():
            self.push(v)

    def push(self, value: int):
        self._items.append(value & CELL_MASK)

    def pop(self) -> int:
        if self._items:
            return self._items.pop()
        return 0

    def peek(self) -> int:
        return self._items[-1] if self._items else 0

    def clear(self):
        self._items.clear()

    def to_list(self) -> List[int]:
        """Bottom-to-top copy of the stack contents."""
        return list(self._items)

    def __len__(self):
        return len(self._items)

    def __bool__(self):
        return bool(self._items)

    def __repr__(self):
        return f"OperandStack({self._items!r})"


@dataclass
class MachineState:
    grid:        ProgramGrid
    stack:       OperandStack = field(default_factory=OperandStack)
    row:         int = 0
    col:         int = 0
    direction:   Direction = Direction.RIGHT
    string_mode: bool = False
    steps:       int = 0

    @property
    def position(self) -> tuple[int, int]:
        return self.row, self.col

    def current(self) -> int:
        """Cell under the instruction pointer."""
        return self.grid.get(self.row, self.col)

    def advance(self):
        """Move one cell along the current direction, wrapping on both axes."""
        self.row = (self.row + self.direction.d_row) % ROWS
        self.col = (self.col + self.direction.d_col) % COLS
