"""Funge program grid — fixed 256×256 toroidal array of byte cells.

The grid is a flat ``bytearray`` in row-major order.  Cell ``(row, col)``
lives at ``row * COLS + col``.  Because the extent on each axis equals the
number of distinct cell values, any value popped off the operand stack is a
valid coordinate and no bounds checks are needed at run time.
"""
from __future__ import annotations

import logging
from typing import Iterator, List

from funge.isa import ASCII_MAX, CELL_MASK, COLS, ROWS

logger = logging.getLogger(__name__)


# ── Load-time errors ───────────────────────────────────────────────────────────

class GridError(ValueError):
    """Source text cannot be laid out on the grid."""


class SourceTooTall(GridError):
    def __init__(self, lines: int):
        self.lines = lines
        super().__init__(f"program contains too many lines (> {ROWS})")


class SourceTooWide(GridError):
    def __init__(self, row: int, width: int):
        self.row   = row      # 0-indexed
        self.width = width
        super().__init__(
            f"program contains too many columns (> {COLS}) on line {row + 1}")


class SourceNotAscii(GridError):
    def __init__(self, row: int, col: int, char: str):
        self.row  = row
        self.col  = col
        self.char = char
        super().__init__(
            f"program contains non-ASCII character {char!r} "
            f"on line {row + 1}, column {col + 1}")


# ── Grid ───────────────────────────────────────────────────────────────────────

class ProgramGrid:
    def __init__(self, height: int = 0):
        self.rows   = ROWS
        self.cols   = COLS
        self.height = height          # number of source lines loaded
        self.cells  = bytearray(ROWS * COLS)

    def get(self, row: int, col: int) -> int:
        return self.cells[row * COLS + col]

    def put(self, row: int, col: int, value: int):
        self.cells[row * COLS + col] = value & CELL_MASK

    def row(self, row: int) -> bytes:
        start = row * COLS
        return bytes(self.cells[start:start + COLS])

    def iter_rows(self) -> Iterator[bytes]:
        for r in range(ROWS):
            yield self.row(r)

    def to_source(self) -> str:
        """Serialize back to text, dropping zero padding.

        Rows up to the loaded height are always emitted; rows beyond it are
        emitted only when self-modification left something non-zero there.
        """
        lines: List[str] = [
            self.row(r).rstrip(b"\x00").decode("latin-1") for r in range(ROWS)
        ]
        last = self.height
        for r in range(ROWS - 1, self.height - 1, -1):
            if lines[r]:
                last = r + 1
                break
        return "\n".join(lines[:last])

    def __eq__(self, other):
        if not isinstance(other, ProgramGrid):
            return NotImplemented
        return self.cells == other.cells

    def __repr__(self):
        return f"ProgramGrid({self.rows}x{self.cols}, height={self.height})"


# ── Loader ─────────────────────────────────────────────────────────────────────

def load(source: str, *, strict: bool = False) -> ProgramGrid:
    """Lay ``source`` out on a fresh grid, one line per row.

    Lines are split on ``"\\n"`` only, so a trailing newline becomes a final
    empty row.  A full-height source may still end in a newline: that one
    empty segment past the last row is dropped instead of counted.

    With ``strict`` any character outside 0–127 is rejected.  Otherwise it
    is stored truncated to the cell width, which can turn it into an
    instruction: U+0140 lands as ``@`` and U+0131 as ``1``.
    """
    lines = source.split("\n")
    if len(lines) == ROWS + 1 and lines[-1] == "":
        lines.pop()
    if len(lines) > ROWS:
        raise SourceTooTall(len(lines))

    for i, line in enumerate(lines):
        if len(line) > COLS:
            raise SourceTooWide(i, len(line))

    if strict:
        for i, line in enumerate(lines):
            for j, ch in enumerate(line):
                if ord(ch) > ASCII_MAX:
                    raise SourceNotAscii(i, j, ch)

    grid = ProgramGrid(height=len(lines))
    for i, line in enumerate(lines):
        start = i * COLS
        grid.cells[start:start + len(line)] = bytes(ord(ch) & CELL_MASK for ch in line)

    logger.debug("loaded %d line(s), widest %d column(s)",
                 len(lines), max(len(line) for line in lines))
    return grid
