"""Funge ISA — instruction table, cell width and grid geometry.

Groups:
  literal     0-9            push digit value
  arithmetic  + - * / % ! `  pop operands, push result (mod 256)
  direction   > < ^ v ? _ |  steer the instruction pointer
  stack       : \\ $          duplicate / swap / discard
  control     " # @          string mode, trampoline, halt
  grid        p g            self-modifying put / get
  io          ~ & , .        byte / number input and output
"""
from __future__ import annotations

from enum import Enum

# ── Cell and grid geometry ─────────────────────────────────────────────────────
#   The grid extent equals 2**CELL_BITS on both axes, so every cell value is
#   also a valid coordinate.

CELL_BITS = 8
CELL_MASK = (1 << CELL_BITS) - 1
ROWS      = 1 << CELL_BITS
COLS      = 1 << CELL_BITS

ASCII_MAX = 0x7F


# ── Direction ──────────────────────────────────────────────────────────────────

class Direction(Enum):
    """Heading of the instruction pointer as a (d_row, d_col) delta."""
    RIGHT = (0, 1)
    LEFT  = (0, -1)
    UP    = (-1, 0)
    DOWN  = (1, 0)

    @property
    def d_row(self) -> int:
        return self.value[0]

    @property
    def d_col(self) -> int:
        return self.value[1]


DIRECTIONS: tuple[Direction, ...] = (
    Direction.RIGHT, Direction.LEFT, Direction.UP, Direction.DOWN,
)


# ── Instructions ───────────────────────────────────────────────────────────────
INSTRUCTIONS: dict[str, int] = {
    # ── arithmetic ──────────────────────────────────────────────────────────
    "ADD":        ord("+"),
    "SUB":        ord("-"),
    "MUL":        ord("*"),
    "DIV":        ord("/"),
    "MOD":        ord("%"),
    "NOT":        ord("!"),
    "GREATER":    ord("`"),

    # ── direction ───────────────────────────────────────────────────────────
    "RIGHT":      ord(">"),
    "LEFT":       ord("<"),
    "UP":         ord("^"),
    "DOWN":       ord("v"),
    "RANDOM":     ord("?"),
    "H_IF":       ord("_"),
    "V_IF":       ord("|"),

    # ── stack ───────────────────────────────────────────────────────────────
    "DUP":        ord(":"),
    "SWAP":       ord("\\"),
    "POP":        ord("$"),

    # ── control ─────────────────────────────────────────────────────────────
    "STRING":     ord('"'),
    "BRIDGE":     ord("#"),
    "HALT":       ord("@"),

    # ── self-modification ───────────────────────────────────────────────────
    "PUT":        ord("p"),
    "GET":        ord("g"),

    # ── io ──────────────────────────────────────────────────────────────────
    "IN_CHAR":    ord("~"),
    "IN_NUMBER":  ord("&"),
    "OUT_CHAR":   ord(","),
    "OUT_NUMBER": ord("."),
}

QUOTE = INSTRUCTIONS["STRING"]

DIGITS: range = range(ord("0"), ord("9") + 1)

# Reverse lookup: cell value → mnemonic
INSTRUCTION_NAMES: dict[int, str] = {v: k for k, v in INSTRUCTIONS.items()}

# Direction instructions that set the heading unconditionally
STEERING: dict[int, Direction] = {
    INSTRUCTIONS["RIGHT"]: Direction.RIGHT,
    INSTRUCTIONS["LEFT"]:  Direction.LEFT,
    INSTRUCTIONS["UP"]:    Direction.UP,
    INSTRUCTIONS["DOWN"]:  Direction.DOWN,
}


def mnemonic(cell: int) -> str:
    """Human-readable name of a cell for trace output."""
    if cell in DIGITS:
        return f"PUSH_{cell - ord('0')}"
    if cell in INSTRUCTION_NAMES:
        return INSTRUCTION_NAMES[cell]
    if 0x20 <= cell < 0x7F:
        return f"NOP({chr(cell)!r})"
    return f"NOP({cell:#04x})"
