"""Instruction table and geometry constants."""
import pytest

from funge.isa import (
    CELL_BITS, CELL_MASK, COLS, DIGITS, DIRECTIONS, INSTRUCTION_NAMES,
    INSTRUCTIONS, QUOTE, ROWS, STEERING, Direction, mnemonic,
)


class TestGeometry:
    def test_cell_width(self):
        assert CELL_BITS == 8
        assert CELL_MASK == 0xFF

    def test_grid_extent_matches_cell_range(self):
        assert ROWS == COLS == CELL_MASK + 1 == 256


class TestInstructionTable:
    REQUIRED = "+-*/%!`><^v?_|\":\\$#pg@~&,."

    def test_all_required_codes(self):
        codes = set(INSTRUCTIONS.values())
        for ch in self.REQUIRED:
            assert ord(ch) in codes, f"missing instruction {ch!r}"

    def test_codes_unique(self):
        vals = list(INSTRUCTIONS.values())
        assert len(vals) == len(set(vals))

    def test_name_roundtrip(self):
        for name, code in INSTRUCTIONS.items():
            assert INSTRUCTION_NAMES[code] == name

    def test_digits_are_not_instructions(self):
        for code in DIGITS:
            assert code not in INSTRUCTION_NAMES

    def test_quote(self):
        assert QUOTE == 34

    def test_steering(self):
        assert STEERING[ord(">")] is Direction.RIGHT
        assert STEERING[ord("<")] is Direction.LEFT
        assert STEERING[ord("^")] is Direction.UP
        assert STEERING[ord("v")] is Direction.DOWN


class TestDirection:
    def test_four_directions(self):
        assert set(DIRECTIONS) == set(Direction)
        assert len(DIRECTIONS) == 4

    @pytest.mark.parametrize("d, delta", [
        (Direction.RIGHT, (0, 1)),
        (Direction.LEFT,  (0, -1)),
        (Direction.UP,    (-1, 0)),
        (Direction.DOWN,  (1, 0)),
    ])
    def test_deltas(self, d, delta):
        assert (d.d_row, d.d_col) == delta


class TestMnemonic:
    def test_digit(self):       assert mnemonic(ord("7")) == "PUSH_7"
    def test_halt(self):        assert mnemonic(ord("@")) == "HALT"
    def test_printable(self):   assert mnemonic(ord("a")) == "NOP('a')"
    def test_blank(self):       assert mnemonic(0) == "NOP(0x00)"
