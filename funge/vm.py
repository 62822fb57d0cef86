"""Funge Virtual Machine — executes a program grid one cell at a time.

Components:
  - Dispatcher: executes the instruction under the pointer
  - run():      driver loop, advances the pointer until HALT
  - FungeVM:    load + state + run in one object

Binary operators pop the right operand first, ``p``/``g`` pop the row
before the column.
"""
from __future__ import annotations

import logging
import random
import re
import time
from enum import Enum, auto
from typing import Callable, Optional, TypeVar

from funge.channel import IOChannel, MemoryChannel
from funge.grid import ProgramGrid, load
from funge.isa import (
    CELL_MASK, DIGITS, DIRECTIONS, INSTRUCTIONS, QUOTE, STEERING,
    Direction, mnemonic,
)
from funge.state import MachineState, OperandStack

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Backoff for transient input failures (seconds)
RETRY_INITIAL_DELAY = 0.001
RETRY_MAX_DELAY     = 0.25

_NUMBER_RE = re.compile(r"[+-]?[0-9]+")


# ── Run-time faults ────────────────────────────────────────────────────────────

class VMError(Exception):
    pass


class DivisionByZeroFault(VMError):
    def __init__(self, op: str, row: int, col: int):
        self.op  = op
        self.row = row
        self.col = col
        super().__init__(f"{op} by zero at ({row}, {col})")


class NumericInputError(VMError):
    def __init__(self, text: str):
        self.text = text
        super().__init__(f"invalid numeric input: {text!r}")


class OutputWriteError(VMError):
    def __init__(self):
        super().__init__("failed to write to stdout")


class StepResult(Enum):
    CONTINUE = auto()
    HALT     = auto()


# ── Dispatcher ─────────────────────────────────────────────────────────────────

class Dispatcher:
    """Executes one instruction per ``step``.

    ``rng`` only needs a ``choice(seq)`` method; pass a seeded
    ``random.Random`` or a scripted stub for reproducible runs.
    """

    def __init__(self, channel: IOChannel, rng=None, *,
                 sleep: Callable[[float], None] = time.sleep):
        self.channel = channel
        self.rng     = rng if rng is not None else random.Random()
        self._sleep  = sleep

    # ── I/O helpers ───────────────────────────────────────────────────────────

    def _retry(self, read: Callable[[], T], what: str) -> T:
        delay    = RETRY_INITIAL_DELAY
        failures = 0
        while True:
            try:
                return read()
            except OSError as e:
                failures += 1
                if failures == 1:
                    logger.warning("%s failed (%s), retrying", what, e)
                else:
                    logger.debug("%s failed again (attempt %d): %s", what, failures, e)
                self._sleep(delay)
                delay = min(delay * 2, RETRY_MAX_DELAY)

    def _write(self, emit: Callable[[], None]):
        try:
            emit()
            self.channel.flush()
        except OSError as e:
            raise OutputWriteError() from e

    # ── Single-step execution ─────────────────────────────────────────────────

    def step(self, state: MachineState) -> StepResult:
        instr = state.current()
        stack = state.stack

        if state.string_mode:
            if instr == QUOTE:
                state.string_mode = False
            else:
                stack.push(instr)
            return StepResult.CONTINUE

        I = INSTRUCTIONS

        # ── literal digit ──────────────────────────────────────────────────────
        if instr in DIGITS:
            stack.push(instr - DIGITS.start)

        # ── arithmetic ─────────────────────────────────────────────────────────
        elif instr == I["ADD"]:
            b, a = stack.pop(), stack.pop()
            stack.push(a + b)

        elif instr == I["SUB"]:
            b, a = stack.pop(), stack.pop()
            stack.push(a - b)

        elif instr == I["MUL"]:
            b, a = stack.pop(), stack.pop()
            stack.push(a * b)

        elif instr == I["DIV"]:
            b, a = stack.pop(), stack.pop()
            if b == 0:
                raise DivisionByZeroFault("division", state.row, state.col)
            stack.push(a // b)

        elif instr == I["MOD"]:
            b, a = stack.pop(), stack.pop()
            if b == 0:
                raise DivisionByZeroFault("modulo", state.row, state.col)
            stack.push(a % b)

        elif instr == I["NOT"]:
            stack.push(1 if stack.pop() == 0 else 0)

        elif instr == I["GREATER"]:
            a, b = stack.pop(), stack.pop()
            stack.push(1 if b > a else 0)

        # ── direction ──────────────────────────────────────────────────────────
        elif instr in STEERING:
            state.direction = STEERING[instr]

        elif instr == I["RANDOM"]:
            state.direction = self.rng.choice(DIRECTIONS)

        elif instr == I["H_IF"]:
            state.direction = Direction.RIGHT if stack.pop() == 0 else Direction.LEFT

        elif instr == I["V_IF"]:
            state.direction = Direction.DOWN if stack.pop() == 0 else Direction.UP

        # ── control ────────────────────────────────────────────────────────────
        elif instr == I["STRING"]:
            state.string_mode = True

        elif instr == I["BRIDGE"]:
            state.advance()

        elif instr == I["HALT"]:
            return StepResult.HALT

        # ── stack ──────────────────────────────────────────────────────────────
        elif instr == I["DUP"]:
            a = stack.pop()
            stack.push(a)
            stack.push(a)

        elif instr == I["SWAP"]:
            a, b = stack.pop(), stack.pop()
            stack.push(a)
            stack.push(b)

        elif instr == I["POP"]:
            stack.pop()

        # ── self-modification ──────────────────────────────────────────────────
        elif instr == I["PUT"]:
            row, col, value = stack.pop(), stack.pop(), stack.pop()
            state.grid.put(row, col, value)

        elif instr == I["GET"]:
            row, col = stack.pop(), stack.pop()
            stack.push(state.grid.get(row, col))

        # ── input ──────────────────────────────────────────────────────────────
        elif instr == I["IN_CHAR"]:
            value = self._retry(self.channel.read_byte, "byte input")
            stack.push(0 if value is None else value)

        elif instr == I["IN_NUMBER"]:
            line = self._retry(self.channel.read_line, "numeric input")
            text = line.strip()
            if not _NUMBER_RE.fullmatch(text):
                raise NumericInputError(text)
            stack.push(int(text) & CELL_MASK)

        # ── output ─────────────────────────────────────────────────────────────
        elif instr == I["OUT_CHAR"]:
            value = stack.pop()
            self._write(lambda: self.channel.write_byte(value))

        elif instr == I["OUT_NUMBER"]:
            value = stack.pop()
            self._write(lambda: self.channel.write_text(f"{value} "))

        # anything else is blank space

        return StepResult.CONTINUE


# ── Driver ─────────────────────────────────────────────────────────────────────

def run(state: MachineState, channel: IOChannel, *,
        dispatcher: Optional[Dispatcher] = None, rng=None) -> int:
    """Step until HALT and return the number of instructions executed.

    Faults propagate immediately.  A program that never reaches ``@`` runs
    forever.
    """
    if dispatcher is None:
        dispatcher = Dispatcher(channel, rng)
    trace = logger.isEnabledFor(logging.DEBUG)

    while True:
        if trace:
            logger.debug("step=%d pos=(%d,%d) dir=%s %s depth=%d%s",
                         state.steps, state.row, state.col,
                         state.direction.name, mnemonic(state.current()),
                         len(state.stack), " [str]" if state.string_mode else "")
        result = dispatcher.step(state)
        state.steps += 1
        if result is StepResult.HALT:
            logger.debug("halted after %d step(s)", state.steps)
            return state.steps
        state.advance()


class FungeVM:
    """Load a program and run it on a fresh machine state."""

    def __init__(self, source: str, *, channel: Optional[IOChannel] = None,
                 rng=None, strict: bool = False):
        self.channel = channel if channel is not None else MemoryChannel()
        self.state   = MachineState(load(source, strict=strict))
        self.dispatcher = Dispatcher(self.channel, rng)

    @property
    def grid(self) -> ProgramGrid:
        return self.state.grid

    @property
    def stack(self) -> OperandStack:
        return self.state.stack

    def run(self) -> int:
        return run(self.state, self.channel, dispatcher=self.dispatcher)
