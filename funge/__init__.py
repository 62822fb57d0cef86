"""
funge
=====
Interpreter for a two-dimensional, stack-based grid language.

Exports:
    load            — source text → ProgramGrid (SourceTooTall / SourceTooWide / SourceNotAscii)
    ProgramGrid     — 256x256 toroidal byte grid
    OperandStack    — LIFO of cells; empty pop yields 0
    MachineState    — pointer, direction, string mode, grid, stack
    Dispatcher      — executes one instruction
    run             — driver loop until ``@``
    FungeVM         — load + run in one object
    MemoryChannel / StreamChannel — IOChannel implementations
"""

__version__ = "1.0.0"

from .grid    import (ProgramGrid, GridError, SourceTooTall, SourceTooWide,
                      SourceNotAscii, load)
from .state   import OperandStack, MachineState
from .channel import IOChannel, StreamChannel, MemoryChannel
from .vm      import (Dispatcher, FungeVM, StepResult, VMError,
                      DivisionByZeroFault, NumericInputError, OutputWriteError, run)
