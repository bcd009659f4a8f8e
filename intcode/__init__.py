"""
Intcode Virtual Machine
=======================
An interpreter for Intcode programs: flat lists of signed integers run on
an unbounded, sparse, default-zero memory, with input fed in by the caller
and output handed back one value at a time.

Architecture:
    ┌──────────────┐    ┌───────────┐    ┌───────────┐    ┌────────────────┐
    │ Program text │───>│  program  │───>│  memory   │<───│    machine     │
    │ "1,9,10,..." │    │  (ints)   │    │  (sparse) │    │ fetch/dispatch │
    └──────────────┘    └───────────┘    └───────────┘    └───────┬────────┘
                                                                  │
                                                  ┌───────────────┴──┐
                                                  │     decoder      │
                                                  │ opcode + modes   │
                                                  └──────────────────┘

    - program.py:      text <-> list of ints
    - memory.py:       dict-backed memory, watchpoints, snapshots
    - decoder.py:      opcode table and pure instruction-word decoder
    - machine.py:      IntcodeMachine, run()/step() with suspend on OUT
    - disassembler.py: linear-sweep listing for humans
    - config.py:       encoding constants, InputPolicy, MachineConfig
"""

__version__ = "1.0.0"

from typing import Iterable, List, Optional

from .config import InputPolicy, MachineConfig
from .decoder import Instruction, Op, Param, ParamMode, decode_instruction, decode_word
from .disassembler import disassemble
from .errors import (
    IntcodeError, ParseError, EmptyInputError, UnknownOpcodeError,
    UnknownParameterModeError, InvalidWriteTargetError, MachineFaultedError,
)
from .machine import (
    IntcodeMachine, RunResult, StopReason, HALTED, AWAITING_INPUT, TIMEOUT,
)
from .memory import Memory
from .program import parse_program, load_program, format_program


def run_program(program, inputs: Iterable[int] = (),
                config: Optional[MachineConfig] = None) -> List[int]:
    """Run a program to completion and return all of its outputs.

    program may be program text or a sequence of ints. All inputs are
    queued up front.
    """
    if isinstance(program, str):
        machine = IntcodeMachine.from_text(program, config)
    else:
        machine = IntcodeMachine(program, config)
    machine.submit_inputs(inputs)
    return machine.run_until_halt()
