"""
Intcode — Execution Engine

The machine owns a sparse memory, an instruction pointer, a relative base,
a FIFO input queue and a halted flag. Callers drive it with run():

    m = IntcodeMachine.from_text("3,0,4,0,99")
    m.submit_input(42)
    m.run()   # RunResult(OUTPUT, 42)
    m.run()   # HALTED

Execution model (one step):
  1. Decode the instruction word at IP into opcode + parameter modes
  2. Read the raw parameters that follow it
  3. Advance IP past the whole instruction
  4. Execute: jumps overwrite IP with an absolute address
  5. OUT suspends run() with the value; HLT latches the halted state

Stop reasons:
  - OUTPUT:          an OUT executed; state is ready to resume
  - HALTED:          HLT executed (now or earlier); further run() is a no-op
  - AWAITING_INPUT:  IN with an empty queue under InputPolicy.SUSPEND
  - TIMEOUT:         step budget exhausted; state is ready to resume

Fatal errors (empty queue under InputPolicy.FAIL, unknown opcode or mode,
immediate-mode write) abort run() with an IntcodeError. The machine keeps
the fault and every later run()/step() raises MachineFaultedError: no
guarantees hold for a machine past a fatal error.
"""

import logging
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .config import InputPolicy, MachineConfig
from .decoder import Instruction, Op, Param, ParamMode, decode_instruction
from .disassembler import format_instruction
from .errors import (
    EmptyInputError, IntcodeError, InvalidWriteTargetError, MachineFaultedError,
)
from .memory import Memory
from .program import load_program, parse_program

log = logging.getLogger(__name__)


class StopReason(Enum):
    OUTPUT = 'OUTPUT'
    HALTED = 'HALTED'
    AWAITING_INPUT = 'AWAITING_INPUT'
    TIMEOUT = 'TIMEOUT'


@dataclass(frozen=True)
class RunResult:
    reason: StopReason
    value: Optional[int] = None

    @classmethod
    def output(cls, value: int) -> 'RunResult':
        return cls(StopReason.OUTPUT, value)

    @property
    def is_output(self) -> bool:
        return self.reason is StopReason.OUTPUT

    @property
    def is_halted(self) -> bool:
        return self.reason is StopReason.HALTED


HALTED = RunResult(StopReason.HALTED)
AWAITING_INPUT = RunResult(StopReason.AWAITING_INPUT)
TIMEOUT = RunResult(StopReason.TIMEOUT)


class IntcodeMachine:
    """Intcode virtual machine.

    Single use: built once from a program image, mutated across any
    number of run() calls until it halts.

    Usage:
        m = IntcodeMachine([1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50])
        m.run()          # HALTED
        m.read_at(0)     # 3500
    """

    def __init__(self, program: Iterable[int], config: Optional[MachineConfig] = None):
        if isinstance(program, (str, bytes)):
            raise TypeError(
                "IntcodeMachine() takes a sequence of integers; "
                "use IntcodeMachine.from_text() for program text")
        self.config = config if config is not None else MachineConfig()
        self.mem = Memory(program)

        self._ip = 0
        self._relative_base = 0
        self._inputs = deque()
        self._halted = False
        self._fault: Optional[IntcodeError] = None
        self._steps = 0

        self.trace_output: List[str] = []

        self._dispatch = self._build_dispatch()
        log.debug("Machine loaded: %d words", len(self.mem))

    # ══════════════════════════════════════════════
    # Construction
    # ══════════════════════════════════════════════

    @classmethod
    def from_text(cls, text: str, config: Optional[MachineConfig] = None) -> 'IntcodeMachine':
        """Build from comma-separated program text. Raises ParseError."""
        return cls(parse_program(text), config)

    @classmethod
    def from_file(cls, path: Union[str, Path],
                  config: Optional[MachineConfig] = None) -> 'IntcodeMachine':
        return cls(load_program(path), config)

    def clone(self) -> 'IntcodeMachine':
        """Independent copy: memory, registers, queued input and state."""
        other = IntcodeMachine.__new__(IntcodeMachine)
        other.config = replace(self.config)
        other.mem = self.mem.copy()
        other._ip = self._ip
        other._relative_base = self._relative_base
        other._inputs = deque(self._inputs)
        other._halted = self._halted
        other._fault = self._fault
        other._steps = self._steps
        other.trace_output = list(self.trace_output)
        other._dispatch = other._build_dispatch()
        return other

    # ══════════════════════════════════════════════
    # State
    # ══════════════════════════════════════════════

    @property
    def ip(self) -> int:
        return self._ip

    @property
    def relative_base(self) -> int:
        return self._relative_base

    @property
    def halted(self) -> bool:
        return self._halted

    @property
    def pending_input(self) -> int:
        return len(self._inputs)

    @property
    def steps(self) -> int:
        """Instructions executed so far, across all run() calls."""
        return self._steps

    def read_at(self, address: int) -> int:
        """Raw memory read; 0 for never-written addresses."""
        return self.mem.read(address)

    def write_at(self, address: int, value: int):
        """Raw memory write, for patching a program before running it."""
        self.mem.write(address, value)

    # ══════════════════════════════════════════════
    # Input
    # ══════════════════════════════════════════════

    def submit_input(self, value: int):
        self._inputs.append(value)

    def submit_inputs(self, values: Iterable[int]):
        self._inputs.extend(values)

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def run(self, max_steps: Optional[int] = None) -> RunResult:
        """Execute until OUT, HLT, or a suspension point.

        max_steps overrides config.max_steps for this call. A halted
        machine returns HALTED immediately without touching any state; a
        faulted one raises MachineFaultedError whatever the budget.
        """
        if self._fault is not None:
            raise MachineFaultedError(
                f"Machine faulted at {self._ip}: {self._fault}") from self._fault
        if self._halted:
            return HALTED
        if max_steps is None:
            max_steps = self.config.max_steps

        executed = 0
        while max_steps is None or executed < max_steps:
            result = self.step()
            if result is not None:
                return result
            executed += 1

        return TIMEOUT

    def step(self) -> Optional[RunResult]:
        """Execute one instruction. Returns RunResult if stopped, else None."""
        if self._fault is not None:
            raise MachineFaultedError(
                f"Machine faulted at {self._ip}: {self._fault}") from self._fault
        if self._halted:
            return HALTED

        try:
            instr = decode_instruction(self.mem, self._ip)

            if (instr.opcode == Op.IN and not self._inputs
                    and self.config.input_policy is InputPolicy.SUSPEND):
                return AWAITING_INPUT

            if self.config.trace:
                line = f"{instr.address:>6d}: {format_instruction(instr)}"
                self.trace_output.append(line)
                log.debug(line)

            self._ip = instr.next_address
            self._steps += 1
            return self._dispatch[instr.opcode](instr)
        except IntcodeError as e:
            self._fault = e
            log.error("Machine fault: %s", e)
            raise

    def run_until_halt(self) -> List[int]:
        """Collect every output until HLT.

        Stops early (returning what was gathered) on AWAITING_INPUT or
        TIMEOUT.
        """
        outputs = []
        while True:
            result = self.run()
            if not result.is_output:
                return outputs
            outputs.append(result.value)

    # ══════════════════════════════════════════════
    # Operand resolution
    # ══════════════════════════════════════════════

    def _address_of(self, param: Param) -> int:
        if param.mode == ParamMode.RELATIVE:
            return self._relative_base + param.raw
        return param.raw

    def _value(self, param: Param) -> int:
        if param.mode == ParamMode.IMMEDIATE:
            return param.raw
        return self.mem.read(self._address_of(param))

    def _write(self, instr: Instruction, param: Param, value: int):
        if param.mode == ParamMode.IMMEDIATE:
            raise InvalidWriteTargetError(instr.address, instr.mnemonic)
        self.mem.write(self._address_of(param), value)

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(instr) -> Optional[RunResult]
    # IP already points past instr when a handler runs.

    def _build_dispatch(self) -> dict:
        return {
            Op.ADD: self._op_add,
            Op.MUL: self._op_mul,
            Op.IN:  self._op_in,
            Op.OUT: self._op_out,
            Op.JNZ: self._op_jnz,
            Op.JZ:  self._op_jz,
            Op.LT:  self._op_lt,
            Op.EQ:  self._op_eq,
            Op.ARB: self._op_arb,
            Op.HLT: self._op_hlt,
        }

    def _op_add(self, instr: Instruction):
        a, b, dst = instr.params
        self._write(instr, dst, self._value(a) + self._value(b))

    def _op_mul(self, instr: Instruction):
        a, b, dst = instr.params
        self._write(instr, dst, self._value(a) * self._value(b))

    def _op_in(self, instr: Instruction):
        if not self._inputs:
            raise EmptyInputError(instr.address)
        self._write(instr, instr.params[0], self._inputs.popleft())

    def _op_out(self, instr: Instruction) -> RunResult:
        return RunResult.output(self._value(instr.params[0]))

    def _op_jnz(self, instr: Instruction):
        cond, target = instr.params
        if self._value(cond) != 0:
            self._ip = self._value(target)

    def _op_jz(self, instr: Instruction):
        cond, target = instr.params
        if self._value(cond) == 0:
            self._ip = self._value(target)

    def _op_lt(self, instr: Instruction):
        a, b, dst = instr.params
        self._write(instr, dst, 1 if self._value(a) < self._value(b) else 0)

    def _op_eq(self, instr: Instruction):
        a, b, dst = instr.params
        self._write(instr, dst, 1 if self._value(a) == self._value(b) else 0)

    def _op_arb(self, instr: Instruction):
        self._relative_base += self._value(instr.params[0])

    def _op_hlt(self, instr: Instruction) -> RunResult:
        self._halted = True
        log.debug("HLT at %d after %d steps", instr.address, self._steps)
        return HALTED
