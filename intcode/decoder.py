"""
Intcode — Opcode Table and Instruction Decoder

An instruction word packs the opcode and the parameter modes in decimal:

    word = ... C B A O O
                     └┴── opcode (word % 100)
                   └───── mode of parameter 1
                 └─────── mode of parameter 2
               └───────── mode of parameter 3

Missing high digits are 0 (position mode). Mode digits past the opcode's
parameter count are ignored.

Parameter modes:
  POSITION   parameter is an address
  IMMEDIATE  parameter is the value itself (never a valid write target)
  RELATIVE   parameter is an address offset by the relative base
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

from .config import OPCODE_DIVISOR, MODE_BASE
from .errors import UnknownOpcodeError, UnknownParameterModeError


class ParamMode(IntEnum):
    POSITION = 0
    IMMEDIATE = 1
    RELATIVE = 2


class Op(IntEnum):
    ADD = 1
    MUL = 2
    IN = 3
    OUT = 4
    JNZ = 5     # jump-if-true
    JZ = 6      # jump-if-false
    LT = 7
    EQ = 8
    ARB = 9     # adjust relative base
    HLT = 99


# ──────────────────────────────────────────────
# Opcode table
# ──────────────────────────────────────────────
# Format: opcode -> (mnemonic, param_count, writes_last_param)

OPCODES = {
    Op.ADD: ('ADD', 3, True),
    Op.MUL: ('MUL', 3, True),
    Op.IN:  ('IN',  1, True),
    Op.OUT: ('OUT', 1, False),
    Op.JNZ: ('JNZ', 2, False),
    Op.JZ:  ('JZ',  2, False),
    Op.LT:  ('LT',  3, True),
    Op.EQ:  ('EQ',  3, True),
    Op.ARB: ('ARB', 1, False),
    Op.HLT: ('HLT', 0, False),
}


@dataclass(frozen=True)
class Param:
    mode: ParamMode
    raw: int


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction as it sits in memory."""
    address: int
    opcode: Op
    params: Tuple[Param, ...]

    @property
    def mnemonic(self) -> str:
        return OPCODES[self.opcode][0]

    @property
    def size(self) -> int:
        """Words occupied: opcode word plus one per parameter."""
        return 1 + len(self.params)

    @property
    def next_address(self) -> int:
        return self.address + self.size


def decode_word(word: int, address: Optional[int] = None) -> Tuple[Op, Tuple[ParamMode, ...]]:
    """Split a raw instruction word into (opcode, modes).

    Pure function of the word; address is only used in error messages.
    Negative words never decode.
    """
    if word < 0:
        raise UnknownOpcodeError(word, word, address)

    code = word % OPCODE_DIVISOR
    if code not in OPCODES:
        raise UnknownOpcodeError(code, word, address)
    opcode = Op(code)

    flags = word // OPCODE_DIVISOR
    modes = []
    for _ in range(OPCODES[opcode][1]):
        digit = flags % MODE_BASE
        flags //= MODE_BASE
        try:
            modes.append(ParamMode(digit))
        except ValueError:
            raise UnknownParameterModeError(digit, word, address) from None
    return opcode, tuple(modes)


def decode_instruction(memory, address: int) -> Instruction:
    """Fetch and decode the instruction at address.

    Parameters are read raw; resolving them against memory and the
    relative base is the machine's job.
    """
    word = memory.read(address)
    opcode, modes = decode_word(word, address)
    params = tuple(
        Param(mode, memory.read(address + 1 + i))
        for i, mode in enumerate(modes)
    )
    return Instruction(address, opcode, params)
