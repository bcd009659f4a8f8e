"""
Intcode — Disassembler

Linear-sweep listing of a program image. Intcode freely mixes code and
data (and rewrites itself), so the sweep cannot know which words are
instructions: anything that does not decode, or an instruction cut off by
the end of the image, is listed as DATA and the sweep moves on one word.

Operand syntax:
  [n]       position mode   (memory at address n)
  #n        immediate mode
  [rb+n]    relative mode   (memory at relative base + n)
"""

from typing import List, Optional, Sequence

from .decoder import Instruction, Param, ParamMode, decode_instruction
from .errors import UnknownOpcodeError, UnknownParameterModeError
from .memory import Memory

__all__ = ['format_param', 'format_instruction', 'disassemble']


def format_param(param: Param) -> str:
    """Format one operand for its addressing mode."""
    if param.mode == ParamMode.IMMEDIATE:
        return f"#{param.raw}"
    if param.mode == ParamMode.RELATIVE:
        sign = '-' if param.raw < 0 else '+'
        return f"[rb{sign}{abs(param.raw)}]"
    return f"[{param.raw}]"


def format_instruction(instr: Instruction) -> str:
    operands = ', '.join(format_param(p) for p in instr.params)
    if operands:
        return f"{instr.mnemonic:4s}{operands}"
    return instr.mnemonic


def disassemble(values: Sequence[int], start: int = 0,
                end: Optional[int] = None) -> List[str]:
    """Disassemble values[start:end] into listing lines.

    Each line: 'ADDR  RAW-WORDS  MNEMONIC OPERANDS'. Addresses are indices
    into the full image, so a sub-range lists with its real addresses.
    """
    start = max(0, start)
    if end is None or end > len(values):
        end = len(values)
    mem = Memory(values)

    lines = []
    addr = start
    while addr < end:
        try:
            instr = decode_instruction(mem, addr)
        except (UnknownOpcodeError, UnknownParameterModeError):
            instr = None

        if instr is None or instr.next_address > end:
            lines.append(_line(addr, [values[addr]], f"DATA {values[addr]}"))
            addr += 1
            continue

        raw = values[addr:instr.next_address]
        lines.append(_line(addr, raw, format_instruction(instr)))
        addr = instr.next_address

    return lines


def _line(addr: int, raw: Sequence[int], text: str) -> str:
    words = ','.join(str(w) for w in raw)
    return f"{addr:>6d}  {words:24s}  {text}"
