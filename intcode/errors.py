"""
Intcode — Exception Hierarchy

Every fatal condition the engine can hit is an IntcodeError. They are raised
where they are detected (text parser, decoder, machine) and never caught
inside the engine; the machine only records the fault before re-raising so
that later run() calls refuse to continue on corrupted state.
"""

from typing import Optional


class IntcodeError(Exception):
    """Base class for all Intcode engine errors."""
    pass


class ParseError(IntcodeError):
    """Program text contains an element that is not an integer literal."""
    def __init__(self, index: int, token: str):
        self.index = index
        self.token = token
        super().__init__(f"Element {index}: invalid integer '{token}'")


class UnknownOpcodeError(IntcodeError):
    def __init__(self, opcode: int, word: int, address: Optional[int] = None):
        self.opcode = opcode
        self.word = word
        self.address = address
        where = f" at {address}" if address is not None else ""
        super().__init__(f"Unknown opcode {opcode} (word {word}){where}")


class UnknownParameterModeError(IntcodeError):
    def __init__(self, mode: int, word: int, address: Optional[int] = None):
        self.mode = mode
        self.word = word
        self.address = address
        where = f" at {address}" if address is not None else ""
        super().__init__(f"Unknown parameter mode {mode} (word {word}){where}")


class EmptyInputError(IntcodeError):
    """An input instruction executed while the input queue was empty."""
    def __init__(self, address: int):
        self.address = address
        super().__init__(f"No input available for IN at {address}")


class InvalidWriteTargetError(IntcodeError):
    """An instruction tried to write through an immediate-mode parameter."""
    def __init__(self, address: int, mnemonic: str):
        self.address = address
        self.mnemonic = mnemonic
        super().__init__(
            f"{mnemonic} at {address}: write target cannot be in immediate mode")


class MachineFaultedError(IntcodeError):
    """The machine previously aborted with a fatal error and cannot resume."""
    pass
