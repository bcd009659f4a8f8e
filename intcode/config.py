"""
Intcode — Engine Configuration
==============================

Encoding constants and the per-machine options a caller can choose.

The faithful core treats an IN instruction with an empty queue as fatal.
InputPolicy.SUSPEND is the opt-in alternative for callers that interleave
several machines and feed them lazily: run() hands control back with
AWAITING_INPUT and retries the same IN after the caller submits a value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
#  INSTRUCTION WORD ENCODING
# =============================================================================
OPCODE_DIVISOR = 100      # low two decimal digits select the opcode
MODE_BASE = 10            # one decimal digit per parameter mode

# =============================================================================
#  PROGRAM TEXT
# =============================================================================
PROGRAM_SEPARATOR = ","

# =============================================================================
#  EXECUTION LIMITS
# =============================================================================
DEFAULT_MAX_STEPS: Optional[int] = None   # None = run until OUT / HLT


class InputPolicy(Enum):
    FAIL = 'FAIL'          # EmptyInputError
    SUSPEND = 'SUSPEND'    # return AWAITING_INPUT, IN is retried on resume


@dataclass
class MachineConfig:
    """Options for a single IntcodeMachine.

    input_policy: what IN does when the input queue is empty.
    trace:        record a disassembled line per executed instruction
                  in machine.trace_output (and log it at DEBUG).
    max_steps:    default instruction budget for each run() call.
                  When exhausted run() returns TIMEOUT and the machine
                  stays resumable.
    """
    input_policy: InputPolicy = InputPolicy.FAIL
    trace: bool = False
    max_steps: Optional[int] = DEFAULT_MAX_STEPS
