"""
Intcode — Program Text

Programs travel as a single line of comma-separated signed decimal
integers, e.g. ``1,9,10,3,2,3,11,0,99,30,40,50``. Whitespace around the
whole text and around each element is ignored. Nothing else is accepted:
no labels, no symbolic opcodes, no empty elements.
"""

import re
from pathlib import Path
from typing import Iterable, List, Union

from .config import PROGRAM_SEPARATOR
from .errors import ParseError

__all__ = ['parse_program', 'load_program', 'format_program']

# ASCII only: int() alone would also take '1_000' and non-ASCII digits
_INT_RE = re.compile(r'[+-]?[0-9]+', re.ASCII)


def parse_program(text: str) -> List[int]:
    """Parse program text into its list of integers.

    Raises ParseError naming the first element that is not an integer.
    """
    values = []
    for index, token in enumerate(text.strip().split(PROGRAM_SEPARATOR)):
        token = token.strip()
        if not _INT_RE.fullmatch(token):
            raise ParseError(index, token)
        values.append(int(token))
    return values


def load_program(path: Union[str, Path]) -> List[int]:
    """Read and parse a program file."""
    return parse_program(Path(path).read_text(encoding="utf-8"))


def format_program(values: Iterable[int]) -> str:
    return PROGRAM_SEPARATOR.join(str(v) for v in values)
