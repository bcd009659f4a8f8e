"""
Disassembler Tests for the Intcode VM.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode.decoder import Param, ParamMode
from intcode.disassembler import disassemble, format_param
from intcode.program import parse_program

QUINE = parse_program("109,1,204,-1,1001,100,1,100,1008,100,16,101,1006,101,0,99")


def _fields(line: str):
    """'ADDR  RAW  TEXT' -> (addr, raw, text)."""
    addr, raw, text = line.split(None, 2)
    return int(addr), raw, text


class TestFormatParam:

    def test_position(self):
        assert format_param(Param(ParamMode.POSITION, 12)) == "[12]"

    def test_immediate(self):
        assert format_param(Param(ParamMode.IMMEDIATE, -4)) == "#-4"

    def test_relative(self):
        assert format_param(Param(ParamMode.RELATIVE, 3)) == "[rb+3]"
        assert format_param(Param(ParamMode.RELATIVE, -1)) == "[rb-1]"
        assert format_param(Param(ParamMode.RELATIVE, 0)) == "[rb+0]"


class TestDisassemble:

    def test_instruction_then_data(self):
        lines = disassemble([1002, 4, 3, 4, 33])
        assert _fields(lines[0]) == (0, "1002,4,3,4", "MUL [4], #3, [4]")
        assert _fields(lines[1]) == (4, "33", "DATA 33")
        assert len(lines) == 2

    def test_quine_listing(self):
        texts = [_fields(line)[2] for line in disassemble(QUINE)]
        assert texts == [
            "ARB #1",
            "OUT [rb-1]",
            "ADD [100], #1, [100]",
            "EQ  [100], #16, [101]",
            "JZ  [101], #0",
            "HLT",
        ]

    def test_truncated_instruction_is_data(self):
        lines = disassemble([1, 2])
        assert [_fields(line)[2] for line in lines] == ["DATA 1", "DATA 2"]

    def test_bad_mode_is_data(self):
        lines = disassemble([301, 99])
        assert [_fields(line)[2] for line in lines] == ["DATA 301", "HLT"]

    def test_sub_range_keeps_real_addresses(self):
        lines = disassemble(QUINE, start=2, end=4)
        assert len(lines) == 1
        assert _fields(lines[0]) == (2, "204,-1", "OUT [rb-1]")

    def test_end_past_image_is_clamped(self):
        assert len(disassemble([99], end=50)) == 1

    def test_negative_start_is_clamped(self):
        lines = disassemble([104, 7, 5], start=-1)
        assert [_fields(line)[2] for line in lines] == ["OUT #7", "DATA 5"]

    def test_empty(self):
        assert disassemble([]) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
