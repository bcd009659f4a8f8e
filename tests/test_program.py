"""
Program Text Tests for the Intcode VM.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode.errors import ParseError
from intcode.program import format_program, load_program, parse_program


class TestParseProgram:

    def test_simple(self):
        assert parse_program("1,9,10,3,2,3,11,0,99,30,40,50") == [
            1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50]

    def test_whitespace_and_signs(self):
        assert parse_program("  1 , -2 ,+3\n") == [1, -2, 3]

    def test_big_literal(self):
        assert parse_program("104,1125899906842624,99")[1] == 1125899906842624

    def test_single_value(self):
        assert parse_program("99") == [99]

    @pytest.mark.parametrize("text, index, token", [
        ("1,x,3", 1, "x"),
        ("", 0, ""),
        ("1,2,", 2, ""),
        ("1.5", 0, "1.5"),
        ("1_000", 0, "1_000"),
        ("0x10", 0, "0x10"),
        ("1 2", 0, "1 2"),
    ])
    def test_rejects_non_integers(self, text, index, token):
        with pytest.raises(ParseError) as exc:
            parse_program(text)
        assert exc.value.index == index
        assert exc.value.token == token

    def test_error_message(self):
        with pytest.raises(ParseError, match="Element 2: invalid integer 'abc'"):
            parse_program("1,2,abc")


class TestLoadFormat:

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "prog.txt"
        path.write_text("3,0,4,0,99\n", encoding="utf-8")
        assert load_program(path) == [3, 0, 4, 0, 99]
        assert load_program(str(path)) == [3, 0, 4, 0, 99]

    def test_format(self):
        assert format_program([1, -2, 3]) == "1,-2,3"
        text = "109,1,204,-1,1001,100,1,100,1008,100,16,101,1006,101,0,99"
        assert format_program(parse_program(text)) == text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
