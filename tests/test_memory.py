"""
Memory Tests for the Intcode VM.

Sparse default-zero memory, watchpoints and snapshot diffing.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode.memory import Memory


class TestReadWrite:

    def test_load_places_program_at_zero(self):
        mem = Memory([5, 6, 7])
        assert [mem.read(a) for a in range(3)] == [5, 6, 7]
        assert len(mem) == 3

    def test_unwritten_reads_zero(self):
        mem = Memory([1, 2, 3])
        assert mem.read(3) == 0
        assert mem.read(1_000_000) == 0
        assert mem.read(-5) == 0

    def test_read_does_not_materialize(self):
        mem = Memory([1])
        mem.read(500)
        assert len(mem) == 1
        assert 500 not in mem

    def test_write_far_address(self):
        mem = Memory()
        mem.write(10 ** 12, 42)
        assert mem.read(10 ** 12) == 42
        assert mem.addresses() == [10 ** 12]

    def test_big_values(self):
        mem = Memory()
        mem.write(0, 2 ** 100)
        assert mem.read(0) == 2 ** 100

    def test_load_at_base(self):
        mem = Memory()
        mem.load([9, 8], base=100)
        assert mem.addresses() == [100, 101]

    def test_copy_is_independent(self):
        mem = Memory([1, 2])
        clone = mem.copy()
        clone.write(0, 99)
        assert mem.read(0) == 1
        assert clone.read(0) == 99


class TestWatchpoints:

    def test_watchpoint_sees_old_and_new(self):
        mem = Memory([1, 2])
        seen = []
        mem.add_watchpoint(1, lambda a, old, new: seen.append((a, old, new)))
        mem.write(1, 20)
        mem.write(0, 5)
        assert seen == [(1, 2, 20)]

    def test_watchpoint_fresh_cell_old_is_zero(self):
        mem = Memory()
        seen = []
        mem.add_watchpoint(50, lambda a, old, new: seen.append(old))
        mem.write(50, 3)
        assert seen == [0]

    def test_remove_single_callback(self):
        mem = Memory()
        hits = []
        a = lambda *args: hits.append('a')
        b = lambda *args: hits.append('b')
        mem.add_watchpoint(0, a)
        mem.add_watchpoint(0, b)
        mem.remove_watchpoint(0, a)
        mem.write(0, 1)
        assert hits == ['b']

    def test_remove_all(self):
        mem = Memory()
        hits = []
        mem.add_watchpoint(0, lambda *args: hits.append(1))
        mem.remove_watchpoint(0)
        mem.write(0, 1)
        assert hits == []

    def test_load_bypasses_watchpoints(self):
        mem = Memory()
        hits = []
        mem.add_watchpoint(0, lambda *args: hits.append(1))
        mem.load([7])
        assert hits == []


class TestSnapshots:

    def test_diff_reports_changes(self):
        mem = Memory([1, 2, 3])
        before = mem.snapshot()
        mem.write(1, 20)
        mem.write(10, 5)
        assert Memory.diff_snapshots(before, mem.snapshot()) == {1: (2, 20), 10: (0, 5)}

    def test_zero_write_to_fresh_cell_is_not_a_change(self):
        mem = Memory([1])
        before = mem.snapshot()
        mem.write(7, 0)
        assert Memory.diff_snapshots(before, mem.snapshot()) == {}

    def test_dump(self):
        mem = Memory([1, 2, 3])
        lines = mem.dump(0, length=4, width=2).split('\n')
        assert len(lines) == 2
        assert lines[0].split() == ['0:', '1', '2']
        assert lines[1].split() == ['2:', '3', '0']


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
