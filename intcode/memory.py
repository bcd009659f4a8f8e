"""
Intcode — Sparse Memory

Memory is conceptually infinite: every address reads as 0 until written.
Only cells that were part of the loaded program or that have been written
occupy storage, so programs can scatter data far past their own image
(relative-base stacks, scratch space) without cost.

Addresses are not range-checked. Negative addresses behave like any other
key; well-formed programs never produce them.
"""

from typing import Callable, Dict, Iterable, List, Optional


class Memory:
    """Sparse integer-addressed memory with default-zero reads.

    Reads never create storage. Write watchpoints fire before the new
    value lands, with the old value (0 for never-written cells).
    """

    def __init__(self, values: Optional[Iterable[int]] = None):
        self._cells: Dict[int, int] = {}

        # Watchpoints: addr -> [callback(addr, old_val, new_val)]
        self._watchpoints: Dict[int, List[Callable]] = {}

        if values is not None:
            self.load(values)

    # --- Core read/write ---

    def read(self, addr: int) -> int:
        """Value at addr, or 0 if never written."""
        return self._cells.get(addr, 0)

    def write(self, addr: int, value: int):
        if addr in self._watchpoints:
            old = self._cells.get(addr, 0)
            for cb in self._watchpoints[addr]:
                cb(addr, old, value)
        self._cells[addr] = value

    # --- Bulk load ---

    def load(self, values: Iterable[int], base: int = 0):
        """Write values at base, base+1, ... Bypasses watchpoints."""
        for i, value in enumerate(values):
            self._cells[base + i] = value

    # --- Introspection ---

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, addr: int) -> bool:
        return addr in self._cells

    def addresses(self) -> List[int]:
        """Materialized addresses in ascending order."""
        return sorted(self._cells)

    def copy(self) -> 'Memory':
        """Independent copy of the cells. Watchpoints are not carried over."""
        clone = Memory()
        clone._cells = dict(self._cells)
        return clone

    # --- Watchpoints ---

    def add_watchpoint(self, addr: int, callback: Callable):
        """Call callback(addr, old_val, new_val) on every write to addr."""
        self._watchpoints.setdefault(addr, []).append(callback)

    def remove_watchpoint(self, addr: int, callback: Optional[Callable] = None):
        """Remove a watchpoint. If callback is None, removes all on that addr."""
        if addr in self._watchpoints:
            if callback is None:
                del self._watchpoints[addr]
            else:
                remaining = [cb for cb in self._watchpoints[addr] if cb != callback]
                if remaining:
                    self._watchpoints[addr] = remaining
                else:
                    del self._watchpoints[addr]

    # --- Snapshots ---

    def snapshot(self) -> Dict[int, int]:
        """Plain dict copy of every materialized cell, for later diffing."""
        return dict(self._cells)

    @staticmethod
    def diff_snapshots(snap_a: Dict[int, int],
                       snap_b: Dict[int, int]) -> Dict[int, tuple]:
        """Compare two snapshots, return {addr: (old, new)} for changes.

        A cell missing from one side counts as 0, so writing 0 to a fresh
        address is not reported as a change.
        """
        changes = {}
        for addr in sorted(set(snap_a) | set(snap_b)):
            old = snap_a.get(addr, 0)
            new = snap_b.get(addr, 0)
            if old != new:
                changes[addr] = (old, new)
        return changes

    # --- Dump ---

    def dump(self, start: int, length: int = 64, width: int = 8) -> str:
        """Decimal dump of [start, start+length), width cells per line."""
        lines = []
        for offset in range(0, length, width):
            addr = start + offset
            count = min(width, length - offset)
            cells = ' '.join(f'{self.read(addr + i):>8d}' for i in range(count))
            lines.append(f'{addr:>6d}: {cells}')
        return '\n'.join(lines)
