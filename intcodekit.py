#!/usr/bin/env python3
"""
intcodekit — Intcode Toolkit
============================

One CLI for running and inspecting Intcode programs:
    intcodekit run     — Run a program, print its outputs
    intcodekit disasm  — Disassemble a program image
    intcodekit info    — Program summary (size, md5, opcode histogram)

Usage:
    python intcodekit.py <command> [options]
    python intcodekit.py --help
    python intcodekit.py <command> --help

Examples:
    python intcodekit.py run day09.txt -i 1
    python intcodekit.py run day02.txt --patch 1=12 --patch 2=2 --dump 0
    python intcodekit.py run adventure.txt --ascii --input-file moves.txt
    python intcodekit.py disasm day05.txt --range 0-40
    python intcodekit.py info day09.txt
"""

import argparse
import hashlib
import logging
import os
import sys
from collections import Counter
from pathlib import Path

# Allow running from project root or as module
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from intcode import __version__
from intcode.config import InputPolicy, MachineConfig
from intcode.decoder import OPCODES, decode_word
from intcode.disassembler import disassemble
from intcode.errors import IntcodeError, UnknownOpcodeError, UnknownParameterModeError
from intcode.log_setup import setup_logging
from intcode.machine import IntcodeMachine, StopReason
from intcode.program import load_program, parse_program

log = logging.getLogger("intcode.cli")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="intcodekit",
        description="Intcode Toolkit — run, disassemble and inspect Intcode programs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""commands:
  run        Run a program and print its outputs
  disasm     Disassemble a program to mnemonics
  info       Summarize a program file
""",
    )
    parser.add_argument("--version", action="version", version=f"intcodekit {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show DEBUG log records on the console")
    parser.add_argument("--log-dir", default=None,
                        help="Also write a full DEBUG log file into this directory")
    sub = parser.add_subparsers(dest="command", metavar="command")

    # ── run ──────────────────────────────────────────────────────────────
    p_run = sub.add_parser("run", help="Run a program and print its outputs")
    p_run.add_argument("input", help="Program file (comma-separated integers)")
    p_run.add_argument("-i", "--in", dest="inputs", type=int, action="append", default=[],
                       help="Queue an input value (repeatable)")
    p_run.add_argument("--input-file", default=None,
                       help="Queue inputs from a file (comma-separated integers, "
                            "or text with --ascii)")
    p_run.add_argument("--ascii", action="store_true",
                       help="Treat input file as text and print outputs < 128 as characters")
    p_run.add_argument("--patch", action="append", default=[], metavar="ADDR=VALUE",
                       help="Write VALUE at ADDR before running (repeatable)")
    p_run.add_argument("--dump", type=int, action="append", default=[], metavar="ADDR",
                       help="Print memory at ADDR after the run (repeatable)")
    p_run.add_argument("--max-steps", type=int, default=None,
                       help="Stop after this many instructions")
    p_run.add_argument("--trace", action="store_true",
                       help="Print every executed instruction to stderr")
    p_run.add_argument("--suspend-on-input", action="store_true",
                       help="Stop cleanly instead of failing when input runs out")

    # ── disasm ───────────────────────────────────────────────────────────
    p_dis = sub.add_parser("disasm", help="Disassemble a program")
    p_dis.add_argument("input", help="Program file")
    p_dis.add_argument("--range", help="Address range START-END, e.g. 0-40")
    p_dis.add_argument("-o", "--output", help="Output file (default: stdout)")

    # ── info ─────────────────────────────────────────────────────────────
    p_info = sub.add_parser("info", help="Summarize a program file")
    p_info.add_argument("input", help="Program file")

    # ── Parse and dispatch ───────────────────────────────────────────────
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    setup_logging(
        "intcode",
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
        log_dir=Path(args.log_dir) if args.log_dir else None,
    )

    try:
        return COMMANDS[args.command](args)
    except (IntcodeError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND IMPLEMENTATIONS
# ═════════════════════════════════════════════════════════════════════════════

# ── run ──────────────────────────────────────────────────────────────────
def cmd_run(args):
    config = MachineConfig(
        input_policy=InputPolicy.SUSPEND if args.suspend_on_input else InputPolicy.FAIL,
        trace=args.trace,
        max_steps=args.max_steps,
    )
    machine = IntcodeMachine(load_program(args.input), config)

    for item in args.patch:
        addr, value = _parse_patch(item)
        machine.write_at(addr, value)

    if args.input_file:
        text = Path(args.input_file).read_text(encoding="utf-8")
        if args.ascii:
            machine.submit_inputs(ord(ch) for ch in text)
        else:
            machine.submit_inputs(parse_program(text))
    machine.submit_inputs(args.inputs)

    # A fatal error propagates to main(); whatever ran before it still gets printed
    text_out = []
    try:
        while True:
            result = machine.run()
            if result.reason is not StopReason.OUTPUT:
                break
            if args.ascii and 0 <= result.value < 128:
                text_out.append(chr(result.value))
            else:
                if text_out:
                    sys.stdout.write("".join(text_out))
                    text_out = []
                print(result.value)
    finally:
        if text_out:
            sys.stdout.write("".join(text_out))
            sys.stdout.flush()
        if args.trace:
            for line in machine.trace_output:
                print(line, file=sys.stderr)

    for addr in args.dump:
        print(f"[{addr}] = {machine.read_at(addr)}")

    if result.reason is StopReason.AWAITING_INPUT:
        print(f"Waiting for input at {machine.ip} after {machine.steps} steps",
              file=sys.stderr)
        return 2
    if result.reason is StopReason.TIMEOUT:
        print(f"Step limit reached at {machine.ip} after {machine.steps} steps",
              file=sys.stderr)
        return 3
    log.info("Halted after %d steps", machine.steps)
    return 0


# ── disasm ───────────────────────────────────────────────────────────────
def cmd_disasm(args):
    values = load_program(args.input)

    start, end = 0, len(values)
    if args.range:
        start, end = _parse_range(args.range, len(values))

    output = "\n".join(disassemble(values, start, end))
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output + "\n")
        print(f"Disassembled {end - start} words -> {args.output}")
    else:
        print(output)
    return 0


# ── info ─────────────────────────────────────────────────────────────────
def cmd_info(args):
    raw = Path(args.input).read_bytes()
    values = parse_program(raw.decode("utf-8"))

    print(f"File:     {args.input}")
    print(f"Size:     {len(values)} words")
    print(f"MD5:      {hashlib.md5(raw).hexdigest()}")
    print(f"Range:    {min(values)} .. {max(values)}")

    histogram = _opcode_histogram(values)
    print("Opcodes (linear sweep):")
    for mnem, count in histogram.most_common():
        print(f"  {mnem:5s} {count}")
    return 0


COMMANDS = {
    "run": cmd_run,
    "disasm": cmd_disasm,
    "info": cmd_info,
}


# ═════════════════════════════════════════════════════════════════════════════
# HELPER FUNCTIONS
# ═════════════════════════════════════════════════════════════════════════════

def _parse_patch(item):
    """'ADDR=VALUE' -> (addr, value)."""
    addr, sep, value = item.partition("=")
    if not sep:
        raise ValueError(f"--patch expects ADDR=VALUE, got '{item}'")
    return int(addr), int(value)


def _parse_range(text, size):
    """'START-END' or 'START' -> (start, end), clamped to the image."""
    parts = text.split("-", 1)
    start = int(parts[0])
    end = int(parts[1]) if len(parts) > 1 and parts[1] else size
    return max(0, start), min(size, end)


def _opcode_histogram(values):
    """Count mnemonics seen by a linear sweep; undecodable words are DATA."""
    counts = Counter()
    addr = 0
    while addr < len(values):
        try:
            opcode, modes = decode_word(values[addr], addr)
        except (UnknownOpcodeError, UnknownParameterModeError):
            counts["DATA"] += 1
            addr += 1
            continue
        counts[OPCODES[opcode][0]] += 1
        addr += 1 + len(modes)
    return counts


if __name__ == "__main__":
    sys.exit(main())
