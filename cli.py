#!/usr/bin/env python3
"""
IntCode Monitor / CLI
======================
Command-line front end for the IntCode interpreter.

Provides:
  - Running a program file, optionally patching noun/verb inputs
  - Brute-force search for the inputs that produce a target output
  - Disassembly listings
  - An interactive monitor (step / run / breakpoints / memory inspection)

Usage:
  python cli.py run FILE [--noun N --verb V] [--dump]
  python cli.py search FILE --target T [--limit L]
  python cli.py disasm FILE
  python cli.py monitor [FILE]

Environment:
  INTCODE_LOG_LEVEL   default for --log-level (default: WARNING)
  INTCODE_MAX_STEPS   default for --max-steps (default: unbounded)
"""

from __future__ import annotations
import argparse
import cmd
import logging
import os
import readline
import shlex
import sys
from typing import Iterator, Optional

from instruction import ParameterMode, DecodeError, decode
from intcode import IntcodeVM, IntcodeError
from loader import (ProgramFormatError, load_program, parse_program,
                    format_program)
from search import (SearchError, patched, find_inputs, answer,
                    NOUN_ADDR, VERB_ADDR, OUTPUT_ADDR)

# ---------------------------------------------------------------------------
#  Disassembler
# ---------------------------------------------------------------------------

def _operand_text(word: int, mode: ParameterMode) -> str:
    if mode == ParameterMode.IMMEDIATE:
        return f"#{word}"
    return f"[{word}]"


def disasm_one(mem: list[int], addr: int) -> tuple[str, int]:
    """Disassemble one instruction at `addr`. Returns (text, word_count).

    Words that do not decode, whose operands run off the end of memory,
    or that name an immediate destination are shown as DATA.
    """
    word = mem[addr]
    try:
        inst = decode(word, addr)
    except DecodeError:
        return f"DATA {word}", 1
    if addr + inst.size > len(mem) or not inst.writable:
        return f"DATA {word}", 1

    ops = [_operand_text(mem[addr + slot], mode)
           for slot, mode in enumerate(inst.modes, start=1)]
    if ops:
        return f"{inst.mnemonic} {', '.join(ops)}", inst.size
    return inst.mnemonic, inst.size


def disassemble(mem: list[int], start: int = 0,
                count: Optional[int] = None) -> Iterator[tuple[int, str, int]]:
    """Linear sweep from *start*: yields (address, text, word_count)."""
    addr = start
    done = 0
    while 0 <= addr < len(mem) and (count is None or done < count):
        text, size = disasm_one(mem, addr)
        yield addr, text, size
        addr += size
        done += 1

# ---------------------------------------------------------------------------
#  Monitor
# ---------------------------------------------------------------------------

class IntcodeCLI(cmd.Cmd):
    """Interactive monitor for the IntCode VM."""

    intro = (
        "\n"
        "IntCode Monitor\n"
        "  Type 'help' for commands.  'quit' to exit.\n"
    )
    prompt = "IC> "

    def __init__(self, program: Optional[list[int]] = None,
                 max_steps: Optional[int] = None):
        super().__init__()
        self.image: list[int] = list(program) if program else []
        self.vm = IntcodeVM(list(self.image))
        self.max_steps = max_steps
        self.breakpoints: set[int] = set()

    # -- Parsing helpers --

    def _parse_addr(self, s: str) -> int:
        """Parse an address (decimal, 0x hex, or 'ip')."""
        s = s.strip().lower()
        if s == "ip":
            return self.vm.ip
        return int(s, 0)

    def _parse_int(self, s: str) -> int:
        return int(s.strip(), 0)

    def _trace(self, addr: int):
        if not 0 <= addr < self.vm.mem_size:
            return
        text, _ = disasm_one(self.vm.mem, addr)
        print(f"  {addr:6d}: {text}")

    # ================================================================
    #  Commands
    # ================================================================

    # -- Loading --

    def do_load(self, arg):
        """Load a program file: load <file>
        Or inline:  load -e "1,0,0,0,99" """
        parts = shlex.split(arg)
        if not parts:
            print("Usage: load <file>  OR  load -e \"program\"")
            return
        try:
            if parts[0] == "-e":
                program = parse_program(parts[1] if len(parts) > 1 else "")
            else:
                program = load_program(parts[0])
        except (OSError, ProgramFormatError) as e:
            print(f"Error: {e}")
            return
        self.image = program
        self.vm.reset(list(program))
        print(f"Loaded {len(program)} words.")

    def do_patch(self, arg):
        """Set noun and verb (cells 1 and 2): patch <noun> <verb>"""
        parts = shlex.split(arg)
        if len(parts) != 2:
            print("Usage: patch <noun> <verb>")
            return
        try:
            noun, verb = self._parse_int(parts[0]), self._parse_int(parts[1])
        except ValueError:
            print("Usage: patch <noun> <verb>  (integers)")
            return
        try:
            self.vm.mem = patched(self.vm.mem, noun, verb)
        except IntcodeError as e:
            print(e)
            return
        print(f"  noun={self.vm.mem[1]} verb={self.vm.mem[2]}")

    def do_reset(self, arg):
        """Restore the loaded program and rewind IP to 0."""
        self.vm.reset(list(self.image))
        print("VM reset.")

    # -- Execution --

    def do_step(self, arg):
        """Step N instructions: step [count]"""
        try:
            count = self._parse_int(arg) if arg.strip() else 1
        except ValueError:
            print("Usage: step [count]")
            return
        for _ in range(count):
            if self.vm.halted:
                print("VM is halted.")
                break
            addr = self.vm.ip
            try:
                self._trace(addr)
                self.vm.step()
            except IntcodeError as e:
                print(e)
                break
            logging.debug("step: ip %d -> %d", addr, self.vm.ip)

    def do_run(self, arg):
        """Run until halt/breakpoint/fault: run [max_steps]"""
        try:
            max_steps = self._parse_int(arg) if arg.strip() else self.max_steps
        except ValueError:
            print("Usage: run [max_steps]")
            return
        ran = 0
        while not self.vm.halted:
            if max_steps is not None and ran >= max_steps:
                print(f"Stopped after {ran} steps.")
                return
            if ran and self.vm.ip in self.breakpoints:
                print(f"Breakpoint hit at {self.vm.ip}")
                return
            try:
                self.vm.step()
            except IntcodeError as e:
                print(e)
                return
            ran += 1
        print(f"VM halted after {ran} steps.  [0] = {self.vm.mem[OUTPUT_ADDR]}")

    def do_continue(self, arg):
        """Alias for 'run'."""
        self.do_run(arg)
    do_c = do_continue

    # -- Breakpoints --

    def do_bp(self, arg):
        """Set breakpoint: bp <address>  (no argument lists them)"""
        if not arg.strip():
            if self.breakpoints:
                print("Breakpoints:")
                for a in sorted(self.breakpoints):
                    print(f"  {a}")
            else:
                print("No breakpoints set.")
            return
        try:
            addr = self._parse_addr(arg)
        except ValueError:
            print("Usage: bp <address>")
            return
        self.breakpoints.add(addr)
        print(f"Breakpoint set at {addr}")

    def do_bpd(self, arg):
        """Delete breakpoint: bpd <address|all>"""
        if arg.strip().lower() == "all":
            self.breakpoints.clear()
            print("All breakpoints cleared.")
            return
        try:
            addr = self._parse_addr(arg)
        except ValueError:
            print("Usage: bpd <address|all>")
            return
        self.breakpoints.discard(addr)
        print(f"Breakpoint at {addr} removed.")

    # -- Inspection --

    def do_status(self, arg):
        """Show VM status."""
        print(self.vm.dump_state())

    def do_mem(self, arg):
        """Dump memory: mem [address] [count]
        Defaults to the whole image from 0, eight words per row."""
        parts = shlex.split(arg)
        try:
            addr = self._parse_addr(parts[0]) if parts else 0
            count = self._parse_int(parts[1]) if len(parts) > 1 else self.vm.mem_size
        except ValueError:
            addr = -1
        if addr < 0:
            print("Usage: mem [address>=0] [count]")
            return
        end = min(addr + count, self.vm.mem_size)
        for row_start in range(addr, end, 8):
            row = self.vm.mem[row_start:min(row_start + 8, end)]
            print(f"  {row_start:6d}: " + " ".join(f"{v:>8d}" for v in row))

    def do_poke(self, arg):
        """Set memory words: poke <address> <value> [value] ..."""
        parts = shlex.split(arg)
        if len(parts) < 2:
            print("Usage: poke <address> <value...>")
            return
        try:
            addr = self._parse_addr(parts[0])
            values = [self._parse_int(tok) for tok in parts[1:]]
        except ValueError:
            print("Usage: poke <address> <value...>  (integers)")
            return
        try:
            for i, v in enumerate(values):
                self.vm.mem_write(addr + i, v)
        except IntcodeError as e:
            print(e)
            return
        print(f"  Wrote {len(values)} words at {addr}")

    def do_disasm(self, arg):
        """Disassemble: disasm [address] [count]
        Defaults to IP, 16 instructions."""
        parts = shlex.split(arg)
        try:
            addr = self._parse_addr(parts[0]) if parts else self.vm.ip
            count = self._parse_int(parts[1]) if len(parts) > 1 else 16
        except ValueError:
            print("Usage: disasm [address] [count]")
            return
        for a, text, size in disassemble(self.vm.mem, addr, count):
            raw = ",".join(str(v) for v in self.vm.mem[a:a + size])
            marker = ">>>" if a == self.vm.ip else "   "
            print(f"  {marker} {a:6d}: {raw:<24s} {text}")

    # -- Misc --

    def do_quit(self, arg):
        """Exit the monitor."""
        print("Goodbye.")
        return True
    do_exit = do_quit
    do_q = do_quit

    def do_EOF(self, arg):
        print()
        return self.do_quit(arg)

    def default(self, line):
        print(f"Unknown command: {line.split()[0]!r}. Type 'help' for available commands.")

    def emptyline(self):
        pass

# ---------------------------------------------------------------------------
#  Subcommands
# ---------------------------------------------------------------------------

def cmd_run(args) -> int:
    vm = IntcodeVM(load_program(args.file))
    if args.noun is not None:
        vm.mem_write(NOUN_ADDR, args.noun)
    if args.verb is not None:
        vm.mem_write(VERB_ADDR, args.verb)
    vm.run(args.max_steps)
    if not vm.halted:
        print(f"Error: no HALT within {args.max_steps} steps", file=sys.stderr)
        return 1
    logging.info("halted at %d after %d steps", vm.ip, vm.steps)
    if args.dump:
        print(format_program(vm.mem))
    else:
        print(vm.mem[OUTPUT_ADDR])
    return 0


def cmd_search(args) -> int:
    memory = load_program(args.file)
    noun, verb = find_inputs(memory, args.target, limit=args.limit,
                             max_steps=args.max_steps)
    print(f"noun {noun} verb {verb} answer {answer(noun, verb)}")
    return 0


def cmd_disasm(args) -> int:
    memory = load_program(args.file)
    for addr, text, _ in disassemble(memory):
        print(f"  {addr:6d}: {text}")
    return 0


def cmd_monitor(args) -> int:
    program = load_program(args.file) if args.file else None
    cli = IntcodeCLI(program, max_steps=args.max_steps)
    try:
        cli.cmdloop()
    except KeyboardInterrupt:
        print("\nInterrupted. Goodbye.")
    return 0

# ---------------------------------------------------------------------------
#  Main
# ---------------------------------------------------------------------------

def _env_int(name: str) -> Optional[int]:
    val = os.environ.get(name)
    return int(val) if val else None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intcode",
        description="IntCode interpreter and monitor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Examples:\n"
               "  python cli.py run day2.txt --noun 12 --verb 2\n"
               "  python cli.py search day2.txt --target 19690720\n"
               "  python cli.py disasm day2.txt\n"
               "  python cli.py monitor day2.txt\n"
    )
    parser.add_argument("--log-level",
                        default=os.environ.get("INTCODE_LOG_LEVEL", "WARNING"),
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: $INTCODE_LOG_LEVEL or WARNING)")
    parser.add_argument("--max-steps", type=int,
                        default=_env_int("INTCODE_MAX_STEPS"), metavar="N",
                        help="Stop a run after N instructions "
                             "(default: $INTCODE_MAX_STEPS or unbounded)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="Run a program and print cell 0")
    p_run.add_argument("file", help="Program file (comma-separated integers)")
    p_run.add_argument("--noun", type=int, default=None,
                       help="Value for cell 1")
    p_run.add_argument("--verb", type=int, default=None,
                       help="Value for cell 2")
    p_run.add_argument("--dump", action="store_true",
                       help="Print the whole final memory")
    p_run.set_defaults(func=cmd_run)

    p_search = sub.add_parser("search", help="Find noun/verb for a target output")
    p_search.add_argument("file", help="Program file")
    p_search.add_argument("--target", type=int, required=True,
                          help="Required value of cell 0")
    p_search.add_argument("--limit", type=int, default=99,
                          help="Largest noun/verb to try (default: 99)")
    p_search.set_defaults(func=cmd_search)

    p_dis = sub.add_parser("disasm", help="Print a disassembly listing")
    p_dis.add_argument("file", help="Program file")
    p_dis.set_defaults(func=cmd_disasm)

    p_mon = sub.add_parser("monitor", help="Interactive monitor")
    p_mon.add_argument("file", nargs="?", default=None, help="Program file")
    p_mon.set_defaults(func=cmd_monitor)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format="%(levelname)s: %(message)s")
    try:
        return args.func(args)
    except (OSError, ProgramFormatError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (IntcodeError, SearchError) as e:
        print(e, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
