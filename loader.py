"""
IntCode Program Loader
=======================
Reads IntCode programs from text.  A program is a single line of
comma-separated signed integers, e.g. ``1,9,10,3,2,3,11,0,99,30,40,50``.

Usage:
  from loader import load_program
  memory = load_program("input/day2.txt")
"""

from __future__ import annotations
import re
from pathlib import Path

from intcode import SIGN64

_INT_RE = re.compile(r"[+-]?\d+")


class ProgramFormatError(ValueError):
    def __init__(self, msg: str, column: int = 0):
        self.column = column
        where = f"Column {column}: " if column else ""
        super().__init__(f"{where}{msg}")


def read_input(path: str | Path) -> list[str]:
    """Return the lines of a text file without line terminators."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().splitlines()
    except UnicodeDecodeError as e:
        raise ProgramFormatError(f"'{path}' is not a text file ({e.reason})") from e


def read_simple_input(path: str | Path) -> str:
    """Return the first line of a text file."""
    lines = read_input(path)
    if not lines:
        raise ProgramFormatError(f"No first line in input '{path}'")
    return lines[0]


def parse_program(text: str) -> list[int]:
    """Parse comma-separated integers into a fresh memory list.

    Whitespace around values and one trailing comma are tolerated.
    """
    lead = len(text) - len(text.lstrip())
    text = text.strip()
    if not text:
        raise ProgramFormatError("Empty program")
    tokens = text.split(",")
    if tokens[-1].strip() == "":
        tokens.pop()

    memory: list[int] = []
    column = 1 + lead
    for tok in tokens:
        s = tok.strip()
        at = column + len(tok) - len(tok.lstrip())
        if not _INT_RE.fullmatch(s):
            raise ProgramFormatError(f"Invalid value {s!r}", at)
        val = int(s)
        if not -SIGN64 <= val < SIGN64:
            raise ProgramFormatError(f"Value {val} out of 64-bit range", at)
        memory.append(val)
        column += len(tok) + 1
    return memory


def load_program(path: str | Path) -> list[int]:
    """Read the first line of *path* and parse it as a program."""
    return parse_program(read_simple_input(path))


def format_program(memory: list[int]) -> str:
    return ",".join(str(v) for v in memory)
