"""
IntCode Interpreter
====================
A fetch/decode/execute interpreter for IntCode programs.  Memory is a flat
list of signed 64-bit integers holding both instructions and data; the
caller owns it and the interpreter mutates it in place.

The loop mirrors the hardware view: read the word at IP, decode it
(see instruction.py), resolve operands per addressing mode, execute, then
advance IP by the instruction size.  HALT stops without advancing.

Usage:
  from intcode import run
  memory = run([1, 0, 0, 0, 99])      # -> [2, 0, 0, 0, 99]
"""

from __future__ import annotations
import operator
from typing import Callable, Optional

from instruction import (Instruction, Opcode, ParameterMode, DecodeError,
                         DEST_SLOTS, decode)

# ---------------------------------------------------------------------------
#  Constants
# ---------------------------------------------------------------------------

MASK64 = (1 << 64) - 1
SIGN64 = 1 << 63

# ---------------------------------------------------------------------------
#  Helpers
# ---------------------------------------------------------------------------

def u64(v: int) -> int:
    """Mask to unsigned 64 bits."""
    return v & MASK64

def s64(v: int) -> int:
    """Wrap *v* into signed 64-bit two's complement range."""
    v = u64(v)
    return v - (1 << 64) if v >= SIGN64 else v

# ---------------------------------------------------------------------------
#  Faults
# ---------------------------------------------------------------------------

class IntcodeError(Exception):
    """Base for interpreter faults.  Every fault ends the run."""

    def __init__(self, message: str):
        super().__init__(f"Interpreter error: {message}")


class EndOfMemoryError(IntcodeError):
    """Read or write outside memory.  *address* is the offending index."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Fetch past end of memory ({address})")


class InvalidInstructionError(IntcodeError):
    """Word at *address* is not an executable instruction."""

    def __init__(self, address: int, code: int):
        self.address = address
        self.code = code
        super().__init__(f"Invalid instruction: {code}({address})")


class HaltError(IntcodeError):
    def __init__(self, address: int):
        self.address = address
        super().__init__(f"VM is halted at {address}")

# ---------------------------------------------------------------------------
#  VM
# ---------------------------------------------------------------------------

class IntcodeVM:
    """IntCode virtual machine over a caller-owned memory list."""

    def __init__(self, memory: list[int]):
        self.mem = memory
        self.ip: int = 0
        self.halted: bool = False
        self.steps: int = 0

    @property
    def mem_size(self) -> int:
        return len(self.mem)

    # -- Memory access --

    def _check_addr(self, addr: int):
        if not 0 <= addr < len(self.mem):
            raise EndOfMemoryError(addr)

    def mem_read(self, addr: int) -> int:
        self._check_addr(addr)
        return self.mem[addr]

    def mem_write(self, addr: int, val: int):
        self._check_addr(addr)
        self.mem[addr] = s64(val)

    # -- Operand resolution --

    def fetch_parameter(self, inst_addr: int, slot: int,
                        mode: ParameterMode) -> int:
        """Read value of operand *slot* of the instruction at *inst_addr*."""
        word = self.mem_read(inst_addr + slot)
        if mode == ParameterMode.IMMEDIATE:
            return word
        return self.mem_read(word)

    def fetch_dest_address(self, inst_addr: int, slot: int,
                           mode: ParameterMode) -> int:
        """Address that operand *slot* writes to.

        Only position mode can name a destination; an immediate
        destination makes the whole instruction invalid.
        """
        if mode != ParameterMode.POSITION:
            raise InvalidInstructionError(inst_addr, self.mem[inst_addr])
        dest = self.mem_read(inst_addr + slot)
        self._check_addr(dest)
        return dest

    # =====================================================================
    #  STEP: one fetch/decode/execute cycle
    # =====================================================================

    def fetch_decode(self) -> Instruction:
        """Decode the instruction at IP without executing it."""
        word = self.mem_read(self.ip)
        try:
            return decode(word, self.ip)
        except DecodeError as e:
            raise InvalidInstructionError(self.ip, word) from e

    def step(self) -> Instruction:
        """Execute one instruction and return it."""
        if self.halted:
            raise HaltError(self.ip)

        inst = self.fetch_decode()
        op = inst.opcode
        if   op == Opcode.ADD:      self._exec_arith(inst, operator.add)
        elif op == Opcode.MULTIPLY: self._exec_arith(inst, operator.mul)
        elif op == Opcode.HALT:     self._exec_halt()
        self.steps += 1
        return inst

    # -- Executors --

    def _exec_arith(self, inst: Instruction, fn: Callable[[int, int], int]):
        m1, m2, m3 = inst.modes
        lhs = self.fetch_parameter(self.ip, 1, m1)
        rhs = self.fetch_parameter(self.ip, 2, m2)
        dest = self.fetch_dest_address(self.ip, DEST_SLOTS[inst.opcode], m3)
        self.mem_write(dest, fn(lhs, rhs))
        self.ip += inst.size

    def _exec_halt(self):
        self.halted = True

    # -- Run loop --

    def run(self, max_steps: Optional[int] = None) -> list[int]:
        """Run until HALT and return memory.

        With *max_steps*, return early (not halted) once that many
        instructions have executed.  Faults propagate.
        """
        count = 0
        while not self.halted:
            if max_steps is not None and count >= max_steps:
                break
            self.step()
            count += 1
        return self.mem

    def reset(self, memory: Optional[list[int]] = None):
        """Rewind to IP 0, optionally swapping in a new memory image."""
        if memory is not None:
            self.mem = memory
        self.ip = 0
        self.halted = False
        self.steps = 0

    # -- Debug / introspection --

    def dump_state(self) -> str:
        state = "HALTED" if self.halted else "RUNNING"
        return (f"  IP = {self.ip}  {state}\n"
                f"  Memory: {self.mem_size} words  Steps: {self.steps}")


def run(memory: list[int]) -> list[int]:
    """Run *memory* to HALT in place and return it.

    Raises `EndOfMemoryError` or `InvalidInstructionError` on a fault;
    memory keeps every write made before the faulting instruction.
    """
    return IntcodeVM(memory).run()
