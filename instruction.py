"""
IntCode Instruction Decoder
============================
Turns one raw memory word into a decoded instruction: an opcode plus one
addressing mode per operand slot.

Word layout (decimal digits, least significant first):

    ...  E  D  C  B A
             |  |  |  +-+-- opcode        (word mod 100)
             |  |  +------- mode of operand 1
             |  +---------- mode of operand 2
             +------------- mode of operand 3

Decoding is pure: nothing but the supplied word is inspected.  New opcodes
are registered by extending `Opcode` and `OPERAND_COUNTS`; new addressing
modes by extending `ParameterMode`.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

# ---------------------------------------------------------------------------
#  Opcodes and addressing modes
# ---------------------------------------------------------------------------

class Opcode(IntEnum):
    ADD = 1
    MULTIPLY = 2
    HALT = 99


class ParameterMode(IntEnum):
    POSITION = 0   # operand is an address
    IMMEDIATE = 1  # operand is the value


# Operand slots per opcode; instruction size is 1 + this.
OPERAND_COUNTS = {
    Opcode.ADD:      3,
    Opcode.MULTIPLY: 3,
    Opcode.HALT:     0,
}

# Operand slot an opcode writes to.  Only position mode can name it.
DEST_SLOTS = {
    Opcode.ADD:      3,
    Opcode.MULTIPLY: 3,
}

MNEMONICS = {
    Opcode.ADD:      "ADD",
    Opcode.MULTIPLY: "MUL",
    Opcode.HALT:     "HALT",
}

# ---------------------------------------------------------------------------
#  Errors
# ---------------------------------------------------------------------------

class DecodeError(ValueError):
    """A word that is not a valid instruction."""

    def __init__(self, code: int, address: Optional[int], message: str):
        self.code = code
        self.address = address
        where = f" at {address}" if address is not None else ""
        super().__init__(f"{message}: {code}{where}")


class UnknownOpcodeError(DecodeError):
    def __init__(self, code: int, address: Optional[int] = None):
        super().__init__(code, address, "Unknown opcode")


class UnknownModeError(DecodeError):
    def __init__(self, code: int, digit: int, slot: int,
                 address: Optional[int] = None):
        self.digit = digit
        self.slot = slot
        super().__init__(code, address,
                         f"Unknown parameter mode {digit} for operand {slot}")

# ---------------------------------------------------------------------------
#  Decoded instruction
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Instruction:
    """A decoded instruction.  `modes` has one entry per operand slot."""
    opcode: Opcode
    modes: tuple[ParameterMode, ...] = ()

    @property
    def size(self) -> int:
        """Words consumed: opcode word plus operands."""
        return 1 + len(self.modes)

    @property
    def writable(self) -> bool:
        """False if the destination operand is not in position mode."""
        slot = DEST_SLOTS.get(self.opcode)
        return slot is None or self.modes[slot - 1] == ParameterMode.POSITION

    @property
    def mnemonic(self) -> str:
        return MNEMONICS[self.opcode]

    def __str__(self) -> str:
        return f"{self.opcode.name.capitalize()}({self.opcode.value})"


def opcode_of(word: int) -> int:
    """Low two decimal digits of a word.

    Negative words keep their sign (truncating remainder), so they never
    land on a valid opcode.
    """
    if word < 0:
        return -(-word % 100)
    return word % 100


def mode_digit(word: int, slot: int) -> int:
    """Addressing-mode digit for operand *slot* (1-based)."""
    return (abs(word) // 100 // 10 ** (slot - 1)) % 10


def decode(word: int, address: Optional[int] = None) -> Instruction:
    """Decode *word* into an `Instruction`.

    *address* is only used to annotate errors.  Raises
    `UnknownOpcodeError` or `UnknownModeError` (both `DecodeError`).
    """
    try:
        opcode = Opcode(opcode_of(word))
    except ValueError:
        raise UnknownOpcodeError(word, address) from None

    modes = []
    for slot in range(1, OPERAND_COUNTS[opcode] + 1):
        digit = mode_digit(word, slot)
        try:
            modes.append(ParameterMode(digit))
        except ValueError:
            raise UnknownModeError(word, digit, slot, address) from None
    return Instruction(opcode, tuple(modes))
