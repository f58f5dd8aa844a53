"""
Noun/verb patching and brute-force input search.

Cells 1 and 2 of an IntCode program are its inputs ("noun" and "verb");
cell 0 holds the output after HALT.  Every run works on its own copy of
the initial image so runs never see each other's writes.
"""

from __future__ import annotations
import logging
from typing import Optional

from intcode import IntcodeVM, IntcodeError, EndOfMemoryError

NOUN_ADDR = 1
VERB_ADDR = 2
OUTPUT_ADDR = 0


class SearchError(Exception):
    def __init__(self, target: int, limit: int):
        self.target = target
        self.limit = limit
        super().__init__(f"No inputs in 0..{limit} produce {target}")


def patched(memory: list[int], noun: int, verb: int) -> list[int]:
    """Copy of *memory* with the noun and verb cells replaced."""
    if len(memory) <= VERB_ADDR:
        raise EndOfMemoryError(VERB_ADDR)
    image = list(memory)
    image[NOUN_ADDR] = noun
    image[VERB_ADDR] = verb
    return image


def run_with_inputs(memory: list[int], noun: int, verb: int,
                    max_steps: Optional[int] = None) -> int:
    """Run a patched copy of *memory*; return the output cell."""
    vm = IntcodeVM(patched(memory, noun, verb))
    vm.run(max_steps)
    return vm.mem[OUTPUT_ADDR]


def answer(noun: int, verb: int) -> int:
    return 100 * noun + verb


def find_inputs(memory: list[int], target: int, limit: int = 99,
                max_steps: Optional[int] = None) -> tuple[int, int]:
    """Find (noun, verb) in 0..limit whose run leaves *target* in cell 0.

    Pairs that fault or do not halt within *max_steps* are skipped.
    """
    for noun in range(limit + 1):
        logging.debug("search: noun=%d", noun)
        for verb in range(limit + 1):
            vm = IntcodeVM(patched(memory, noun, verb))
            try:
                vm.run(max_steps)
            except IntcodeError as e:
                logging.debug("search: (%d, %d) faulted: %s", noun, verb, e)
                continue
            if not vm.halted:
                logging.debug("search: (%d, %d) exceeded %d steps",
                              noun, verb, max_steps)
                continue
            if vm.mem[OUTPUT_ADDR] == target:
                logging.info("search: found noun=%d verb=%d", noun, verb)
                return noun, verb
    raise SearchError(target, limit)
