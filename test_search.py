"""
Tests for noun/verb patching and the brute-force input search.
"""

import unittest

import pytest

from intcode import EndOfMemoryError, run
from search import (SearchError, patched, run_with_inputs, find_inputs,
                    answer)

# mem[0] = mem[noun] + mem[verb]; cells 5..8 form a small lookup table.
TABLE_PROGRAM = [1, 0, 0, 0, 99, 10, 20, 30, 40]

SAMPLE_PROGRAM = [1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50]


class TestPatch(unittest.TestCase):
    def test_patched_copies(self):
        image = list(SAMPLE_PROGRAM)
        out = patched(image, 12, 2)
        self.assertEqual(out[1:3], [12, 2])
        self.assertEqual(image, SAMPLE_PROGRAM)
        self.assertIsNot(out, image)

    def test_patched_too_short(self):
        with self.assertRaises(EndOfMemoryError):
            patched([1, 0], 0, 0)

    def test_run_with_inputs(self):
        self.assertEqual(run_with_inputs(SAMPLE_PROGRAM, 9, 10), 3500)
        self.assertEqual(run_with_inputs(TABLE_PROGRAM, 5, 8), 50)

    def test_answer(self):
        self.assertEqual(answer(12, 2), 1202)


class TestFindInputs(unittest.TestCase):
    def test_finds_first_pair(self):
        image = list(TABLE_PROGRAM)
        self.assertEqual(find_inputs(image, 70, limit=9), (7, 8))
        self.assertEqual(image, TABLE_PROGRAM)

    def test_faulting_pairs_skipped(self):
        # indexes past the table fault and must not abort the search
        self.assertEqual(find_inputs(TABLE_PROGRAM, 80, limit=20), (8, 8))

    def test_not_found(self):
        with self.assertRaises(SearchError) as cm:
            find_inputs(TABLE_PROGRAM, 1000, limit=9)
        self.assertEqual(cm.exception.target, 1000)

    def test_cloned_runs_match_single_run(self):
        image = list(SAMPLE_PROGRAM)
        a = run(patched(image, 9, 10))
        b = run(patched(image, 9, 10))
        self.assertEqual(a, b)
        self.assertEqual(run_with_inputs(image, 9, 10), a[0])
        self.assertEqual(image, SAMPLE_PROGRAM)


@pytest.mark.slow
class TestFullSearch(unittest.TestCase):
    def test_full_range(self):
        image = [1, 0, 0, 0, 99] + list(range(5, 100))
        noun, verb = find_inputs(image, 197)
        self.assertEqual(run_with_inputs(image, noun, verb), 197)


if __name__ == "__main__":
    unittest.main()
