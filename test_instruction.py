"""
Tests for the IntCode instruction decoder.
"""

import unittest

from instruction import (Instruction, Opcode, ParameterMode, DecodeError,
                         UnknownOpcodeError, UnknownModeError, decode,
                         opcode_of, mode_digit)

POS = ParameterMode.POSITION
IMM = ParameterMode.IMMEDIATE


class TestDecode(unittest.TestCase):
    def test_add_position(self):
        self.assertEqual(decode(1), Instruction(Opcode.ADD, (POS, POS, POS)))

    def test_multiply_mixed_modes(self):
        # 1002: op 02, operand 1 position, operand 2 immediate, operand 3 position
        self.assertEqual(decode(1002),
                         Instruction(Opcode.MULTIPLY, (POS, IMM, POS)))

    def test_all_immediate(self):
        self.assertEqual(decode(11101),
                         Instruction(Opcode.ADD, (IMM, IMM, IMM)))

    def test_halt_has_no_operands(self):
        inst = decode(99)
        self.assertEqual(inst.opcode, Opcode.HALT)
        self.assertEqual(inst.modes, ())
        self.assertEqual(inst.size, 1)

    def test_halt_ignores_mode_digits(self):
        self.assertEqual(decode(20099), Instruction(Opcode.HALT))
        self.assertEqual(decode(98799), Instruction(Opcode.HALT))

    def test_digits_above_third_mode_ignored(self):
        self.assertEqual(decode(100001), Instruction(Opcode.ADD, (POS, POS, POS)))

    def test_sizes(self):
        self.assertEqual(decode(1).size, 4)
        self.assertEqual(decode(2).size, 4)

    def test_str_and_mnemonic(self):
        self.assertEqual(str(decode(1)), "Add(1)")
        self.assertEqual(str(decode(2)), "Multiply(2)")
        self.assertEqual(str(decode(99)), "Halt(99)")
        self.assertEqual(decode(2).mnemonic, "MUL")

    def test_writable_destination(self):
        self.assertTrue(decode(1101).writable)
        self.assertFalse(decode(10001).writable)
        self.assertFalse(decode(10002).writable)
        self.assertTrue(decode(99).writable)


class TestDecodeErrors(unittest.TestCase):
    def test_unknown_mode_digits(self):
        for slot in (1, 2, 3):
            for digit in range(2, 10):
                word = 1 + digit * 100 * 10 ** (slot - 1)
                with self.subTest(word=word):
                    with self.assertRaises(UnknownModeError) as cm:
                        decode(word)
                    self.assertEqual(cm.exception.digit, digit)
                    self.assertEqual(cm.exception.slot, slot)
                    self.assertEqual(cm.exception.code, word)

    def test_unknown_opcodes_report_raw_value(self):
        for op in range(100):
            if op in (1, 2, 99):
                continue
            for word in (op, op + 100, op + 11100, op + 90900):
                with self.subTest(word=word):
                    with self.assertRaises(UnknownOpcodeError) as cm:
                        decode(word)
                    self.assertEqual(cm.exception.code, word)

    def test_opcode_checked_before_modes(self):
        # mode digit 3 would be invalid, but the opcode is reported first
        with self.assertRaises(UnknownOpcodeError):
            decode(305)

    def test_negative_words_never_decode(self):
        for word in (-1, -2, -99, -101, -1001, -(2 ** 63)):
            with self.subTest(word=word):
                with self.assertRaises(UnknownOpcodeError) as cm:
                    decode(word)
                self.assertEqual(cm.exception.code, word)

    def test_address_in_error(self):
        with self.assertRaises(DecodeError) as cm:
            decode(42, address=7)
        self.assertEqual(cm.exception.address, 7)
        self.assertIn("at 7", str(cm.exception))

    def test_decode_error_is_value_error(self):
        with self.assertRaises(ValueError):
            decode(0)


class TestDigits(unittest.TestCase):
    def test_opcode_of(self):
        self.assertEqual(opcode_of(1002), 2)
        self.assertEqual(opcode_of(99), 99)
        self.assertEqual(opcode_of(-1), -1)
        self.assertEqual(opcode_of(-199), -99)

    def test_mode_digit(self):
        self.assertEqual(mode_digit(10201, 1), 2)
        self.assertEqual(mode_digit(10201, 2), 0)
        self.assertEqual(mode_digit(10201, 3), 1)


if __name__ == "__main__":
    unittest.main()
