import unittest

from pylc3.helpers import *

class SignExtendTests(unittest.TestCase):
    def test_positive_fields_unchanged(self):
        for bits in (5, 6, 8, 9, 11):
            for value in (0, 1, (1 << (bits - 1)) - 1):
                self.assertEqual(sign_extend(value, bits), value, "sign_extend(0x%x, %d)" % (value, bits))
                
    def test_negative_fields_fill_upper_bits(self):
        for bits in (5, 6, 8, 9, 11):
            field_mask = (1 << bits) - 1
            for value in (1 << (bits - 1), field_mask):
                result = sign_extend(value, bits)
                self.assertEqual(result & ~field_mask & 0xFFFF, 0xFFFF & ~field_mask)
                self.assertEqual(result & field_mask, value)
                
    def test_known_values(self):
        self.assertEqual(sign_extend(0b11111, 5), 0xFFFF)
        self.assertEqual(sign_extend(0b01111, 5), 0x000F)
        self.assertEqual(sign_extend(0b10000, 5), 0xFFF0)
        self.assertEqual(sign_extend(0x1FF, 9), 0xFFFF)
        self.assertEqual(sign_extend(0x100, 9), 0xFF00)
        self.assertEqual(sign_extend(0x400, 11), 0xFC00)
        self.assertEqual(sign_extend(0x20, 6), 0xFFE0)
        self.assertEqual(sign_extend(0x80, 8), 0xFF80)
        
class SignedWordTests(unittest.TestCase):
    def test_signed_word(self):
        self.assertEqual(signed_word(0x0000), 0)
        self.assertEqual(signed_word(0x7FFF), 32767)
        self.assertEqual(signed_word(0x8000), -32768)
        self.assertEqual(signed_word(0xFFFF), -1)
        
class WordBytesTests(unittest.TestCase):
    def test_word_to_bytes(self):
        self.assertEqual(word_to_bytes(0x4142), (0x42, 0x41))
        
    def test_word_to_bytes_range(self):
        with self.assertRaises(ValueError):
            word_to_bytes(0x10000)
        with self.assertRaises(ValueError):
            word_to_bytes(-1)
            
class ParseNumberTests(unittest.TestCase):
    def test_formats(self):
        data = [
            ("x3000",   0x3000),
            ("X3000",   0x3000),
            ("0x3000",  0x3000),
            ("#12",     12),
            ("12",      12),
            ("b101",    5),
            ("0b101",   5),
            ("#-1",     -1),
            ("-x10",    -16),
        ]
        for text, expected in data:
            self.assertEqual(parse_number(text), expected, text)
            
    def test_invalid(self):
        with self.assertRaises(ValueError):
            parse_number("hello")
            
    def test_parse_address_wraps(self):
        self.assertEqual(parse_address("#-1"), 0xFFFF)
        self.assertEqual(parse_address("x13000"), 0x3000)
        
class PrintableCharTests(unittest.TestCase):
    def test_printable_char(self):
        self.assertEqual(printable_char(0x41), "A")
        self.assertEqual(printable_char(0x0A), ".")
        self.assertEqual(printable_char(0x7F), ".")
        self.assertEqual(printable_char(0x4142), "B")
