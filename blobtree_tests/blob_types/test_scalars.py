import math

import pytest

from blobtree.blob_types import make_blob_type
from blobtree.exception import ParseError, UnsupportedValueError
from blobtree.marshal import marshal
from blobtree.store import MemoryBlobStore
from blobtree.types import Float32, Float64, Int8, Int16, Int32, Int64, Uint8, Uint16, Uint32, Uint64
from blobtree_tests import unittest


class BoolTestCase(unittest.TestCase):
    def test_false_is_empty_blob(self):
        ref = self.encode(False, bool)
        self.assertEqual(self.blob(ref), b'')
        self.assertIs(self.decode(ref, bool), False)

    def test_true_is_four_bytes(self):
        ref = self.encode(True, bool)
        self.assertEqual(self.blob(ref), b'true')
        self.assertIs(self.decode(ref, bool), True)

    def test_any_non_empty_blob_is_true(self):
        for data in (b'false', b'0', b'\x00', b'nope'):
            ref = self.store.put(data)
            self.assertIs(self.decode(ref, bool), True)

    def test_not_a_bool(self):
        with self.assertRaises(UnsupportedValueError):
            self.encode(1, bool)


class IntTestCase(unittest.TestCase):
    def test_canonical_text(self):
        self.assertEqual(self.blob(self.encode(17, Int32)), b'17')
        self.assertEqual(self.blob(self.encode(-17, int)), b'-17')
        self.assertEqual(self.blob(self.encode(0, Uint8)), b'0')

    def test_plain_int_is_int64(self):
        self.assertEqual(self.round_trip(2**63 - 1, int), 2**63 - 1)
        with self.assertRaises(UnsupportedValueError):
            self.encode(2**63, int)

    def test_round_trip_bounds(self):
        for type_, lower, upper in [
            (Int8, -128, 127),
            (Int16, -2**15, 2**15 - 1),
            (Int32, -2**31, 2**31 - 1),
            (Int64, -2**63, 2**63 - 1),
            (Uint8, 0, 255),
            (Uint16, 0, 2**16 - 1),
            (Uint32, 0, 2**32 - 1),
            (Uint64, 0, 2**64 - 1),
        ]:
            self.assertEqual(self.round_trip(lower, type_), lower)
            self.assertEqual(self.round_trip(upper, type_), upper)
            with self.assertRaises(UnsupportedValueError):
                self.encode(upper + 1, type_)

    def test_decode_overflow(self):
        ref = self.store.put(b'256')
        with self.assertRaises(ParseError) as cm:
            self.decode(ref, Uint8)
        self.assertIn('value out of range', str(cm.exception))
        self.assertIn(str(ref), str(cm.exception))

    def test_decode_malformed(self):
        for data in (b'', b'1.5', b'abc', b' 1', b'1e3'):
            with self.assertRaises(ParseError):
                self.decode(self.store.put(data), int)

    def test_unsigned_rejects_sign(self):
        with self.assertRaises(ParseError):
            self.decode(self.store.put(b'-1'), Uint32)

    def test_bool_is_not_an_int(self):
        with self.assertRaises(UnsupportedValueError):
            self.encode(True, int)


@pytest.mark.parametrize('value,expected', [
    (1.0, b'1'),
    (1.5, b'1.5'),
    (-0.25, b'-0.25'),
    (0.1, b'0.1'),
    (1e21, b'1000000000000000000000'),
    (1e-7, b'0.0000001'),
    (123456789.125, b'123456789.125'),
    (math.inf, b'+Inf'),
    (-math.inf, b'-Inf'),
])
def test_float64_text(value, expected):
    store = MemoryBlobStore()
    assert store.get_bytes(marshal(store, value, float)) == expected


class FloatTestCase(unittest.TestCase):
    def test_round_trip(self):
        for value in (0.0, 1.0, -2.5, 0.1, 1e300, 5e-324, math.pi):
            self.assertEqual(self.round_trip(value, Float64), value)

    def test_nan(self):
        ref = self.encode(math.nan, float)
        self.assertEqual(self.blob(ref), b'NaN')
        self.assertTrue(math.isnan(self.decode(ref, float)))

    def test_float32_is_shortest_for_its_width(self):
        ref = self.encode(0.1, Float32)
        self.assertEqual(self.blob(ref), b'0.1')
        decoded = self.decode(ref, Float32)
        self.assertNotEqual(decoded, 0.1)
        self.assertEqual(self.blob(self.encode(decoded, Float32)), b'0.1')

    def test_float32_overflow(self):
        with self.assertRaises(UnsupportedValueError):
            self.encode(1e39, Float32)
        with self.assertRaises(ParseError):
            self.decode(self.store.put(b'1e39'), Float32)

    def test_int_values_are_accepted(self):
        self.assertEqual(self.blob(self.encode(3, float)), b'3')

    def test_decode_exponent_form(self):
        self.assertEqual(self.decode(self.store.put(b'1e2'), float), 100.0)


class TextTestCase(unittest.TestCase):
    def test_str_is_raw_utf8(self):
        ref = self.encode('áé "quoted"', str)
        self.assertEqual(self.blob(ref), 'áé "quoted"'.encode('utf-8'))
        self.assertEqual(self.decode(ref, str), 'áé "quoted"')

    def test_empty_str(self):
        ref = self.encode('', str)
        self.assertEqual(self.blob(ref), b'')
        self.assertEqual(self.decode(ref, str), '')

    def test_invalid_utf8_round_trips(self):
        ref = self.store.put(b'\xff\xfe')
        value = self.decode(ref, str)
        self.assertEqual(self.encode(value, str), ref)

    def test_bytes(self):
        ref = self.encode(b'\x00\x01\xff', bytes)
        self.assertEqual(self.blob(ref), b'\x00\x01\xff')
        self.assertEqual(self.decode(ref, bytes), b'\x00\x01\xff')
        self.assertEqual(self.encode(bytearray(b'\x00\x01\xff'), bytearray), ref)

    def test_str_and_bytes_share_blobs(self):
        self.assertEqual(self.encode('foo', str), self.encode(b'foo', bytes))


def test_literals():
    assert make_blob_type(bytes).to_literal(b'\x00\xff') == 'AP8='
    assert make_blob_type(bytes).from_literal('AP8=') == b'\x00\xff'
    assert make_blob_type(Uint8).from_literal(255) == 255
    assert make_blob_type(float).to_literal(1.5) == 1.5
    with pytest.raises(UnsupportedValueError):
        make_blob_type(float).to_literal(math.inf)
