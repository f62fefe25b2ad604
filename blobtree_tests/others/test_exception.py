from blobtree.exception import (
    BlobNotFoundError,
    BlobTreeError,
    DecodingError,
    NotWritableDestinationError,
    NullDestinationError,
    ParseError,
    StoreError,
    UnsupportedTypeError,
    UnsupportedValueError,
)
from blobtree.store import BlobRef
from blobtree_tests import unittest


class ExceptionTestCase(unittest.TestCase):
    def test_messages(self):
        self.assertEqual(str(UnsupportedTypeError('complex')), 'unsupported type "complex"')
        self.assertEqual(str(UnsupportedValueError('null reference')), 'unsupported value: null reference')
        self.assertEqual(str(NullDestinationError()), 'destination is None')
        self.assertEqual(str(NotWritableDestinationError(int)), 'destination is not writable (int)')
        self.assertEqual(str(DecodingError('expected array')), 'decoding: expected array')

    def test_hierarchy(self):
        self.assertTrue(issubclass(UnsupportedValueError, UnsupportedTypeError))
        self.assertTrue(issubclass(BlobNotFoundError, StoreError))
        for cls in (UnsupportedTypeError, NotWritableDestinationError, NullDestinationError, ParseError, DecodingError,
                    StoreError):
            self.assertTrue(issubclass(cls, BlobTreeError))

    def test_context_is_prepended_and_cause_kept(self):
        cause = ValueError('disk on fire')
        try:
            try:
                raise StoreError('storing record') from cause
            except BlobTreeError as e:
                raise e.add_context('field b')
        except StoreError as e:
            err = e
        self.assertIs(err.__cause__, cause)
        err.add_context('element 0')
        self.assertEqual(err.context, ['element 0', 'field b'])
        self.assertEqual(str(err), 'element 0: field b: storing record: disk on fire')

    def test_blob_not_found(self):
        ref = BlobRef.from_data(b'foo')
        err = BlobNotFoundError(ref)
        self.assertEqual(err.ref, ref)
        self.assertEqual(str(err), f'blob not found: {ref}')
