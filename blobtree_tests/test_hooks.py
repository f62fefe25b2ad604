from dataclasses import dataclass, field
from typing import Optional

from blobtree.context import Context
from blobtree.exception import UnsupportedTypeError
from blobtree.store import BlobRef, BlobStore
from blobtree.types import Slot
from blobtree_tests import unittest


class Counter:
    """ Stores itself as `count=<n>` instead of a number blob.
    """

    def __init__(self, count: int = 0) -> None:
        self.count = count

    def blob_marshal(self, ctx: Context, store: BlobStore) -> BlobRef:
        return store.put(f'count={self.count}'.encode())

    def blob_unmarshal(self, ctx: Context, store: BlobStore, ref: BlobRef) -> None:
        data = store.get_bytes(ref)
        self.count = int(data.removeprefix(b'count='))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Counter) and other.count == self.count


@dataclass
class ReadOnlyHook:
    """ Only knows how to read itself, writing falls back to the record layout.
    """

    value: int = 0
    loaded_by_hook: bool = field(default=False, compare=False)

    def blob_unmarshal(self, ctx: Context, store: BlobStore, ref: BlobRef) -> None:
        from blobtree.decoder import Decoder
        fields = Decoder(store).load_json(store.get_bytes(ref), 'record')
        self.value = Decoder(store).decode(BlobRef.parse(fields['value']), int, ctx=ctx)
        self.loaded_by_hook = True


class WriteOnlyHook:
    def blob_marshal(self, ctx: Context, store: BlobStore) -> BlobRef:
        return store.put(b'write only')


@dataclass
class Holder:
    counter: Counter
    counters: list[Counter] = field(default_factory=list)
    maybe: Optional[Counter] = None


class CustomHookTestCase(unittest.TestCase):
    def test_top_level(self):
        ref = self.encode(Counter(3), Counter)
        self.assertEqual(self.blob(ref), b'count=3')
        self.assertEqual(self.decode(ref, Counter), Counter(3))

    def test_hook_wins_over_declared_type(self):
        ref = self.encode(Counter(3))
        self.assertEqual(self.blob(ref), b'count=3')

    def test_nested(self):
        value = Holder(Counter(1), [Counter(2), Counter(3)], Counter(4))
        ref = self.encode(value, Holder)
        stored = self.blob_json(ref)
        self.assertEqual(self.blob(self.ref_of(stored['counter'])), b'count=1')
        self.assertEqual(self.blob(self.ref_of(stored['counters'][1])), b'count=3')
        self.assertEqual(self.decode(ref, Holder), value)

    def test_decode_into_calls_hook(self):
        ref = self.encode(Counter(9), Counter)
        target = Counter()
        self.decoder.decode_into(ref, target)
        self.assertEqual(target.count, 9)

    def test_slot_of_custom_type(self):
        ref = self.encode(Counter(5), Counter)
        slot = Slot(Counter)
        self.decoder.decode_into(ref, slot)
        self.assertEqual(slot.value, Counter(5))

    def test_unmarshal_only_falls_back_to_record_when_encoding(self):
        ref = self.encode(ReadOnlyHook(7), ReadOnlyHook)
        self.assertEqual(self.blob_json(ref), {
            'value': str(self.encode(7, int)),
            'loaded_by_hook': str(self.encode(False, bool)),
        })
        decoded = self.decode(ref, ReadOnlyHook)
        self.assertEqual(decoded.value, 7)
        self.assertTrue(decoded.loaded_by_hook)

    def test_marshal_only_cannot_be_decoded(self):
        ref = self.encode(WriteOnlyHook(), WriteOnlyHook)
        self.assertEqual(self.blob(ref), b'write only')
        with self.assertRaises(UnsupportedTypeError):
            self.decode(ref, WriteOnlyHook)
