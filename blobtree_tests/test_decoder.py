from dataclasses import dataclass, field

from blobtree.exception import (
    BlobNotFoundError,
    NotWritableDestinationError,
    NullDestinationError,
    UnsupportedTypeError,
)
from blobtree.store import BlobRef
from blobtree.tag import blob_field
from blobtree.types import Slot
from blobtree_tests import unittest


@dataclass
class Settings:
    name: str = ''
    retries: int = blob_field(omitempty=True, default=0)
    labels: dict[str, str] = field(default_factory=dict)
    cache: dict[str, int] = blob_field(skip=True, default_factory=dict)


@dataclass(frozen=True)
class FrozenSettings:
    name: str = ''


class DecodeIntoTestCase(unittest.TestCase):
    def test_slot(self):
        ref = self.encode(['foo'], list[str])
        slot: Slot[list[str]] = Slot(list[str])
        self.decoder.decode_into(ref, slot)
        self.assertEqual(slot.value, ['foo'])

    def test_slot_list_is_replaced(self):
        ref = self.encode(['foo'], list[str])
        slot = Slot(list[str], ['a', 'b', 'c'])
        self.decoder.decode_into(ref, slot)
        self.assertEqual(slot.value, ['foo'])

    def test_slot_dict_is_merged(self):
        ref = self.encode({'a': 1, 'b': 2}, dict[str, int])
        existing = {'b': 0, 'c': 3}
        slot = Slot(dict[str, int], existing)
        self.decoder.decode_into(ref, slot)
        self.assertIs(slot.value, existing)
        self.assertEqual(existing, {'a': 1, 'b': 2, 'c': 3})

    def test_dataclass_in_place(self):
        ref = self.encode(Settings(name='prod', labels={'env': 'prod'}), Settings)
        target = Settings(name='dev', retries=3, labels={'team': 'core'}, cache={'k': 1})
        self.decoder.decode_into(ref, target)
        self.assertEqual(target.name, 'prod')
        # left out by omitempty, so it keeps its current value
        self.assertEqual(target.retries, 3)
        # stored mappings are merged into the current ones
        self.assertEqual(target.labels, {'team': 'core', 'env': 'prod'})
        # skipped fields are never touched
        self.assertEqual(target.cache, {'k': 1})

    def test_decode_without_destination_uses_zero_values(self):
        ref = self.encode(Settings(name='prod', retries=0, cache={'k': 1}), Settings)
        # the skipped mapping is a null container, not the dataclass default
        self.assertEqual(self.decode(ref, Settings), Settings(name='prod', cache=None))  # type: ignore[arg-type]

    def test_frozen_dataclass_is_not_writable(self):
        ref = self.encode(FrozenSettings('x'), FrozenSettings)
        with self.assertRaises(NotWritableDestinationError):
            self.decoder.decode_into(ref, FrozenSettings())

    def test_null_destination(self):
        ref = self.encode(1, int)
        with self.assertRaises(NullDestinationError) as cm:
            self.decoder.decode_into(ref, None)
        self.assertEqual(str(cm.exception), 'destination is None')

    def test_not_writable_destination(self):
        ref = self.encode(1, int)
        for destination in (0, 'x', [], {}, Settings):
            with self.assertRaises(NotWritableDestinationError):
                self.decoder.decode_into(ref, destination)


class DecoderErrorsTestCase(unittest.TestCase):
    def test_missing_blob(self):
        ref = BlobRef.from_data(b'never stored')
        with self.assertRaises(BlobNotFoundError) as cm:
            self.decode(ref, str)
        self.assertIn(f'decoding ref {ref}', str(cm.exception))

    def test_missing_child_blob(self):
        missing = BlobRef.from_data(b'never stored')
        ref = self.store.put(f'["{missing}"]\n'.encode())
        with self.assertRaises(BlobNotFoundError) as cm:
            self.decode(ref, list[str])
        self.assertEqual(cm.exception.context, [f'decoding ref {ref}', 'element 0', f'decoding ref {missing}'])

    def test_any_cannot_be_decoded(self):
        ref = self.encode('x')
        with self.assertRaises(UnsupportedTypeError):
            self.decode(ref, object)
