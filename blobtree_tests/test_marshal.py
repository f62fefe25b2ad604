from dataclasses import dataclass, field

import blobtree
from blobtree import Context, MemoryBlobStore, Slot, marshal, unmarshal, unmarshal_into
from blobtree.conf.settings import CodecSettings
from blobtree.exception import CancelledError, ParseError
from blobtree_tests import unittest


@dataclass
class Document:
    title: str
    tags: list[str] = field(default_factory=list)
    meta: dict[str, str] = field(default_factory=dict)


class MarshalTestCase(unittest.TestCase):
    def test_round_trip(self):
        doc = Document('hello', ['a', 'b'], {'lang': 'en'})
        ref = marshal(self.store, doc)
        self.assertEqual(unmarshal(self.store, ref, Document), doc)

    def test_same_refs_as_encoder(self):
        doc = Document('hello', ['a'])
        self.assertEqual(marshal(MemoryBlobStore(), doc, Document), self.encode(doc, Document))

    def test_unmarshal_into(self):
        ref = marshal(self.store, ['x', 'y'], list[str])
        slot = Slot(list[str])
        unmarshal_into(self.store, ref, slot)
        self.assertEqual(slot.value, ['x', 'y'])

    def test_unmarshal_into_dataclass(self):
        ref = marshal(self.store, Document('new'))
        doc = Document('old', ['kept'])
        unmarshal_into(self.store, ref, doc)
        self.assertEqual(doc, Document('new'))

    def test_settings_override(self):
        settings = CodecSettings(JSON_INDENT='  ')
        ref = marshal(self.store, {'k': 'v'}, dict[str, str], settings=settings)
        self.assertEqual(self.blob(ref), b'{\n  "k": "%s"\n}\n' % str(self.encode('v', str)).encode())

    def test_empty_blob_without_null_decoding(self):
        settings = CodecSettings(DECODE_EMPTY_CONTAINER_AS_NULL=False)
        ref = marshal(self.store, None, list[str])
        self.assertIsNone(unmarshal(self.store, ref, list[str]))
        with self.assertRaises(ParseError):
            unmarshal(self.store, ref, list[str], settings=settings)

    def test_cancelled_context(self):
        ctx = Context()
        ctx.cancel()
        with self.assertRaises(CancelledError):
            marshal(self.store, 'foo', str, ctx=ctx)

    def test_public_api(self):
        for name in blobtree.__all__:
            self.assertTrue(hasattr(blobtree, name), name)
