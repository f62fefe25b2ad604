import threading

from blobtree.exception import BlobNotFoundError
from blobtree.store import BlobRef, MemoryBlobStore
from blobtree_tests import unittest


class MemoryBlobStoreTestCase(unittest.TestCase):
    def test_put_fetch(self):
        ref = self.store.put(b'foo')
        self.assertEqual(ref, BlobRef.from_data(b'foo'))
        stream, size = self.store.fetch(ref)
        self.assertEqual(size, 3)
        self.assertEqual(stream.read(), b'foo')
        self.assertIn(ref, self.store)
        self.assertEqual(len(self.store), 1)

    def test_put_is_idempotent(self):
        ref1 = self.store.put(b'foo')
        ref2 = self.store.put(bytearray(b'foo'))
        self.assertEqual(ref1, ref2)
        self.assertEqual(self.store.writes, 1)
        self.assertEqual(list(self.store.iter_refs()), [ref1])

    def test_empty_blob(self):
        ref = self.store.put(b'')
        self.assertEqual(self.store.get_bytes(ref), b'')

    def test_fetch_missing(self):
        ref = BlobRef.from_data(b'missing')
        self.assertNotIn(ref, self.store)
        with self.assertRaises(BlobNotFoundError):
            self.store.fetch(ref)

    def test_hash_name(self):
        store = MemoryBlobStore(hash_name='sha256')
        ref = store.put(b'foo')
        self.assertEqual(ref.hash_name, 'sha256')
        self.assertEqual(self.store.hash_name, self._settings.HASH_NAME)

    def test_concurrent_puts(self):
        def put_all() -> None:
            for i in range(100):
                self.store.put(str(i).encode())

        threads = [threading.Thread(target=put_all) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(len(self.store), 100)
        self.assertEqual(self.store.writes, 100)
