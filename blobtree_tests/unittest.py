import shutil
import tempfile
from typing import Any, Optional
from unittest import TestCase as _TestCase, main as ut_main

from structlog import get_logger

from blobtree.conf.get_settings import get_global_settings
from blobtree.decoder import Decoder
from blobtree.encoder import Encoder
from blobtree.store import BlobRef, MemoryBlobStore
from blobtree.util import json_loadb

logger = get_logger()
main = ut_main


class TestCase(_TestCase):
    def setUp(self) -> None:
        self.tmpdirs: list[str] = []
        self.log = logger.new()
        self._settings = get_global_settings()
        self.store = MemoryBlobStore()
        self.encoder = Encoder(self.store)
        self.decoder = Decoder(self.store)

    def tearDown(self) -> None:
        self.clean_tmpdirs()

    def mkdtemp(self) -> str:
        tmpdir = tempfile.mkdtemp()
        self.tmpdirs.append(tmpdir)
        return tmpdir

    def clean_tmpdirs(self) -> None:
        for tmpdir in self.tmpdirs:
            shutil.rmtree(tmpdir)
        self.tmpdirs = []

    def encode(self, value: Any, type_: Any = None) -> BlobRef:
        return self.encoder.encode(value, type_)

    def decode(self, ref: BlobRef, type_: Any) -> Any:
        return self.decoder.decode(ref, type_)

    def round_trip(self, value: Any, type_: Any = None) -> Any:
        return self.decode(self.encode(value, type_), type_)

    def blob(self, ref: BlobRef) -> bytes:
        return self.store.get_bytes(ref)

    def blob_json(self, ref: BlobRef) -> Any:
        return json_loadb(self.blob(ref))

    def ref_of(self, text: str) -> BlobRef:
        return BlobRef.parse(text)

    def dump_store(self, hash_prefix: Optional[str] = None) -> None:
        """ Log every blob in the store, handy when a test fails.
        """
        for ref in self.store.iter_refs():
            if hash_prefix is None or ref.hex().startswith(hash_prefix):
                self.log.debug('stored blob', ref=str(ref), data=self.blob(ref))
