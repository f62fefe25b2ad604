#  Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import io
import threading
from typing import BinaryIO, Iterator, Optional

from blobtree.exception import BlobNotFoundError
from blobtree.store.base import BlobStore
from blobtree.store.ref import BlobRef


class MemoryBlobStore(BlobStore):
    """ Dict-based blob store, mostly used in tests and for short-lived trees.
    """

    def __init__(self, *, hash_name: Optional[str] = None) -> None:
        if hash_name is None:
            from blobtree.conf.get_settings import get_global_settings
            hash_name = get_global_settings().HASH_NAME
        self.hash_name = hash_name
        self._blobs: dict[BlobRef, bytes] = {}
        self._lock = threading.Lock()
        # number of put() calls that actually wrote something, useful to check deduplication
        self.writes = 0

    def put(self, data: bytes) -> BlobRef:
        ref = BlobRef.from_data(data, self.hash_name)
        with self._lock:
            if ref in self._blobs:
                return ref
            self._blobs[ref] = bytes(data)
            self.writes += 1
        return ref

    def fetch(self, ref: BlobRef) -> tuple[BinaryIO, int]:
        data = self._blobs.get(ref)
        if data is None:
            raise BlobNotFoundError(ref)
        return io.BytesIO(data), len(data)

    def iter_refs(self) -> Iterator[BlobRef]:
        with self._lock:
            refs = list(self._blobs)
        return iter(refs)

    def __contains__(self, ref: BlobRef) -> bool:
        return ref in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)
