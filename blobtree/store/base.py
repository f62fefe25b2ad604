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

from abc import ABC, abstractmethod
from typing import BinaryIO, Iterator

from blobtree.store.ref import BlobRef


class BlobStore(ABC):
    """ Content-addressed blob storage used by the encoder and the decoder.

    Implementations must be deterministic and idempotent: putting the same bytes twice returns the same ref and does not
    write anything new. They must also be safe to use from multiple threads, since independent encode/decode calls may
    share a store.
    """

    @abstractmethod
    def put(self, data: bytes) -> BlobRef:
        """ Store `data` and return the ref that names it.
        """
        raise NotImplementedError

    @abstractmethod
    def fetch(self, ref: BlobRef) -> tuple[BinaryIO, int]:
        """ Return a readable stream with the exact bytes stored under `ref` and their size.

        Raises `BlobNotFoundError` when there is no such blob.
        """
        raise NotImplementedError

    @abstractmethod
    def iter_refs(self) -> Iterator[BlobRef]:
        """ Iterate over the refs of all stored blobs, in no particular order.
        """
        raise NotImplementedError

    @abstractmethod
    def __contains__(self, ref: BlobRef) -> bool:
        raise NotImplementedError

    def __len__(self) -> int:
        return sum(1 for _ in self.iter_refs())

    def get_bytes(self, ref: BlobRef) -> bytes:
        """ Shortcut to fetch a blob and read it whole.
        """
        stream, _ = self.fetch(ref)
        with stream:
            return stream.read()
