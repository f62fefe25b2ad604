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


"""
Shortcuts for one-off calls, each builds an Encoder or a Decoder for the given store.
"""

from typing import Any, Optional

from blobtree.conf.settings import CodecSettings
from blobtree.context import Context
from blobtree.decoder import Decoder
from blobtree.encoder import Encoder
from blobtree.store import BlobRef, BlobStore


def marshal(
    store: BlobStore,
    value: Any,
    type_: Any = None,
    *,
    ctx: Optional[Context] = None,
    settings: Optional[CodecSettings] = None,
) -> BlobRef:
    """ Store `value` as a tree of blobs and return the ref of the root.

    >>> from blobtree.store import MemoryBlobStore
    >>> store = MemoryBlobStore()
    >>> ref = marshal(store, ['a', 'b'], list[str])
    >>> store.get_bytes(ref).count(b'sha224-')
    2
    """
    return Encoder(store, settings=settings).encode(value, type_, ctx=ctx)


def unmarshal(
    store: BlobStore,
    ref: BlobRef,
    type_: Any,
    *,
    ctx: Optional[Context] = None,
    settings: Optional[CodecSettings] = None,
) -> Any:
    """ Rebuild a value of type `type_` from the tree rooted at `ref`.
    """
    return Decoder(store, settings=settings).decode(ref, type_, ctx=ctx)


def unmarshal_into(
    store: BlobStore,
    ref: BlobRef,
    destination: Any,
    *,
    ctx: Optional[Context] = None,
    settings: Optional[CodecSettings] = None,
) -> None:
    """ Rebuild the tree rooted at `ref` into an existing destination, see `Decoder.decode_into`.
    """
    Decoder(store, settings=settings).decode_into(ref, destination, ctx=ctx)
