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


import dataclasses
import json
from typing import Any, Optional

from structlog import get_logger

from blobtree.blob_types import BlobType, RecordBlobType, make_blob_type
from blobtree.conf.get_settings import get_global_settings
from blobtree.conf.settings import CodecSettings
from blobtree.context import Context
from blobtree.exception import (
    BlobTreeError,
    NotWritableDestinationError,
    NullDestinationError,
    ParseError,
    StoreError,
)
from blobtree.hooks import Unmarshaler
from blobtree.store import BlobRef, BlobStore
from blobtree.types import Slot
from blobtree.util import json_loadb

logger = get_logger()


class Decoder:
    """ Rebuilds values from trees of blobs.

    The shape of the tree is never inferred from the stored bytes alone, it's always driven by the destination type.
    """

    def __init__(self, store: BlobStore, *, settings: Optional[CodecSettings] = None) -> None:
        self.log = logger.new()
        self.store = store
        self.settings = settings or get_global_settings()

    def decode(self, ref: BlobRef, type_: Any, *, ctx: Optional[Context] = None) -> Any:
        """ Rebuild a value of type `type_` from the tree rooted at `ref`.
        """
        if ctx is None:
            ctx = Context.background()
        return self.decode_value(ctx, ref, make_blob_type(type_))

    def decode_into(self, ref: BlobRef, destination: Any, *, ctx: Optional[Context] = None) -> None:
        """ Decode the tree rooted at `ref` into an existing destination.

        The destination can be:

        - an instance that implements `blob_unmarshal`, which is called with the ref
        - a `Slot`, whose `value` is replaced (mappings are merged into the dict the slot already holds)
        - a mutable dataclass instance, whose stored fields are replaced in place and the others are left untouched
        """
        if ctx is None:
            ctx = Context.background()
        if isinstance(destination, Unmarshaler) and not isinstance(destination, type):
            ctx.check()
            destination.blob_unmarshal(ctx, self.store, ref)
            return
        if destination is None:
            raise NullDestinationError()
        if isinstance(destination, Slot):
            blob_type = make_blob_type(destination.type_)
            destination.value = self.decode_value(ctx, ref, blob_type, destination.value)
            return
        if dataclasses.is_dataclass(destination) and not isinstance(destination, type):
            destination_type = type(destination)
            if destination_type.__dataclass_params__.frozen:  # type: ignore[attr-defined]
                raise NotWritableDestinationError(destination_type)
            blob_type = make_blob_type(destination_type)
            assert isinstance(blob_type, RecordBlobType)
            ctx.check()
            try:
                blob_type.decode_into(ctx, self, ref, destination)
            except BlobTreeError as e:
                raise e.add_context(f'decoding ref {ref}')
            return
        raise NotWritableDestinationError(type(destination))

    def decode_value(self, ctx: Context, ref: BlobRef, blob_type: BlobType, current: Any = None) -> Any:
        """ Decode one value of the tree, this is what blob types call for each of their children.
        """
        ctx.check()
        try:
            return blob_type.decode(ctx, self, ref, current)
        except BlobTreeError as e:
            raise e.add_context(f'decoding ref {ref}')

    def fetch(self, ctx: Context, ref: BlobRef) -> bytes:
        """ Read one blob whole from the store.
        """
        ctx.check()
        try:
            stream, size = self.store.fetch(ref)
            with stream:
                data = stream.read()
        except BlobTreeError:
            raise
        except Exception as e:
            raise StoreError(f'fetching {ref}') from e
        if len(data) != size:
            raise StoreError(f'fetching {ref}: expected {size} bytes, read {len(data)}')
        self.log.debug('blob fetched', ref=str(ref), size=size)
        return data

    def load_json(self, data: bytes, what: str) -> BlobType.Json:
        """ Parse the JSON of a container or record blob.
        """
        try:
            return json_loadb(data)
        except json.JSONDecodeError as e:
            raise ParseError(f'parsing {what}') from e
