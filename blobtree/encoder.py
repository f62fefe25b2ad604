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


from typing import Any, Optional

from structlog import get_logger

from blobtree.blob_types import BlobType, make_blob_type
from blobtree.conf.get_settings import get_global_settings
from blobtree.conf.settings import CodecSettings
from blobtree.context import Context
from blobtree.exception import BlobTreeError, StoreError, UnsupportedValueError
from blobtree.hooks import is_marshaler
from blobtree.store import BlobRef, BlobStore
from blobtree.util import json_dumpb_blob

logger = get_logger()


class Encoder:
    """ Stores values as trees of blobs.

    The value is walked depth first, every child is stored before its parent so the parent can embed its ref. Nothing is
    ever deleted from the store, blobs written before an error stay there.
    """

    def __init__(self, store: BlobStore, *, settings: Optional[CodecSettings] = None) -> None:
        self.log = logger.new()
        self.store = store
        self.settings = settings or get_global_settings()

    def encode(self, value: Any, type_: Any = None, *, ctx: Optional[Context] = None) -> BlobRef:
        """ Store `value` and return the ref of its root blob.

        `type_` is the annotation that describes `value`, without it the kinds are taken from the runtime values.
        """
        if ctx is None:
            ctx = Context.background()
        blob_type = self.blob_type_for(type_)
        ref = self.encode_value(ctx, value, blob_type)
        self.log.debug('value encoded', blob_type=repr(blob_type), ref=str(ref))
        return ref

    def blob_type_for(self, type_: Any) -> BlobType:
        return make_blob_type(Any if type_ is None else type_)

    def encode_value(self, ctx: Context, value: Any, blob_type: BlobType) -> BlobRef:
        """ Store one value of the tree, this is what blob types call for each of their children.
        """
        ctx.check()
        if is_marshaler(value):
            ref = value.blob_marshal(ctx, self.store)
            if not isinstance(ref, BlobRef):
                raise UnsupportedValueError(f'{type(value).__name__}.blob_marshal returned {type(ref).__name__}')
            return ref
        return blob_type.encode(ctx, self, value)

    def put(self, ctx: Context, data: bytes, what: str) -> BlobRef:
        """ Write one blob to the store, `what` names the blob in logs and error messages.
        """
        ctx.check()
        try:
            ref = self.store.put(data)
        except BlobTreeError as e:
            raise e.add_context(f'storing {what}')
        except Exception as e:
            raise StoreError(f'storing {what}') from e
        self.log.debug('blob stored', what=what, ref=str(ref), size=len(data))
        return ref

    def dump_json(self, obj: BlobType.Json, what: str) -> bytes:
        """ Serialize the JSON object of a container or record blob with the configured formatting.
        """
        try:
            return json_dumpb_blob(
                obj,
                escape_html=self.settings.ESCAPE_HTML,
                prefix=self.settings.JSON_PREFIX,
                indent=self.settings.JSON_INDENT,
            )
        except ValueError as e:
            raise UnsupportedValueError(f'{what} has no JSON representation') from e
