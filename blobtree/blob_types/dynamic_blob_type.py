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

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from typing_extensions import Self, override

from blobtree.blob_types.blob_type import BlobType, Kind
from blobtree.blob_types.map_blob_type import DictBlobType
from blobtree.blob_types.number_blob_type import Int64BlobType
from blobtree.blob_types.sequence_blob_type import ListBlobType, VarTupleBlobType
from blobtree.blob_types.text_blob_type import StrBlobType
from blobtree.exception import UnsupportedTypeError, UnsupportedValueError

if TYPE_CHECKING:
    from blobtree.context import Context
    from blobtree.decoder import Decoder
    from blobtree.encoder import Encoder
    from blobtree.store import BlobRef


class DynamicBlobType(BlobType[Any]):
    """ Used for `Any`, `object` and missing annotations, the kind is taken from each runtime value when encoding.

    Elements of lists, tuples and dicts found this way are dynamic too. There is nothing to tell which kind a stored
    blob has, so values of this type can't be decoded.
    """

    __slots__ = ()

    kind = Kind.DYNAMIC

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BlobType.TypeMap) -> Self:
        return cls()

    def blob_type_for(self, value: Any) -> BlobType:
        """ Resolve the BlobType of a runtime value.
        """
        if value is None:
            raise UnsupportedValueError('null reference')
        if isinstance(value, list):
            return ListBlobType(self)
        if isinstance(value, tuple):
            return VarTupleBlobType(self)
        if isinstance(value, dict):
            if all(isinstance(key, str) for key in value):
                return DictBlobType(StrBlobType(), self)
            if all(isinstance(key, int) and not isinstance(key, bool) for key in value):
                return DictBlobType(Int64BlobType(), self)
            raise UnsupportedTypeError('dict (keys must be all str or all int)')
        from blobtree.blob_types import make_blob_type
        blob_type = make_blob_type(type(value))
        if isinstance(blob_type, DynamicBlobType):
            # plain `object()` instances
            raise UnsupportedTypeError(type(value).__name__)
        return blob_type

    @override
    def zero_value(self) -> Any:
        return None

    @override
    def is_zero(self, value: Any, /) -> bool:
        return value is None

    @override
    def encode(self, ctx: Context, encoder: Encoder, value: Any, /) -> BlobRef:
        return self.blob_type_for(value).encode(ctx, encoder, value)

    @override
    def decode(self, ctx: Context, decoder: Decoder, ref: BlobRef, current: Any = None, /) -> Any:
        raise UnsupportedTypeError('Any (a concrete type is needed to decode)')

    @override
    def to_literal(self, value: Any, /) -> BlobType.Json:
        return self.blob_type_for(value).to_literal(value)

    @override
    def from_literal(self, json_value: BlobType.Json, /) -> Any:
        raise UnsupportedTypeError('Any (a concrete type is needed to decode)')
