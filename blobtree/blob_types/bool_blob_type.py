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

from blobtree.blob_types.blob_type import BlobType, Kind, json_type_name
from blobtree.exception import DecodingError, UnsupportedValueError

if TYPE_CHECKING:
    from blobtree.context import Context
    from blobtree.decoder import Decoder
    from blobtree.encoder import Encoder
    from blobtree.store import BlobRef

TRUE_BLOB = b'true'
FALSE_BLOB = b''


class BoolBlobType(BlobType[bool]):
    """ Represents builtin `bool` values.

    False is stored as the empty blob and true as the 4 bytes `true`. When decoding only the length matters: any
    non-empty blob is true.
    """

    kind = Kind.BOOL

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BlobType.TypeMap) -> Self:
        if type_ is not bool:
            raise TypeError('expected bool type')
        return cls()

    @override
    def zero_value(self) -> bool:
        return False

    @override
    def encode(self, ctx: Context, encoder: Encoder, value: bool, /) -> BlobRef:
        if not isinstance(value, bool):
            raise UnsupportedValueError(f'expected bool, got {type(value).__name__}')
        return encoder.put(ctx, TRUE_BLOB if value else FALSE_BLOB, 'bool val')

    @override
    def _decode_data(self, ctx: Context, decoder: Decoder, data: bytes, current: bool | None, /) -> bool:
        return len(data) > 0

    @override
    def to_literal(self, value: bool, /) -> BlobType.Json:
        if not isinstance(value, bool):
            raise UnsupportedValueError(f'expected bool, got {type(value).__name__}')
        return value

    @override
    def from_literal(self, json_value: BlobType.Json, /) -> bool:
        if not isinstance(json_value, bool):
            raise DecodingError(f'expected bool, found {json_type_name(json_value)}')
        return json_value
