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

import base64
import binascii
from typing import TYPE_CHECKING, Any

from typing_extensions import Self, override

from blobtree.blob_types.blob_type import BlobType, Kind, json_type_name
from blobtree.exception import DecodingError, UnsupportedValueError

if TYPE_CHECKING:
    from blobtree.context import Context
    from blobtree.decoder import Decoder
    from blobtree.encoder import Encoder
    from blobtree.store import BlobRef

# XXX: str values round-trip arbitrary blob bytes, invalid UTF-8 is kept as lone surrogates
_ERRORS = 'surrogateescape'


class StrBlobType(BlobType[str]):
    """ Represents builtin `str` values, the blob is the UTF-8 text without any quoting or escaping.
    """

    kind = Kind.TEXT

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BlobType.TypeMap) -> Self:
        if type_ is not str:
            raise TypeError('expected str type')
        return cls()

    @override
    def zero_value(self) -> str:
        return ''

    @override
    def encode(self, ctx: Context, encoder: Encoder, value: str, /) -> BlobRef:
        if not isinstance(value, str):
            raise UnsupportedValueError(f'expected str, got {type(value).__name__}')
        return encoder.put(ctx, value.encode('utf-8', errors=_ERRORS), 'string')

    @override
    def _decode_data(self, ctx: Context, decoder: Decoder, data: bytes, current: str | None, /) -> str:
        return data.decode('utf-8', errors=_ERRORS)

    @override
    def to_literal(self, value: str, /) -> BlobType.Json:
        if not isinstance(value, str):
            raise UnsupportedValueError(f'expected str, got {type(value).__name__}')
        return value

    @override
    def from_literal(self, json_value: BlobType.Json, /) -> str:
        if not isinstance(json_value, str):
            raise DecodingError(f'expected string, found {json_type_name(json_value)}')
        return json_value


class BytesBlobType(BlobType[bytes]):
    """ Represents builtin `bytes` values, the blob is the raw bytes.

    As an inline literal the bytes are written as a standard base64 string.
    """

    kind = Kind.TEXT

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BlobType.TypeMap) -> Self:
        if type_ is not bytes:
            raise TypeError('expected bytes type')
        return cls()

    @override
    def zero_value(self) -> bytes:
        return b''

    @override
    def encode(self, ctx: Context, encoder: Encoder, value: bytes, /) -> BlobRef:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise UnsupportedValueError(f'expected bytes, got {type(value).__name__}')
        return encoder.put(ctx, bytes(value), 'bytes')

    @override
    def _decode_data(self, ctx: Context, decoder: Decoder, data: bytes, current: bytes | None, /) -> bytes:
        return data

    @override
    def to_literal(self, value: bytes, /) -> BlobType.Json:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise UnsupportedValueError(f'expected bytes, got {type(value).__name__}')
        return base64.b64encode(bytes(value)).decode('ascii')

    @override
    def from_literal(self, json_value: BlobType.Json, /) -> bytes:
        if not isinstance(json_value, str):
            raise DecodingError(f'expected base64 string, found {json_type_name(json_value)}')
        try:
            return base64.b64decode(json_value, validate=True)
        except binascii.Error as e:
            raise DecodingError(f'invalid base64 string {json_value!r}') from e
