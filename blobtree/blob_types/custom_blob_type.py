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

from dataclasses import is_dataclass
from typing import TYPE_CHECKING, Any, Optional

from typing_extensions import Self, override

from blobtree.blob_types.blob_type import BlobType, Kind
from blobtree.exception import UnsupportedTypeError
from blobtree.hooks import Unmarshaler

if TYPE_CHECKING:
    from blobtree.blob_types.record_blob_type import RecordBlobType
    from blobtree.context import Context
    from blobtree.decoder import Decoder
    from blobtree.encoder import Encoder
    from blobtree.store import BlobRef


class CustomBlobType(BlobType[Any]):
    """ Represents classes that implement `blob_marshal` and/or `blob_unmarshal`.

    The encoder calls `blob_marshal` on any value that has it before reaching this type, so `encode` here only runs for
    classes that implement `blob_unmarshal` alone. When a class implements one hook but not the other, the missing
    direction falls back to the generic record handling if the class is a dataclass, and is unsupported otherwise.
    """

    __slots__ = ('custom_class', '_record')

    kind = Kind.CUSTOM

    custom_class: type
    _record: Optional[RecordBlobType]

    def __init__(self, custom_class: type, record: Optional[RecordBlobType] = None) -> None:
        self.custom_class = custom_class
        self._record = record

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BlobType.TypeMap) -> Self:
        record = None
        if is_dataclass(type_):
            from blobtree.blob_types.record_blob_type import RecordBlobType
            record = RecordBlobType._from_type(type_, type_map=type_map)
        return cls(type_, record)

    def _require_record(self, direction: str) -> RecordBlobType:
        if self._record is None:
            raise UnsupportedTypeError(f'{self.custom_class.__name__} (no blob_{direction} hook)')
        return self._record

    @override
    def zero_value(self) -> Any:
        return None

    @override
    def is_zero(self, value: Any, /) -> bool:
        return value is None

    @override
    def encode(self, ctx: Context, encoder: Encoder, value: Any, /) -> BlobRef:
        return self._require_record('marshal').encode(ctx, encoder, value)

    @override
    def decode(self, ctx: Context, decoder: Decoder, ref: BlobRef, current: Any = None, /) -> Any:
        if not issubclass(self.custom_class, Unmarshaler):
            return self._require_record('unmarshal').decode(ctx, decoder, ref, current)
        instance = current if isinstance(current, self.custom_class) else self.custom_class()
        instance.blob_unmarshal(ctx, decoder.store, ref)
        return instance

    @override
    def to_literal(self, value: Any, /) -> BlobType.Json:
        return self._require_record('marshal').to_literal(value)

    @override
    def from_literal(self, json_value: BlobType.Json, /) -> Any:
        return self._require_record('unmarshal').from_literal(json_value)

    @override
    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.custom_class.__name__})'
