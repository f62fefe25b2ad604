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

from types import NoneType
from typing import TYPE_CHECKING, Any, TypeVar, get_args

from typing_extensions import Self, override

from blobtree.blob_types.blob_type import BlobType, Kind
from blobtree.blob_types.utils import pretty_type
from blobtree.exception import UnsupportedTypeError, UnsupportedValueError

if TYPE_CHECKING:
    from blobtree.context import Context
    from blobtree.decoder import Decoder
    from blobtree.encoder import Encoder
    from blobtree.store import BlobRef

V = TypeVar('V')


class OptionalBlobType(BlobType[V | None]):
    """ Represents a reference to a value, `T | None`.

    A reference is transparent in storage: it's stored exactly as the value it points to. A `None` reference has no
    representation, it can only be left out of a record through `omitempty`.
    """

    __slots__ = ('_value',)

    kind = Kind.REFERENCE

    _value: BlobType[V]

    def __init__(self, value: BlobType[V]) -> None:
        self._value = value

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BlobType.TypeMap) -> Self:
        args = get_args(type_)
        if NoneType not in args:
            raise UnsupportedTypeError(f'{pretty_type(type_)} (only unions with None are supported)')
        value_args = [arg for arg in args if arg is not NoneType]
        if len(value_args) != 1:
            raise UnsupportedTypeError(f'{pretty_type(type_)} (only unions with None are supported)')
        return cls(BlobType.from_type(value_args[0], type_map=type_map))

    @override
    def zero_value(self) -> None:
        return None

    @override
    def is_zero(self, value: V | None, /) -> bool:
        return value is None

    @override
    def encode(self, ctx: Context, encoder: Encoder, value: V | None, /) -> BlobRef:
        if value is None:
            raise UnsupportedValueError('null reference')
        return self._value.encode(ctx, encoder, value)

    @override
    def decode(self, ctx: Context, decoder: Decoder, ref: BlobRef, current: V | None = None, /) -> V | None:
        return self._value.decode(ctx, decoder, ref, current)

    @override
    def to_literal(self, value: V | None, /) -> BlobType.Json:
        if value is None:
            return None
        return self._value.to_literal(value)

    @override
    def from_literal(self, json_value: BlobType.Json, /) -> V | None:
        if json_value is None:
            return None
        return self._value.from_literal(json_value)

    @override
    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._value!r})'
