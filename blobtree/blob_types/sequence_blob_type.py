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

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Iterable, TypeVar, get_args

from typing_extensions import Self, override

from blobtree.blob_types.blob_type import BlobType, Kind, json_type_name
from blobtree.blob_types.container_blob_type import ContainerBlobType, parse_ref
from blobtree.blob_types.utils import pretty_type
from blobtree.exception import BlobTreeError, DecodingError, UnsupportedTypeError, UnsupportedValueError
from blobtree.store.ref import BlobRef

if TYPE_CHECKING:
    from blobtree.context import Context
    from blobtree.decoder import Decoder
    from blobtree.encoder import Encoder

S = TypeVar('S', bound=list | tuple)


def _check_sequence(value: Any) -> list | tuple:
    if not isinstance(value, (list, tuple)):
        raise UnsupportedValueError(f'expected list or tuple, got {type(value).__name__}')
    return value


def _parse_ref_list(json_value: BlobType.Json) -> list[BlobRef] | None:
    if json_value is None:
        return None
    if not isinstance(json_value, list):
        raise DecodingError(f'expected array of blob refs, found {json_type_name(json_value)}')
    refs = []
    for i, item in enumerate(json_value):
        try:
            refs.append(parse_ref(item))
        except BlobTreeError as e:
            raise e.add_context(f'element {i}')
    return refs


class _GrowableSequenceBlobType(ContainerBlobType[S, list[BlobRef]]):
    """ Base class for sequences of any length where every element has the same type.
    """

    __slots__ = ('_element',)

    kind = Kind.SEQUENCE
    blob_name = 'blobref array'

    _element: BlobType

    def __init__(self, element: BlobType) -> None:
        self._element = element

    @classmethod
    @abstractmethod
    def _build_container(cls, items: Iterable[Any]) -> S:
        raise NotImplementedError

    @override
    def encode_refs(self, ctx: Context, encoder: Encoder, value: S | None, /) -> BlobType.Json:
        if value is None:
            return None
        refs: list[str] = []
        for i, item in enumerate(_check_sequence(value)):
            try:
                refs.append(str(encoder.encode_value(ctx, item, self._element)))
            except BlobTreeError as e:
                raise e.add_context(f'element {i}')
        return refs

    @override
    def parse_refs(self, json_value: BlobType.Json, /) -> list[BlobRef] | None:
        return _parse_ref_list(json_value)

    @override
    def build(self, ctx: Context, decoder: Decoder, refs: list[BlobRef] | None, current: S | None, /) -> S:
        if refs is None:
            return None  # type: ignore[return-value]
        items = []
        for i, ref in enumerate(refs):
            try:
                items.append(decoder.decode_value(ctx, ref, self._element))
            except BlobTreeError as e:
                raise e.add_context(f'element {i}')
        return self._build_container(items)

    @override
    def to_literal(self, value: S, /) -> BlobType.Json:
        if value is None:
            return None
        return [self._element.to_literal(item) for item in _check_sequence(value)]

    @override
    def from_literal(self, json_value: BlobType.Json, /) -> S:
        if json_value is None:
            return None  # type: ignore[return-value]
        if not isinstance(json_value, list):
            raise DecodingError(f'expected array, found {json_type_name(json_value)}')
        return self._build_container(self._element.from_literal(item) for item in json_value)

    @override
    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._element!r})'


class ListBlobType(_GrowableSequenceBlobType[list]):
    """ Represents builtin `list` values, `list[T]`.
    """

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BlobType.TypeMap) -> Self:
        args = get_args(type_)
        if len(args) != 1:
            raise UnsupportedTypeError(f'{pretty_type(type_)} (expected list[T])')
        return cls(BlobType.from_type(args[0], type_map=type_map))

    @override
    @classmethod
    def _build_container(cls, items: Iterable[Any]) -> list:
        return list(items)


class VarTupleBlobType(_GrowableSequenceBlobType[tuple]):
    """ Represents builtin `tuple` values of any length, `tuple[T, ...]`.

    Built by `TupleBlobType._from_type` when the annotation ends with an ellipsis.
    """

    @override
    @classmethod
    def _build_container(cls, items: Iterable[Any]) -> tuple:
        return tuple(items)


class TupleBlobType(ContainerBlobType[tuple, list[BlobRef]]):
    """ Represents builtin `tuple` values of a fixed length, `tuple[A, B, C]`.

    The blob has the same shape as a growable sequence. Decoding is lenient on the length: positions without a stored
    ref get the zero value of their slot and extra refs are ignored.
    """

    __slots__ = ('_slots',)

    kind = Kind.SEQUENCE
    blob_name = 'blobref array'

    _slots: tuple[BlobType, ...]

    def __init__(self, slots: tuple[BlobType, ...]) -> None:
        self._slots = slots

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BlobType.TypeMap) -> Any:
        args = get_args(type_)
        if not args:
            raise UnsupportedTypeError(f'{pretty_type(type_)} (expected tuple[T, ...] or tuple[A, B, ...])')
        if len(args) == 2 and args[1] is Ellipsis:
            return VarTupleBlobType(BlobType.from_type(args[0], type_map=type_map))
        if Ellipsis in args:
            raise UnsupportedTypeError(pretty_type(type_))
        return cls(tuple(BlobType.from_type(arg, type_map=type_map) for arg in args))

    @override
    def zero_value(self) -> tuple:
        return tuple(slot.zero_value() for slot in self._slots)

    @override
    def is_zero(self, value: tuple | None, /) -> bool:
        if value is None:
            return True
        return len(value) == len(self._slots) and all(slot.is_zero(v) for slot, v in zip(self._slots, value))

    def _check_length(self, value: Any) -> list | tuple:
        value = _check_sequence(value)
        if len(value) != len(self._slots):
            raise UnsupportedValueError(f'expected {len(self._slots)} items, got {len(value)}')
        return value

    @override
    def encode_refs(self, ctx: Context, encoder: Encoder, value: tuple | None, /) -> BlobType.Json:
        if value is None:
            return None
        refs: list[str] = []
        for i, (slot, item) in enumerate(zip(self._slots, self._check_length(value))):
            try:
                refs.append(str(encoder.encode_value(ctx, item, slot)))
            except BlobTreeError as e:
                raise e.add_context(f'element {i}')
        return refs

    @override
    def parse_refs(self, json_value: BlobType.Json, /) -> list[BlobRef] | None:
        return _parse_ref_list(json_value)

    @override
    def build(self, ctx: Context, decoder: Decoder, refs: list[BlobRef] | None, current: tuple | None, /) -> tuple:
        refs = refs or []
        items = []
        for i, slot in enumerate(self._slots):
            if i >= len(refs):
                items.append(slot.zero_value())
                continue
            try:
                items.append(decoder.decode_value(ctx, refs[i], slot))
            except BlobTreeError as e:
                raise e.add_context(f'element {i}')
        return tuple(items)

    @override
    def to_literal(self, value: tuple, /) -> BlobType.Json:
        return [slot.to_literal(item) for slot, item in zip(self._slots, self._check_length(value))]

    @override
    def from_literal(self, json_value: BlobType.Json, /) -> tuple:
        if json_value is None:
            return self.zero_value()
        if not isinstance(json_value, list):
            raise DecodingError(f'expected array, found {json_type_name(json_value)}')
        return tuple(
            slot.from_literal(json_value[i]) if i < len(json_value) else slot.zero_value()
            for i, slot in enumerate(self._slots)
        )

    @override
    def __repr__(self) -> str:
        return f'{type(self).__name__}({", ".join(map(repr, self._slots))})'
