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

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, get_args

from typing_extensions import Self, override

from blobtree.blob_types.blob_type import BlobType, Kind, json_type_name
from blobtree.blob_types.container_blob_type import ContainerBlobType, parse_ref
from blobtree.blob_types.number_blob_type import _SizedIntBlobType
from blobtree.blob_types.text_blob_type import StrBlobType
from blobtree.blob_types.utils import pretty_type
from blobtree.exception import BlobTreeError, DecodingError, ParseError, UnsupportedTypeError, UnsupportedValueError
from blobtree.store.ref import BlobRef

if TYPE_CHECKING:
    from blobtree.context import Context
    from blobtree.decoder import Decoder
    from blobtree.encoder import Encoder


class DictBlobType(ContainerBlobType[dict, dict[str, BlobRef]]):
    """ Represents builtin `dict` values, `dict[K, V]` where `K` is `str` or an integer kind.

    The blob is a JSON object from the text of each key to the ref of its value, keys are sorted by their text. Decoding
    into an existing dict merges the stored entries into it, entries that are not stored are kept.
    """

    __slots__ = ('_key', '_value')

    kind = Kind.MAPPING
    blob_name = 'blobref map'

    _key: StrBlobType | _SizedIntBlobType
    _value: BlobType

    def __init__(self, key: StrBlobType | _SizedIntBlobType, value: BlobType) -> None:
        self._key = key
        self._value = value

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BlobType.TypeMap) -> Self:
        args = get_args(type_)
        if len(args) != 2:
            raise UnsupportedTypeError(f'{pretty_type(type_)} (expected dict[K, V])')
        key_arg, value_arg = args
        key = BlobType.from_type(key_arg, type_map=type_map)
        if not isinstance(key, (StrBlobType, _SizedIntBlobType)):
            raise UnsupportedTypeError(f'{pretty_type(key_arg)} (as mapping key)')
        return cls(key, BlobType.from_type(value_arg, type_map=type_map))

    def key_to_text(self, key: Any) -> str:
        if isinstance(self._key, StrBlobType):
            if not isinstance(key, str):
                raise UnsupportedValueError(f'expected str key, got {type(key).__name__}')
            return key
        return str(self._key.check_value(key))

    def key_from_text(self, text: str) -> Any:
        if isinstance(self._key, StrBlobType):
            return text
        try:
            return self._key.parse_text(text)
        except ParseError as e:
            raise DecodingError(f'invalid {self._key.type_name} key {text!r}') from e

    def _check_mapping(self, value: Any) -> Mapping:
        if not isinstance(value, Mapping):
            raise UnsupportedValueError(f'expected dict, got {type(value).__name__}')
        return value

    @override
    def encode_refs(self, ctx: Context, encoder: Encoder, value: dict | None, /) -> BlobType.Json:
        if value is None:
            return None
        refs: dict[str, str] = {}
        for key, item in self._check_mapping(value).items():
            key_text = self.key_to_text(key)
            try:
                refs[key_text] = str(encoder.encode_value(ctx, item, self._value))
            except BlobTreeError as e:
                raise e.add_context(f'key {key_text!r}')
        return refs

    @override
    def parse_refs(self, json_value: BlobType.Json, /) -> dict[str, BlobRef] | None:
        if json_value is None:
            return None
        if not isinstance(json_value, dict):
            raise DecodingError(f'expected object of blob refs, found {json_type_name(json_value)}')
        refs = {}
        for key_text, item in json_value.items():
            try:
                refs[key_text] = parse_ref(item)
            except BlobTreeError as e:
                raise e.add_context(f'key {key_text!r}')
        return refs

    @override
    def build(self, ctx: Context, decoder: Decoder, refs: dict[str, BlobRef] | None, current: dict | None, /) -> dict:
        if refs is None:
            return None  # type: ignore[return-value]
        result = current if isinstance(current, dict) else {}
        for key_text, ref in refs.items():
            try:
                key = self.key_from_text(key_text)
                result[key] = decoder.decode_value(ctx, ref, self._value)
            except BlobTreeError as e:
                raise e.add_context(f'key {key_text!r}')
        return result

    @override
    def to_literal(self, value: dict, /) -> BlobType.Json:
        if value is None:
            return None
        return {self.key_to_text(k): self._value.to_literal(v) for k, v in self._check_mapping(value).items()}

    @override
    def from_literal(self, json_value: BlobType.Json, /) -> dict:
        if json_value is None:
            return None  # type: ignore[return-value]
        if not isinstance(json_value, dict):
            raise DecodingError(f'expected object, found {json_type_name(json_value)}')
        return {self.key_from_text(k): self._value.from_literal(v) for k, v in json_value.items()}

    @override
    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._key!r}, {self._value!r})'
