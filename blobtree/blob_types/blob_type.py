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

from abc import ABC, abstractmethod
from dataclasses import is_dataclass
from enum import Enum, auto, unique
from types import UnionType
from typing import TYPE_CHECKING, Any, ClassVar, Generic, NamedTuple, TypeAlias, TypeVar, Union, final, get_origin

from typing_extensions import Self

from blobtree.blob_types.utils import TypeAliasMap, TypeToBlobTypeMap, pretty_type
from blobtree.exception import UnsupportedTypeError
from blobtree.hooks import is_custom_type

if TYPE_CHECKING:
    from blobtree.context import Context
    from blobtree.decoder import Decoder
    from blobtree.encoder import Encoder
    from blobtree.store import BlobRef

T = TypeVar('T')


@unique
class Kind(Enum):
    BOOL = auto()
    INT = auto()
    UINT = auto()
    FLOAT = auto()
    TEXT = auto()
    SEQUENCE = auto()
    MAPPING = auto()
    RECORD = auto()
    REFERENCE = auto()
    CUSTOM = auto()
    # resolved from the runtime value when encoding, cannot be decoded
    DYNAMIC = auto()


class BlobType(ABC, Generic[T]):
    """ This class models one kind of value with a known type signature and how it is stored as blobs.

    Instances are built from type annotations through a `TypeMap`, a compound annotation like `dict[str, list[int]]`
    produces a tree of BlobType instances that mirrors it. The encoder and the decoder only ever walk these trees, they
    never inspect annotations themselves.

    Each instance knows three things about its values:

    - how to store one value as a blob and return its ref (`encode`) and how to rebuild it from a ref (`decode`)
    - how to write a value as a plain JSON literal and read it back (`to_literal`/`from_literal`), which is used for
      record fields marked `inline`
    - what the zero value of its kind is, used for `omitempty` and for filling destinations that have no stored data
    """

    # These are all the values that can be observed when parsing a JSON with the builtin json module
    # See: https://docs.python.org/3/library/json.html#encoders-and-decoders
    Json: TypeAlias = dict | list | str | int | float | bool | None

    class TypeMap(NamedTuple):
        alias_map: TypeAliasMap
        blob_types_map: TypeToBlobTypeMap
        # record types are built once per dataclass and reused, this also makes recursive dataclasses possible
        record_cache: dict[type, BlobType]

    # XXX: subclasses must override this if they need any properties
    __slots__ = ()

    # XXX: subclasses must initialize this property
    kind: ClassVar[Kind]

    @final
    @staticmethod
    def from_type(type_: Any, /, *, type_map: TypeMap) -> BlobType:
        """ Instantiate a BlobType from a type annotation using the given map.

        Classes implementing the custom hooks take precedence over everything else, then the alias map is applied and
        the annotation's origin is looked up in the map, dataclasses that are not in the map become records.
        """
        if isinstance(type_, str):
            raise UnsupportedTypeError(f'{type_} (unresolved string annotation)')
        if is_custom_type(type_):
            from blobtree.blob_types.custom_blob_type import CustomBlobType
            return CustomBlobType._from_type(type_, type_map=type_map)
        aliased_type = type_map.alias_map.get(type_, type_) if _is_hashable(type_) else type_
        origin = get_origin(aliased_type) or aliased_type
        if origin is Union:
            origin = UnionType
        if _is_hashable(origin) and origin in type_map.blob_types_map:
            blob_type_class = type_map.blob_types_map[origin]
            return blob_type_class._from_type(aliased_type, type_map=type_map)
        if isinstance(origin, type) and is_dataclass(origin):
            from blobtree.blob_types.record_blob_type import RecordBlobType
            return RecordBlobType._from_type(origin, type_map=type_map)
        raise UnsupportedTypeError(pretty_type(type_))

    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: TypeMap) -> Self:
        """ Instantiate a BlobType instance from a type signature.

        Compound types are expected to inspect the annotation's arguments and use `BlobType.from_type` on each of them,
        forwarding the given `type_map`.
        """
        # XXX: a BlobType that is only meant for local use does not need to implement _from_type
        raise TypeError(f'{cls} is not compatible with use in a BlobType.TypeMap')

    @final
    def is_container(self) -> bool:
        """ Whether a record field of this type is embedded as refs to its elements (unless marked `external`).
        """
        return self.kind in (Kind.SEQUENCE, Kind.MAPPING)

    def zero_value(self) -> T:
        """ The value an unset destination of this kind holds.
        """
        raise NotImplementedError

    def is_zero(self, value: T, /) -> bool:
        """ Whether `value` is the zero value of this kind, this decides `omitempty`.
        """
        return bool(value == self.zero_value())

    @abstractmethod
    def encode(self, ctx: Context, encoder: Encoder, value: T, /) -> BlobRef:
        """ Store `value`, including any children, and return the ref of its root blob.

        Children must be encoded with `encoder.encode_value` so hooks and cancellation are checked on every level.
        """
        raise NotImplementedError

    def decode(self, ctx: Context, decoder: Decoder, ref: BlobRef, current: T | None = None, /) -> T:
        """ Rebuild a value from the blob named by `ref`.

        `current` is the value the destination holds before decoding, only mappings and records make use of it, to
        merge into existing dicts and to keep skipped fields of existing records.

        By default the blob is fetched and `_decode_data` is called, kinds that don't need the data override this.
        """
        data = decoder.fetch(ctx, ref)
        return self._decode_data(ctx, decoder, data, current)

    def _decode_data(self, ctx: Context, decoder: Decoder, data: bytes, current: T | None, /) -> T:
        """ Inner implementation of `decode` for kinds that parse the blob's data.
        """
        raise NotImplementedError

    # these are optional to implement, but are needed for use in inline fields

    def to_literal(self, value: T, /) -> Json:
        """ Convert a value to a plain object compatible with `json.dumps`.
        """
        raise UnsupportedTypeError(f'{self!r} (as inline literal)')

    def from_literal(self, json_value: Json, /) -> T:
        """ Convert a value that comes out from `json.loads` into the value that this class represents.

        Should raise a DecodingError if `json_value` does not have the expected shape.
        """
        raise UnsupportedTypeError(f'{self!r} (from inline literal)')

    def __repr__(self) -> str:
        return f'{type(self).__name__}()'


def _is_hashable(obj: Any) -> bool:
    try:
        hash(obj)
    except TypeError:
        return False
    return True


def json_type_name(json_value: BlobType.Json) -> str:
    """ Name of the JSON type of a parsed value, used in shape mismatch messages.

    >>> json_type_name([]), json_type_name('a'), json_type_name(None), json_type_name(True), json_type_name(1.5)
    ('array', 'string', 'null', 'bool', 'number')
    """
    if json_value is None:
        return 'null'
    if isinstance(json_value, bool):
        return 'bool'
    if isinstance(json_value, (int, float)):
        return 'number'
    if isinstance(json_value, str):
        return 'string'
    if isinstance(json_value, list):
        return 'array'
    return 'object'
