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


import functools
from types import UnionType
from typing import Any, TypeVar, Union

from blobtree.blob_types.blob_type import BlobType, Kind
from blobtree.blob_types.bool_blob_type import BoolBlobType
from blobtree.blob_types.container_blob_type import ContainerBlobType
from blobtree.blob_types.custom_blob_type import CustomBlobType
from blobtree.blob_types.dynamic_blob_type import DynamicBlobType
from blobtree.blob_types.map_blob_type import DictBlobType
from blobtree.blob_types.number_blob_type import (
    Float32BlobType,
    Float64BlobType,
    Int8BlobType,
    Int16BlobType,
    Int32BlobType,
    Int64BlobType,
    Uint8BlobType,
    Uint16BlobType,
    Uint32BlobType,
    Uint64BlobType,
)
from blobtree.blob_types.optional_blob_type import OptionalBlobType
from blobtree.blob_types.record_blob_type import RecordBlobType
from blobtree.blob_types.sequence_blob_type import ListBlobType, TupleBlobType, VarTupleBlobType
from blobtree.blob_types.text_blob_type import BytesBlobType, StrBlobType
from blobtree.blob_types.utils import TypeAliasMap, TypeToBlobTypeMap
from blobtree.types import Float32, Float64, Int8, Int16, Int32, Int64, Uint8, Uint16, Uint32, Uint64

__all__ = [
    'DEFAULT_TYPE_ALIAS_MAP',
    'DEFAULT_TYPE_TO_BLOB_TYPE_MAP',
    'BlobType',
    'BoolBlobType',
    'BytesBlobType',
    'ContainerBlobType',
    'CustomBlobType',
    'DictBlobType',
    'DynamicBlobType',
    'Float32BlobType',
    'Float64BlobType',
    'Int8BlobType',
    'Int16BlobType',
    'Int32BlobType',
    'Int64BlobType',
    'Kind',
    'ListBlobType',
    'OptionalBlobType',
    'RecordBlobType',
    'StrBlobType',
    'TupleBlobType',
    'TypeAliasMap',
    'TypeToBlobTypeMap',
    'Uint8BlobType',
    'Uint16BlobType',
    'Uint32BlobType',
    'Uint64BlobType',
    'VarTupleBlobType',
    'make_blob_type',
]

T = TypeVar('T')

DEFAULT_TYPE_ALIAS_MAP: TypeAliasMap = {
    # XXX: technically types.UnionType is not a type, so mypy complains, but for our purposes it is a type
    Union: UnionType,  # type: ignore[dict-item]
    # plain builtin numbers have the widest kinds
    int: Int64,
    float: Float64,
    bytearray: bytes,
    object: Any,
}

# Mapping between types and BlobType classes, dataclasses and custom types are handled by BlobType.from_type.
DEFAULT_TYPE_TO_BLOB_TYPE_MAP: TypeToBlobTypeMap = {
    # builtin types:
    bool: BoolBlobType,
    bytes: BytesBlobType,
    dict: DictBlobType,
    list: ListBlobType,
    str: StrBlobType,
    tuple: TupleBlobType,
    # XXX: ignored dict-item because Union is not considered a type, so mypy fails it, but it works for our case
    Union: OptionalBlobType,  # type: ignore[dict-item]
    UnionType: OptionalBlobType,
    Any: DynamicBlobType,
    # sized numbers:
    Int8: Int8BlobType,
    Int16: Int16BlobType,
    Int32: Int32BlobType,
    Int64: Int64BlobType,
    Uint8: Uint8BlobType,
    Uint16: Uint16BlobType,
    Uint32: Uint32BlobType,
    Uint64: Uint64BlobType,
    Float32: Float32BlobType,
    Float64: Float64BlobType,
}

_DEFAULT_TYPE_MAP = BlobType.TypeMap(DEFAULT_TYPE_ALIAS_MAP, DEFAULT_TYPE_TO_BLOB_TYPE_MAP, {})


@functools.cache
def make_blob_type(type_: type[T] | Any, /) -> BlobType[T]:
    """ Like BlobType.from_type, but with the default maps, results are cached per annotation.

    If you need to customize the mapping use `BlobType.from_type` instead.
    """
    return BlobType.from_type(type_, type_map=_DEFAULT_TYPE_MAP)
