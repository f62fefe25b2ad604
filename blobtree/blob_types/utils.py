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

from collections.abc import Mapping
from types import NoneType, UnionType
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from blobtree.blob_types.blob_type import BlobType

TypeAliasMap: TypeAlias = Mapping[Any, Any]
TypeToBlobTypeMap: TypeAlias = Mapping[Any, type['BlobType']]


def pretty_type(type_: Any) -> str:
    """ Shows a cleaner string representation for a type.

    >>> pretty_type(int)
    'int'
    >>> pretty_type(dict[str, int])
    'dict[str, int]'
    >>> pretty_type(None)
    'None'
    >>> pretty_type(complex | None)
    'complex | None'
    """
    if type_ is NoneType or type_ is None:
        return 'None'
    elif hasattr(type_, '__args__') or isinstance(type_, UnionType):
        return str(type_)
    elif hasattr(type_, '__name__'):
        return type_.__name__
    else:
        return repr(type_)
