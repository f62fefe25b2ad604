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

from typing import Any, Generic, NewType, TypeVar

T = TypeVar('T')

# Sized numeric kinds. A plain `int` annotation is treated as Int64 and a plain `float` as Float64.
Int8 = NewType('Int8', int)
Int16 = NewType('Int16', int)
Int32 = NewType('Int32', int)
Int64 = NewType('Int64', int)
Uint8 = NewType('Uint8', int)
Uint16 = NewType('Uint16', int)
Uint32 = NewType('Uint32', int)
Uint64 = NewType('Uint64', int)
Float32 = NewType('Float32', float)
Float64 = NewType('Float64', float)


class Slot(Generic[T]):
    """ A writable destination of a statically known type.

    This is what `Decoder.decode_into` fills when the destination is not a dataclass instance:

    >>> slot = Slot(list[str])
    >>> slot.value is None
    True
    >>> slot.value = ['foo']
    >>> slot
    Slot(list[str], ['foo'])
    """

    __slots__ = ('type_', 'value')

    def __init__(self, type_: Any, value: Any = None) -> None:
        self.type_ = type_
        self.value = value

    def __repr__(self) -> str:
        type_name = getattr(self.type_, '__name__', None) if not hasattr(self.type_, '__args__') else None
        return f'Slot({type_name or self.type_}, {self.value!r})'
