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

"""
Numbers are stored as their canonical base-10 text: no leading `+`, no leading zeros, and floats in plain decimal
notation (never with an exponent) using the fewest digits that parse back to the same value at the given width.
"""

from __future__ import annotations

import math
import re
import struct
from decimal import Decimal
from typing import TYPE_CHECKING, Any, ClassVar

from typing_extensions import Self, override

from blobtree.blob_types.blob_type import BlobType, Kind, json_type_name
from blobtree.exception import DecodingError, ParseError, UnsupportedValueError

if TYPE_CHECKING:
    from blobtree.context import Context
    from blobtree.decoder import Decoder
    from blobtree.encoder import Encoder
    from blobtree.store import BlobRef

_SIGNED_INT_REGEX = re.compile(r'^[+-]?[0-9]+$')
_UNSIGNED_INT_REGEX = re.compile(r'^[0-9]+$')
_FLOAT_REGEX = re.compile(r'^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?$')
_FLOAT_SPECIAL_REGEX = re.compile(r'^[+-]?(inf|infinity|nan)$', re.IGNORECASE)


def int_bounds(bits: int, signed: bool) -> tuple[int, int]:
    """ Inclusive range of an integer kind.

    >>> int_bounds(8, True)
    (-128, 127)
    >>> int_bounds(16, False)
    (0, 65535)
    """
    if signed:
        return -(2**(bits - 1)), 2**(bits - 1) - 1
    return 0, 2**bits - 1


def parse_int(text: str, *, bits: int, signed: bool) -> int:
    """ Parse base-10 integer text that must fit in the given width.

    >>> parse_int('-17', bits=32, signed=True)
    -17
    >>> parse_int('256', bits=8, signed=False)
    Traceback (most recent call last):
    ...
    blobtree.exception.ParseError: parsing uint8 from '256': value out of range
    """
    name = f'{"" if signed else "u"}int{bits}'
    regex = _SIGNED_INT_REGEX if signed else _UNSIGNED_INT_REGEX
    if not regex.match(text):
        raise ParseError(f'parsing {name} from {text!r}: invalid syntax')
    value = int(text)
    lower, upper = int_bounds(bits, signed)
    if not lower <= value <= upper:
        raise ParseError(f'parsing {name} from {text!r}: value out of range')
    return value


def to_float32(value: float) -> float:
    """ Round a float to the nearest float32, raises OverflowError when it doesn't fit.
    """
    return struct.unpack('<f', struct.pack('<f', value))[0]


def _shortest_float32_repr(value: float) -> str:
    for precision in range(1, 10):
        text = f'{value:.{precision}g}'
        if to_float32(float(text)) == value:
            return text
    return repr(value)


def format_float(value: float, *, bits: int) -> str:
    """ Canonical text of a float: shortest round-tripping digits, plain decimal notation.

    >>> format_float(1.0, bits=64), format_float(0.1, bits=64), format_float(-0.0, bits=64)
    ('1', '0.1', '-0')
    >>> format_float(1e21, bits=64)
    '1000000000000000000000'
    >>> format_float(1e-7, bits=64)
    '0.0000001'
    >>> format_float(to_float32(0.1), bits=32)
    '0.1'
    >>> format_float(math.inf, bits=64), format_float(-math.inf, bits=32), format_float(math.nan, bits=64)
    ('+Inf', '-Inf', 'NaN')
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return '+Inf' if value > 0 else '-Inf'
    text = _shortest_float32_repr(value) if bits == 32 else repr(value)
    number = Decimal(text)
    if number == 0:
        return '-0' if number.is_signed() else '0'
    return format(number.normalize(), 'f')


def parse_float(text: str, *, bits: int) -> float:
    """ Parse decimal float text at the given width.

    >>> parse_float('1.5', bits=64), parse_float('-Inf', bits=64), parse_float('1e2', bits=32)
    (1.5, -inf, 100.0)
    >>> parse_float('1e39', bits=32)
    Traceback (most recent call last):
    ...
    blobtree.exception.ParseError: parsing float32 from '1e39': value out of range
    """
    name = f'float{bits}'
    if _FLOAT_SPECIAL_REGEX.match(text):
        value = float(text)
    elif _FLOAT_REGEX.match(text):
        value = float(text)
        if math.isinf(value):
            raise ParseError(f'parsing {name} from {text!r}: value out of range')
    else:
        raise ParseError(f'parsing {name} from {text!r}: invalid syntax')
    if bits == 32 and math.isfinite(value):
        try:
            value = to_float32(value)
        except OverflowError:
            raise ParseError(f'parsing {name} from {text!r}: value out of range')
    return value


def _decode_text(data: bytes, name: str) -> str:
    try:
        return data.decode('ascii')
    except UnicodeDecodeError as e:
        raise ParseError(f'parsing {name} from {data!r}: invalid syntax') from e


class _SizedIntBlobType(BlobType[int]):
    """ Base class for classes that represent builtin `int` values with a fixed size and signedness.
    """

    # XXX: subclass must define these values:
    _signed: ClassVar[bool]
    _bits: ClassVar[int]

    @property
    def type_name(self) -> str:
        return f'{"" if self._signed else "u"}int{self._bits}'

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BlobType.TypeMap) -> Self:
        return cls()

    @override
    def zero_value(self) -> int:
        return 0

    def check_value(self, value: Any) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise UnsupportedValueError(f'expected {self.type_name}, got {type(value).__name__}')
        lower, upper = int_bounds(self._bits, self._signed)
        if not lower <= value <= upper:
            raise UnsupportedValueError(f'{value} does not fit in {self.type_name}')
        return value

    @override
    def encode(self, ctx: Context, encoder: Encoder, value: int, /) -> BlobRef:
        self.check_value(value)
        return encoder.put(ctx, str(value).encode('ascii'), 'int val')

    @override
    def _decode_data(self, ctx: Context, decoder: Decoder, data: bytes, current: int | None, /) -> int:
        return self.parse_text(_decode_text(data, self.type_name))

    def parse_text(self, text: str) -> int:
        return parse_int(text, bits=self._bits, signed=self._signed)

    @override
    def to_literal(self, value: int, /) -> BlobType.Json:
        return self.check_value(value)

    @override
    def from_literal(self, json_value: BlobType.Json, /) -> int:
        if not isinstance(json_value, int) or isinstance(json_value, bool):
            raise DecodingError(f'expected {self.type_name}, found {json_type_name(json_value)}')
        lower, upper = int_bounds(self._bits, self._signed)
        if not lower <= json_value <= upper:
            raise DecodingError(f'{json_value} overflows {self.type_name}')
        return json_value


class Int8BlobType(_SizedIntBlobType):
    kind = Kind.INT
    _signed = True
    _bits = 8


class Int16BlobType(_SizedIntBlobType):
    kind = Kind.INT
    _signed = True
    _bits = 16


class Int32BlobType(_SizedIntBlobType):
    kind = Kind.INT
    _signed = True
    _bits = 32


class Int64BlobType(_SizedIntBlobType):
    kind = Kind.INT
    _signed = True
    _bits = 64


class Uint8BlobType(_SizedIntBlobType):
    kind = Kind.UINT
    _signed = False
    _bits = 8


class Uint16BlobType(_SizedIntBlobType):
    kind = Kind.UINT
    _signed = False
    _bits = 16


class Uint32BlobType(_SizedIntBlobType):
    kind = Kind.UINT
    _signed = False
    _bits = 32


class Uint64BlobType(_SizedIntBlobType):
    kind = Kind.UINT
    _signed = False
    _bits = 64


class _SizedFloatBlobType(BlobType[float]):
    """ Base class for float kinds, values of the 32-bit kind are rounded to float32 when stored.
    """

    kind = Kind.FLOAT
    _bits: ClassVar[int]

    @property
    def type_name(self) -> str:
        return f'float{self._bits}'

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: BlobType.TypeMap) -> Self:
        return cls()

    @override
    def zero_value(self) -> float:
        return 0.0

    @override
    def is_zero(self, value: float, /) -> bool:
        # -0.0 is a distinct value, only +0.0 is zero
        return value == 0 and math.copysign(1.0, value) > 0

    def check_value(self, value: Any) -> float:
        # XXX: ints are accepted like the `float` annotation accepts them
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise UnsupportedValueError(f'expected {self.type_name}, got {type(value).__name__}')
        value = float(value)
        if self._bits == 32 and math.isfinite(value):
            try:
                value = to_float32(value)
            except OverflowError:
                raise UnsupportedValueError(f'{value} does not fit in {self.type_name}')
        return value

    @override
    def encode(self, ctx: Context, encoder: Encoder, value: float, /) -> BlobRef:
        text = format_float(self.check_value(value), bits=self._bits)
        return encoder.put(ctx, text.encode('ascii'), f'{self.type_name} val')

    @override
    def _decode_data(self, ctx: Context, decoder: Decoder, data: bytes, current: float | None, /) -> float:
        return parse_float(_decode_text(data, self.type_name), bits=self._bits)

    @override
    def to_literal(self, value: float, /) -> BlobType.Json:
        value = self.check_value(value)
        if not math.isfinite(value):
            raise UnsupportedValueError(f'{value} cannot be written as a JSON number')
        return value

    @override
    def from_literal(self, json_value: BlobType.Json, /) -> float:
        if not isinstance(json_value, (int, float)) or isinstance(json_value, bool):
            raise DecodingError(f'expected {self.type_name}, found {json_type_name(json_value)}')
        try:
            return self.check_value(json_value)
        except UnsupportedValueError as e:
            raise DecodingError(f'{json_value} overflows {self.type_name}') from e


class Float32BlobType(_SizedFloatBlobType):
    _bits = 32


class Float64BlobType(_SizedFloatBlobType):
    _bits = 64
