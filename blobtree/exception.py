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
Exceptions raised by the encoder, the decoder and the blob stores.

Errors are never recovered from inside the codec, they travel up to the caller of `marshal`/`unmarshal`. On the way up
every recursive frame adds a line of context (which field, which container index, which ref) to the same exception
object and re-raises it, so the exception type and its `__cause__` are preserved and `str(err)` reads from the outermost
frame to the innermost one, e.g.:

    decoding ref sha224-... for field b: parsing int64 from 'x'
"""

from typing import TYPE_CHECKING, Optional

from typing_extensions import Self

if TYPE_CHECKING:
    from blobtree.store.ref import BlobRef


class BlobTreeError(Exception):
    """Base class for exceptions in blobtree."""

    def __init__(self, message: str = '') -> None:
        super().__init__(message)
        self.message = message
        self.context: list[str] = []

    def add_context(self, context: str) -> Self:
        """ Record what the calling frame was doing, outermost context goes first.
        """
        self.context.insert(0, context)
        return self

    def __str__(self) -> str:
        parts = [*self.context]
        if self.message:
            parts.append(self.message)
        if self.__cause__ is not None:
            parts.append(str(self.__cause__))
        return ': '.join(parts)


class UnsupportedTypeError(BlobTreeError):
    """Raised when a type (or the kind of a runtime value) cannot be represented as blobs."""

    def __init__(self, name: str = '') -> None:
        self.name = name
        super().__init__(f'unsupported type "{name}"' if name else 'unsupported type')


class UnsupportedValueError(UnsupportedTypeError):
    """Raised when the type is supported but the given value has no representation, like a null reference."""

    def __init__(self, reason: str) -> None:
        BlobTreeError.__init__(self, f'unsupported value: {reason}')
        self.name = ''
        self.reason = reason


class NotWritableDestinationError(BlobTreeError):
    """Raised when decoding into something that is not a writable slot."""

    def __init__(self, destination_type: Optional[type] = None) -> None:
        detail = f' ({destination_type.__name__})' if destination_type is not None else ''
        super().__init__(f'destination is not writable{detail}')


class NullDestinationError(BlobTreeError):
    """Raised when decoding into `None`."""

    def __init__(self) -> None:
        super().__init__('destination is None')


class ParseError(BlobTreeError):
    """Raised when numeric text or the JSON of a container or record blob cannot be parsed."""
    pass


class DecodingError(BlobTreeError):
    """Raised when the shape of the stored data does not match the destination kind."""

    def __init__(self, message: str) -> None:
        super().__init__(f'decoding: {message}')


class StoreError(BlobTreeError):
    """Raised when a blob store put or fetch fails."""
    pass


class BlobNotFoundError(StoreError):
    """Raised when a ref cannot be resolved in a blob store."""

    def __init__(self, ref: 'BlobRef') -> None:
        self.ref = ref
        super().__init__(f'blob not found: {ref}')


class CancelledError(BlobTreeError):
    """Raised when the context of an encode/decode call has been cancelled."""

    def __init__(self, reason: str = 'context canceled') -> None:
        super().__init__(reason)
