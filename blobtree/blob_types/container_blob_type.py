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
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from typing_extensions import override

from blobtree.blob_types.blob_type import BlobType, json_type_name
from blobtree.exception import DecodingError, ParseError
from blobtree.store.ref import BlobRef

if TYPE_CHECKING:
    from blobtree.context import Context
    from blobtree.decoder import Decoder
    from blobtree.encoder import Encoder

C = TypeVar('C')
R = TypeVar('R')


def parse_ref(json_value: Any) -> BlobRef:
    """ Parse one ref out of a container or record blob, anything but a string is a shape mismatch.
    """
    if not isinstance(json_value, str):
        raise DecodingError(f'expected a blob ref, found {json_type_name(json_value)}')
    try:
        return BlobRef.parse(json_value)
    except ParseError as e:
        raise DecodingError(f'invalid blob ref {json_value!r}') from e


class ContainerBlobType(BlobType[C], Generic[C, R]):
    """ Base class for sequences and mappings.

    A container is stored as the JSON of its element refs (`R` is the shape of those refs once parsed, a list or a
    dict). The same JSON is what gets embedded in a record for a container field that is not marked `external`, so
    the methods that produce and consume it are public and used by RecordBlobType.

    `None` is the null container: at the top level it's stored as the empty blob, and as `null` inside a record.
    """

    # XXX: subclasses must initialize this property, it names the blob in logs and error messages
    blob_name: ClassVar[str]

    @abstractmethod
    def encode_refs(self, ctx: Context, encoder: Encoder, value: C | None, /) -> BlobType.Json:
        """ Encode each element and return the JSON shape of their refs, `None` for a null container.
        """
        raise NotImplementedError

    @abstractmethod
    def parse_refs(self, json_value: BlobType.Json, /) -> R | None:
        """ Validate the JSON shape of element refs, `None` means a null container.
        """
        raise NotImplementedError

    @abstractmethod
    def build(self, ctx: Context, decoder: Decoder, refs: R | None, current: C | None, /) -> C:
        """ Decode each element ref into a new container, or into `current` where the container kind allows it.
        """
        raise NotImplementedError

    @override
    def zero_value(self) -> Any:
        return None

    @override
    def is_zero(self, value: C | None, /) -> bool:
        return value is None

    @override
    def encode(self, ctx: Context, encoder: Encoder, value: C | None, /) -> BlobRef:
        if value is None:
            return encoder.put(ctx, b'', f'null {self.blob_name}')
        refs = self.encode_refs(ctx, encoder, value)
        return encoder.put(ctx, encoder.dump_json(refs, self.blob_name), self.blob_name)

    @override
    def _decode_data(self, ctx: Context, decoder: Decoder, data: bytes, current: C | None, /) -> C:
        if not data and decoder.settings.DECODE_EMPTY_CONTAINER_AS_NULL:
            return self.build(ctx, decoder, None, current)
        json_value = decoder.load_json(data, self.blob_name)
        return self.build(ctx, decoder, self.parse_refs(json_value), current)
