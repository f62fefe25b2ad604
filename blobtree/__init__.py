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


from blobtree.context import Context
from blobtree.decoder import Decoder
from blobtree.encoder import Encoder
from blobtree.exception import (
    BlobNotFoundError,
    BlobTreeError,
    CancelledError,
    DecodingError,
    NotWritableDestinationError,
    NullDestinationError,
    ParseError,
    StoreError,
    UnsupportedTypeError,
    UnsupportedValueError,
)
from blobtree.hooks import Marshaler, Unmarshaler
from blobtree.marshal import marshal, unmarshal, unmarshal_into
from blobtree.store import BlobRef, BlobStore, DirectoryBlobStore, MemoryBlobStore
from blobtree.tag import blob_field
from blobtree.types import Float32, Float64, Int8, Int16, Int32, Int64, Slot, Uint8, Uint16, Uint32, Uint64
from blobtree.version import __version__

__all__ = [
    'BlobNotFoundError',
    'BlobRef',
    'BlobStore',
    'BlobTreeError',
    'CancelledError',
    'Context',
    'DecodingError',
    'Decoder',
    'DirectoryBlobStore',
    'Encoder',
    'Float32',
    'Float64',
    'Int8',
    'Int16',
    'Int32',
    'Int64',
    'Marshaler',
    'MemoryBlobStore',
    'NotWritableDestinationError',
    'NullDestinationError',
    'ParseError',
    'Slot',
    'StoreError',
    'Uint8',
    'Uint16',
    'Uint32',
    'Uint64',
    'UnsupportedTypeError',
    'UnsupportedValueError',
    'Unmarshaler',
    '__version__',
    'blob_field',
    'marshal',
    'unmarshal',
    'unmarshal_into',
]
