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

import hashlib
import re
from dataclasses import dataclass

from blobtree.exception import ParseError

# hash name -> digest size in bytes
SUPPORTED_HASHES: dict[str, int] = {
    'sha1': 20,
    'sha224': 28,
    'sha256': 32,
}

_REF_REGEX = re.compile(r'^([a-z0-9]+)-([0-9a-f]+)$')


@dataclass(frozen=True, slots=True)
class BlobRef:
    """ Immutable content-derived name of exactly one blob.

    The text form is `<hash name>-<lowercase hex digest>`, e.g. `sha224-d14a028c2a3a2bc9476102bb288234c415a2b01f828ea62
    ac5b3e42f`, this is also how a ref is written inside container and record blobs.
    """

    hash_name: str
    digest: bytes

    def __post_init__(self) -> None:
        size = SUPPORTED_HASHES.get(self.hash_name)
        if size is None:
            raise ValueError(f'unsupported hash {self.hash_name!r}')
        if len(self.digest) != size:
            raise ValueError(f'{self.hash_name} digest must have {size} bytes, got {len(self.digest)}')

    @classmethod
    def from_data(cls, data: bytes, hash_name: str = 'sha224') -> 'BlobRef':
        """ Compute the ref that names `data`.
        """
        if hash_name not in SUPPORTED_HASHES:
            raise ValueError(f'unsupported hash {hash_name!r}')
        return cls(hash_name, hashlib.new(hash_name, data).digest())

    @classmethod
    def parse(cls, text: str) -> 'BlobRef':
        """ Parse the text form of a ref.

        >>> BlobRef.parse('sha1-da39a3ee5e6b4b0d3255bfef95601890afd80709') == BlobRef.from_data(b'', 'sha1')
        True
        >>> BlobRef.parse('not a ref')
        Traceback (most recent call last):
        ...
        blobtree.exception.ParseError: invalid blob ref 'not a ref'
        """
        match = _REF_REGEX.match(text)
        if match is None:
            raise ParseError(f'invalid blob ref {text!r}')
        hash_name, hex_digest = match.groups()
        try:
            return cls(hash_name, bytes.fromhex(hex_digest))
        except ValueError as e:
            raise ParseError(f'invalid blob ref {text!r}') from e

    def hex(self) -> str:
        return self.digest.hex()

    def __str__(self) -> str:
        return f'{self.hash_name}-{self.digest.hex()}'

    def __repr__(self) -> str:
        return f'BlobRef({str(self)!r})'
