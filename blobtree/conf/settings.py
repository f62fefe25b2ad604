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

from pathlib import Path
from typing import Union

from pydantic import field_validator

from blobtree.store.ref import SUPPORTED_HASHES
from blobtree.utils import pydantic


class CodecSettings(pydantic.BaseModel):
    # Escape <, > and & inside container and record blobs, as JSON meant to be embedded in HTML would.
    ESCAPE_HTML: bool = False

    # When either is non-empty, container and record blobs are written indented. Each line after the first starts with
    # JSON_PREFIX, and JSON_INDENT is repeated once per nesting level.
    JSON_PREFIX: str = ''
    JSON_INDENT: str = ''

    # Hash used by the bundled stores to name blobs.
    HASH_NAME: str = 'sha224'

    # A zero-length blob decoded into a sequence or mapping yields None (a null container). When disabled, such blobs
    # fail to parse like any other malformed container blob.
    DECODE_EMPTY_CONTAINER_AS_NULL: bool = True

    @field_validator('JSON_INDENT')
    @classmethod
    def _validate_json_indent(cls, indent: str) -> str:
        if any(char in indent for char in '<>&\u2028\u2029'):
            raise ValueError(f'JSON_INDENT cannot contain characters that are escaped in JSON blobs, got {indent!r}')
        return indent

    @field_validator('HASH_NAME')
    @classmethod
    def _validate_hash_name(cls, hash_name: str) -> str:
        if hash_name not in SUPPORTED_HASHES:
            raise ValueError(f'HASH_NAME must be one of {sorted(SUPPORTED_HASHES)}, got {hash_name!r}')
        return hash_name

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'CodecSettings':
        """Takes a filepath to a yaml file and returns a validated CodecSettings instance."""
        from blobtree.utils.yaml import dict_from_extended_yaml
        settings_dict = dict_from_extended_yaml(filepath=filepath)
        return cls.model_validate(settings_dict)
