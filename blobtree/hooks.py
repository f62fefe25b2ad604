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

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from blobtree.context import Context
    from blobtree.store import BlobRef, BlobStore


@runtime_checkable
class Marshaler(Protocol):
    """ A value that knows how to store itself.

    When the encoder meets a value implementing this protocol it calls `blob_marshal` and returns its result as is, the
    generic traversal is skipped for the value and everything below it.
    """

    def blob_marshal(self, ctx: Context, store: BlobStore) -> BlobRef:
        ...


@runtime_checkable
class Unmarshaler(Protocol):
    """ A value that knows how to populate itself from a tree of blobs.

    The decoder builds an empty instance with `cls()` and calls `blob_unmarshal` on it, so implementing classes must be
    constructible without arguments.
    """

    def blob_unmarshal(self, ctx: Context, store: BlobStore, ref: BlobRef) -> None:
        ...


def is_marshaler(value: Any) -> bool:
    # XXX: classes themselves have the method too, only instances count
    return not isinstance(value, type) and isinstance(value, Marshaler)


def is_custom_type(type_: Any) -> bool:
    """ Whether instances of `type_` implement at least one of the hooks.
    """
    if not isinstance(type_, type):
        return False
    return callable(getattr(type_, 'blob_marshal', None)) or callable(getattr(type_, 'blob_unmarshal', None))
