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

import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from structlog import get_logger

from blobtree.exception import BlobNotFoundError, ParseError
from blobtree.store.base import BlobStore
from blobtree.store.ref import BlobRef

logger = get_logger()

_SUFFIX = '.dat'


class DirectoryBlobStore(BlobStore):
    """ Stores each blob in its own file under `root`.

    Files are named by the text form of their ref and sharded in subdirectories by the first two bytes of the digest:

        <root>/<hash name>/<hex[0:2]>/<hex[2:4]>/<hash name>-<hex>.dat

    Writes go to a temporary file that is then renamed into place, so a concurrent put of the same blob is harmless.
    """

    def __init__(self, root: Union[str, Path], *, hash_name: Optional[str] = None) -> None:
        self.log = logger.new()
        self.root = Path(root)
        if hash_name is None:
            from blobtree.conf.get_settings import get_global_settings
            hash_name = get_global_settings().HASH_NAME
        self.hash_name = hash_name
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, ref: BlobRef) -> Path:
        hex_digest = ref.hex()
        return self.root / ref.hash_name / hex_digest[0:2] / hex_digest[2:4] / f'{ref}{_SUFFIX}'

    def put(self, data: bytes) -> BlobRef:
        ref = BlobRef.from_data(data, self.hash_name)
        path = self._path(ref)
        if path.exists():
            return ref
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix='.tmp-')
        try:
            with os.fdopen(fd, 'wb') as tmp_file:
                tmp_file.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        self.log.debug('blob written', ref=str(ref), path=str(path))
        return ref

    def fetch(self, ref: BlobRef) -> tuple[BinaryIO, int]:
        path = self._path(ref)
        try:
            stream = open(path, 'rb')
        except FileNotFoundError as e:
            raise BlobNotFoundError(ref) from e
        return stream, os.fstat(stream.fileno()).st_size

    def iter_refs(self) -> Iterator[BlobRef]:
        for path in self.root.glob(f'*/*/*/*{_SUFFIX}'):
            try:
                yield BlobRef.parse(path.name[:-len(_SUFFIX)])
            except (ParseError, ValueError):
                self.log.warning('ignoring unexpected file in store', path=str(path))

    def __contains__(self, ref: BlobRef) -> bool:
        return self._path(ref).exists()
