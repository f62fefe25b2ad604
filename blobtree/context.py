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

import threading
import time
from typing import Optional

from blobtree.exception import CancelledError


class Context:
    """ Cancellation signal that is threaded through every encode/decode call.

    A context can be cancelled from any thread, the traversal checks it before every store operation and before
    descending into every child, the first check after cancellation raises `CancelledError`.
    """

    __slots__ = ('_event', '_deadline', '_parent')

    def __init__(self, *, timeout: Optional[float] = None, parent: Optional['Context'] = None) -> None:
        self._event = threading.Event()
        self._parent = parent
        self._deadline: Optional[float] = None
        if timeout is not None:
            self._deadline = time.monotonic() + timeout
        if parent is not None and parent._deadline is not None:
            if self._deadline is None or parent._deadline < self._deadline:
                self._deadline = parent._deadline

    @classmethod
    def background(cls) -> 'Context':
        """ A context that is never cancelled unless `cancel()` is called on it.
        """
        return cls()

    def with_timeout(self, timeout: float) -> 'Context':
        """ Derive a child context that is cancelled with this one or when `timeout` seconds elapse.
        """
        return Context(timeout=timeout, parent=self)

    def cancel(self) -> None:
        self._event.set()

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def is_cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._parent is not None and self._parent.is_cancelled():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def check(self) -> None:
        """ Raise `CancelledError` if the context was cancelled or its deadline was exceeded.
        """
        if self._event.is_set() or (self._parent is not None and self._parent.is_cancelled()):
            raise CancelledError()
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise CancelledError('context deadline exceeded')
