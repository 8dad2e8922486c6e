# Copyright 2026 Cisco Systems, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""
Stream helpers shared by the dispatcher and the walkers.

Entry bodies are buffered in memory before recursion because archive
sub-streams (ZIP in particular) cannot be rewound independently.  Buffering
is bounded per entry and, optionally, across a whole evaluation.
"""

from __future__ import annotations

import io
import logging
import time
from collections.abc import Callable
from typing import IO

from .exceptions import EntryTooLargeError, StreamDeadlineExceeded, WorkBudgetExceeded

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024


def stream_length(stream: IO[bytes]) -> int:
    """Return the total length of a seekable stream, preserving its position."""
    pos = stream.tell()
    try:
        return stream.seek(0, io.SEEK_END)
    finally:
        stream.seek(pos)


def read_bounded(body: IO[bytes], limit: int) -> bytes:
    """Read *body* to EOF, refusing to buffer more than *limit* bytes.

    Raises:
        EntryTooLargeError: if the body is longer than *limit*.
    """
    buf = bytearray()
    while True:
        chunk = body.read(min(READ_CHUNK_SIZE, limit + 1 - len(buf)))
        if not chunk:
            break
        buf += chunk
        if len(buf) > limit:
            raise EntryTooLargeError(f"entry exceeds {limit} bytes")
    return bytes(buf)


class WorkBudget:
    """Aggregate byte counter for a single top-level evaluation."""

    def __init__(self, limit: int | None = None):
        self.limit = limit
        self.spent = 0

    def charge(self, nbytes: int) -> None:
        self.spent += nbytes
        if self.limit is not None and self.spent > self.limit:
            raise WorkBudgetExceeded(f"buffered {self.spent} bytes, budget is {self.limit}")

    @property
    def remaining(self) -> int | None:
        if self.limit is None:
            return None
        return max(self.limit - self.spent, 0)


class DeadlineReader(io.RawIOBase):
    """Seekable reader that stops working once a time budget has elapsed.

    The engine has no timeouts of its own.  Wrap the caller's stream in a
    ``DeadlineReader`` and every ``read``/``seek`` after the deadline raises
    :class:`StreamDeadlineExceeded`; the dispatcher reports the evaluation as
    ``MALFORMED``.

    Usage::

        with open("attachment.bin", "rb") as fh:
            verdict = evaluate(DeadlineReader(fh, seconds=2.0), policy)
    """

    def __init__(self, raw: IO[bytes], seconds: float, clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self._raw = raw
        self._clock = clock
        self.deadline = clock() + seconds

    def _check(self) -> None:
        if self._clock() > self.deadline:
            logger.debug("Stream deadline exceeded")
            raise StreamDeadlineExceeded("stream read deadline exceeded")

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        self._check()
        return self._raw.read(size)

    def readinto(self, b) -> int:
        data = self.read(len(b))
        n = len(data)
        b[:n] = data
        return n

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check()
        return self._raw.seek(offset, whence)

    def tell(self) -> int:
        return self._raw.tell()
