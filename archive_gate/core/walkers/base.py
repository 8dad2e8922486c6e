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
Base walker interface for archive formats.

A walker probes a stream for its format, then walks the entries in archive
order: every entry name is checked against the extension policy before its
body is touched, and every readable body is handed back to the dispatcher
as a potential nested archive.
"""

from __future__ import annotations

import logging
import zlib
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import IO, TYPE_CHECKING, Any

from ..exceptions import (
    EntryReadError,
    EntryTooLargeError,
    MalformedArchiveError,
    UnrecognisedFormatError,
    WorkBudgetExceeded,
)
from ..extension_policy import extension_of
from ..models import ArchiveEntry, RejectReason, Verdict
from ..streams import read_bounded

if TYPE_CHECKING:
    from ..dispatcher import EvaluationFrame

logger = logging.getLogger(__name__)


class BaseWalker(ABC):
    """Abstract base class for all archive walkers."""

    #: Exceptions raised by the format library while reading one entry body.
    read_errors: tuple[type[BaseException], ...] = (OSError, EOFError, zlib.error)

    def __init__(self, name: str):
        """
        Initialize walker.

        Args:
            name: Name of the archive format handled by the walker
        """
        self.name = name

    @abstractmethod
    def _open(self, stream: IO[bytes]) -> Any:
        """
        Open the format parser on *stream*.

        Raises:
            UnrecognisedFormatError: if the parser rejects the header
        """
        pass

    @abstractmethod
    def _iter_entries(self, handle: Any) -> Iterator[ArchiveEntry]:
        """
        Yield the archive entries in their natural order.

        Raises:
            MalformedArchiveError: on a structural error mid-archive
        """
        pass

    def _close(self, handle: Any) -> None:
        handle.close()

    def get_name(self) -> str:
        """Get the walker name."""
        return self.name

    def walk(self, stream: IO[bytes], frame: EvaluationFrame) -> Verdict:
        """
        Walk *stream* as an archive of this walker's format.

        Args:
            stream: Seekable stream positioned at offset 0
            frame: Evaluation frame carrying policy, limits and depth

        Returns:
            ADMIT, REJECT_BLACKLISTED, UNRECOGNISED or MALFORMED
        """
        try:
            handle = self._open(stream)
        except UnrecognisedFormatError as e:
            logger.debug("Not a %s stream at depth %d: %s", self.name, frame.depth, e)
            return Verdict.UNRECOGNISED
        except (MalformedArchiveError, OSError, EOFError) as e:
            logger.debug("Probing %s failed at depth %d: %s", self.name, frame.depth, e)
            return Verdict.MALFORMED
        except Exception as e:
            logger.warning(
                "%s parser failed on probe at depth %d: %s: %s", self.name, frame.depth, type(e).__name__, e
            )
            return Verdict.UNRECOGNISED

        try:
            if frame.depth > frame.limits.max_depth:
                return frame.reject(RejectReason.DEPTH_EXCEEDED)
            return self._walk_entries(handle, frame)
        finally:
            self._close(handle)

    def _walk_entries(self, handle: Any, frame: EvaluationFrame) -> Verdict:
        try:
            for entry in self._parsed_entries(handle):
                frame.count_entry()
                ext = extension_of(entry.name)
                if not frame.policy(ext):
                    return frame.reject(RejectReason.BLACKLISTED_EXTENSION, entry.name, ext)
                if not entry.is_file:
                    continue

                try:
                    data = self._buffer_entry(entry, frame.limits.max_entry_bytes)
                except EntryReadError as e:
                    logger.debug("Skipping %s entry %r: %s", self.name, entry.name, e)
                    continue

                try:
                    frame.charge(len(data))
                except WorkBudgetExceeded as e:
                    logger.debug("%s", e)
                    return frame.reject(RejectReason.ENTRY_BUDGET_EXCEEDED, entry.name)

                if frame.descend(entry.name, data) == Verdict.REJECT_BLACKLISTED:
                    return Verdict.REJECT_BLACKLISTED
        except MalformedArchiveError as e:
            logger.debug("Malformed %s archive at depth %d: %s", self.name, frame.depth, e)
            return Verdict.MALFORMED

        return Verdict.ADMIT

    def _parsed_entries(self, handle: Any) -> Iterator[ArchiveEntry]:
        """Drive :meth:`_iter_entries`, turning any parser failure into MalformedArchiveError.

        Only the format library runs inside the wrapped ``next()`` call; the
        policy and the recursion run in the caller, so their errors propagate.
        """
        entries = self._iter_entries(handle)
        while True:
            try:
                entry = next(entries)
            except StopIteration:
                return
            except MalformedArchiveError:
                raise
            except (OSError, EOFError) as e:
                raise MalformedArchiveError(f"{type(e).__name__}: {e}") from e
            except Exception as e:
                logger.warning("%s parser failed listing entries: %s: %s", self.name, type(e).__name__, e)
                raise MalformedArchiveError(f"{type(e).__name__}: {e}") from e
            yield entry

    def _buffer_entry(self, entry: ArchiveEntry, limit: int) -> bytes:
        """Read one entry body into memory, translating library errors."""
        if entry.size is not None and entry.size > limit:
            raise EntryTooLargeError(f"declared size {entry.size} exceeds {limit} bytes")
        try:
            with entry.open() as body:
                return read_bounded(body, limit)
        except EntryReadError:
            raise
        except self.read_errors as e:
            raise EntryReadError(str(e) or type(e).__name__) from e
        except Exception as e:
            logger.warning("%s parser failed reading %r: %s: %s", self.name, entry.name, type(e).__name__, e)
            raise EntryReadError(f"{type(e).__name__}: {e}") from e
