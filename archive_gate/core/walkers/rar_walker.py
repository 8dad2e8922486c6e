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
RAR walker.

Backed by ``rarfile``, which parses RAR 1.5-4.x and RAR 5 headers natively.
Stored entries are read directly; compressed entries need one of the
external tools ``rarfile`` knows about (unrar, unar, 7z, bsdtar).  When no
tool is available, or an entry is password protected, the entry counts as
unreadable and is skipped after its name has been checked.
"""

import logging
import struct
from collections.abc import Iterator
from functools import partial
from typing import IO

import rarfile

from ..exceptions import UnrecognisedFormatError
from ..models import ArchiveEntry
from .base import BaseWalker

logger = logging.getLogger(__name__)


class RarWalker(BaseWalker):
    """Walks RAR archives."""

    read_errors = (rarfile.Error, ValueError, struct.error, OSError, EOFError)

    def __init__(self):
        super().__init__("rar")

    def _open(self, stream: IO[bytes]) -> rarfile.RarFile:
        # NeedFirstVolume and header-encrypted archives land here as well
        try:
            return rarfile.RarFile(stream)
        except (rarfile.Error, ValueError, struct.error) as e:
            raise UnrecognisedFormatError(f"{type(e).__name__}: {e}") from e

    def _iter_entries(self, rf: rarfile.RarFile) -> Iterator[ArchiveEntry]:
        for info in rf.infolist():
            if info.needs_password():
                logger.debug("RAR entry %r is encrypted", info.filename)
            yield ArchiveEntry(
                name=info.filename,
                opener=partial(rf.open, info),
                size=info.file_size,
                is_file=not info.is_dir(),
            )
