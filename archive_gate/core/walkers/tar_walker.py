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
TAR walker.

Plain and compressed (gzip, bzip2, xz) tarballs are opened through
``tarfile``'s transparent decompression.  Members are read strictly in
order; a member's body is only valid until the next header is read.
"""

import logging
import lzma
import tarfile
import zlib
from collections.abc import Iterator
from functools import partial
from typing import IO

from ..exceptions import EntryReadError, MalformedArchiveError, UnrecognisedFormatError
from ..models import ArchiveEntry
from .base import BaseWalker

logger = logging.getLogger(__name__)


class TarWalker(BaseWalker):
    """Walks TAR archives."""

    read_errors = (tarfile.TarError, OSError, EOFError, zlib.error, lzma.LZMAError)

    def __init__(self):
        super().__init__("tar")

    def _open(self, stream: IO[bytes]) -> tarfile.TarFile:
        # a truncated gzip, bzip2 or xz stream fails in the decompressor before the first header
        try:
            return tarfile.open(fileobj=stream, mode="r:*")
        except (tarfile.TarError, EOFError, zlib.error, lzma.LZMAError) as e:
            raise UnrecognisedFormatError(f"{type(e).__name__}: {e}") from e

    def _iter_entries(self, tf: tarfile.TarFile) -> Iterator[ArchiveEntry]:
        while True:
            try:
                member = tf.next()
            except (tarfile.TarError, EOFError, zlib.error, lzma.LZMAError) as e:
                raise MalformedArchiveError(f"bad tar header after offset {tf.offset}: {e}") from e
            if member is None:
                return

            name = member.name
            # tarfile strips the trailing slash from directory names
            if member.isdir():
                name += "/"

            yield ArchiveEntry(
                name=name,
                opener=partial(self._open_member, tf, member),
                size=member.size if member.isfile() else 0,
                is_file=member.isfile(),
            )

    @staticmethod
    def _open_member(tf: tarfile.TarFile, member: tarfile.TarInfo) -> IO[bytes]:
        body = tf.extractfile(member)
        if body is None:
            raise EntryReadError(f"{member.name!r} has no data")
        return body
