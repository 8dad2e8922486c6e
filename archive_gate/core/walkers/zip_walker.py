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
ZIP walker.

ZIP is a random-access format: ``zipfile`` locates the central directory
from the end of the stream, so the total stream length must be known.
Entries are visited in central-directory order.
"""

import logging
import lzma
import struct
import zipfile
import zlib
from collections.abc import Iterator
from functools import partial
from typing import IO

from ..exceptions import UnrecognisedFormatError
from ..models import ArchiveEntry
from ..streams import stream_length
from .base import BaseWalker

logger = logging.getLogger(__name__)

# smallest possible ZIP: an empty end of central directory record
_END_RECORD_SIZE = 22


class ZipWalker(BaseWalker):
    """Walks ZIP archives (and ZIP-based containers such as JAR or DOCX)."""

    # NotImplementedError: unsupported compression method
    # RuntimeError: encrypted entry, no password given
    # ValueError: local header offset outside the stream, or an undecodable UTF-8 name
    read_errors = (
        zipfile.BadZipFile,
        NotImplementedError,
        RuntimeError,
        ValueError,
        struct.error,
        OSError,
        EOFError,
        zlib.error,
        lzma.LZMAError,
    )

    def __init__(self):
        super().__init__("zip")

    def _open(self, stream: IO[bytes]) -> zipfile.ZipFile:
        size = stream_length(stream)
        if size < _END_RECORD_SIZE:
            raise UnrecognisedFormatError(f"{size}-byte stream cannot hold an end of central directory record")
        # NotImplementedError: "version needed to extract" newer than zipfile supports
        try:
            zf = zipfile.ZipFile(stream, "r")
        except (
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            NotImplementedError,
            ValueError,
            struct.error,
            EOFError,
        ) as e:
            raise UnrecognisedFormatError(f"{type(e).__name__}: {e}") from e
        logger.debug("Central directory lists %d entries in %d-byte stream", len(zf.infolist()), size)
        return zf

    def _iter_entries(self, zf: zipfile.ZipFile) -> Iterator[ArchiveEntry]:
        for info in zf.infolist():
            yield ArchiveEntry(
                name=info.filename,
                opener=partial(zf.open, info),
                size=info.file_size,
                is_file=not info.is_dir(),
            )
