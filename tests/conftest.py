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
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest before running tests.
All fixtures defined here are available to every test module without
explicit imports.

Archives are built in memory.  ``tarfile`` and ``zipfile`` can write their
own formats; RAR has no writer in Python, so ``make_rar`` assembles a
RAR 1.5-4.x archive of stored (uncompressed) entries byte by byte.
"""

from __future__ import annotations

import io
import struct
import textwrap
import tarfile
import zipfile
import zlib
from pathlib import Path

import pytest

from archive_gate.core.dispatcher import Dispatcher
from archive_gate.core.extension_policy import ExtensionPolicy
from archive_gate.core.models import WalkLimits

# ---------------------------------------------------------------------------
# Archive builders
# ---------------------------------------------------------------------------

Entries = dict[str, bytes | str]


def _as_bytes(data: bytes | str) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else data


def build_zip(entries: Entries, compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    """Build a ZIP archive; names ending in ``/`` become directory entries."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=compression) as zf:
        for name, data in entries.items():
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, _as_bytes(data))
    return buf.getvalue()


def build_tar(entries: Entries, mode: str = "w") -> bytes:
    """Build a TAR archive; names ending in ``/`` become directory members."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode=mode) as tf:
        for name, data in entries.items():
            info = tarfile.TarInfo(name=name.rstrip("/"))
            if name.endswith("/"):
                info.type = tarfile.DIRTYPE
                tf.addfile(info)
            else:
                payload = _as_bytes(data)
                info.size = len(payload)
                tf.addfile(info, io.BytesIO(payload))
    return buf.getvalue()


_RAR_MARKER = b"Rar!\x1a\x07\x00"
_RAR_BLOCK_MAIN = 0x73
_RAR_BLOCK_FILE = 0x74
_RAR_BLOCK_ENDARC = 0x7B
_RAR_LONG_BLOCK = 0x8000
_RAR_SKIP_IF_UNKNOWN = 0x4000
_RAR_METHOD_STORE = 0x30
_RAR_HOST_WIN32 = 2
# 2020-01-01 00:00:00 as a DOS timestamp (date in the high word)
_RAR_DOS_TIME = ((2020 - 1980) << 9 | 1 << 5 | 1) << 16


def _rar_block(head_type: int, flags: int, body: bytes) -> bytes:
    # HEAD_CRC covers everything after itself, truncated to 16 bits
    rest = struct.pack("<BHH", head_type, flags, 7 + len(body)) + body
    return struct.pack("<H", zlib.crc32(rest) & 0xFFFF) + rest


def build_rar(entries: Entries) -> bytes:
    """Build a RAR 4 archive holding stored entries."""
    out = bytearray(_RAR_MARKER)
    out += _rar_block(_RAR_BLOCK_MAIN, 0, b"\x00" * 6)
    for name, data in entries.items():
        payload = _as_bytes(data)
        raw_name = name.encode("ascii")
        file_head = struct.pack(
            "<IIBIIBBHI",
            len(payload),  # packed size
            len(payload),  # unpacked size
            _RAR_HOST_WIN32,
            zlib.crc32(payload) & 0xFFFFFFFF,
            _RAR_DOS_TIME,
            29,  # version needed to extract
            _RAR_METHOD_STORE,
            len(raw_name),
            0x20,  # FILE_ATTRIBUTE_ARCHIVE
        )
        out += _rar_block(_RAR_BLOCK_FILE, _RAR_LONG_BLOCK, file_head + raw_name)
        out += payload
    out += _rar_block(_RAR_BLOCK_ENDARC, _RAR_SKIP_IF_UNKNOWN, b"")
    return bytes(out)


def nest_zip(innermost: bytes, levels: int, entry_name: str = "nested.zip") -> bytes:
    """Wrap *innermost* in *levels* further ZIP archives."""
    data = innermost
    for _ in range(levels):
        data = build_zip({entry_name: data})
    return data


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_zip():
    """Factory fixture for in-memory ZIP archives.

    Usage::

        data = make_zip({"readme.txt": "hello", "docs/": b""})
    """
    return build_zip


@pytest.fixture
def make_tar():
    """Factory fixture for in-memory TAR archives (``mode="w:gz"`` etc. supported)."""
    return build_tar


@pytest.fixture
def make_rar():
    """Factory fixture for in-memory RAR 4 archives of stored entries."""
    return build_rar


@pytest.fixture
def blacklist_policy() -> ExtensionPolicy:
    """Policy rejecting ``.exe``, ``.js`` and ``.scr``."""
    return ExtensionPolicy.from_extensions([".exe", ".js", ".scr"], policy_name="test-blacklist")


@pytest.fixture
def make_dispatcher(blacklist_policy):
    """Factory fixture for a :class:`Dispatcher`.

    Usage::

        dispatcher = make_dispatcher(max_depth=2)
        verdict = dispatcher.evaluate(data)
    """

    def _make(policy=None, walkers=None, **limit_kwargs) -> Dispatcher:
        return Dispatcher(
            policy if policy is not None else blacklist_policy,
            walkers=walkers,
            limits=WalkLimits(**limit_kwargs),
        )

    return _make


@pytest.fixture
def make_policy(tmp_path: Path):
    """Factory fixture for creating :class:`ExtensionPolicy` from a YAML string.

    Usage::

        policy = make_policy('''
            policy_name: test
            blocked_extensions:
              - .exe
        ''')
    """
    _counter = [0]

    def _make(yaml_str: str) -> ExtensionPolicy:
        _counter[0] += 1
        p = tmp_path / f"policy-{_counter[0]}.yaml"
        p.write_text(textwrap.dedent(yaml_str))
        return ExtensionPolicy.from_yaml(p)

    return _make
