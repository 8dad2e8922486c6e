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
Data models for archive entries, traversal limits and verdicts.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import IO, Any

ENTRY_PATH_SEPARATOR = "!/"


class Verdict(str, Enum):
    """Terminal classification of a stream."""

    ADMIT = "ADMIT"
    REJECT_BLACKLISTED = "REJECT_BLACKLISTED"
    UNRECOGNISED = "UNRECOGNISED"
    MALFORMED = "MALFORMED"


class RejectReason(str, Enum):
    """Why a stream was rejected."""

    BLACKLISTED_EXTENSION = "blacklisted_extension"
    DEPTH_EXCEEDED = "depth_exceeded"
    ENTRY_BUDGET_EXCEEDED = "entry_budget_exceeded"


@dataclass
class WalkLimits:
    """Resource caps applied to a single top-level evaluation."""

    max_depth: int = 8
    max_entry_bytes: int = 64 * 1024 * 1024  # 64 MiB
    max_total_bytes: int | None = None  # no aggregate cap

    def __post_init__(self):
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.max_entry_bytes < 0:
            raise ValueError(f"max_entry_bytes must be >= 0, got {self.max_entry_bytes}")
        if self.max_total_bytes is not None and self.max_total_bytes < 0:
            raise ValueError(f"max_total_bytes must be >= 0 or None, got {self.max_total_bytes}")


@dataclass
class ArchiveEntry:
    """A named item inside an archive container.

    ``opener`` returns a readable sub-stream of the entry's uncompressed
    bytes.  The sub-stream is only valid until the walker advances to the
    next entry.
    """

    name: str
    opener: Callable[[], IO[bytes]] = field(repr=False)
    size: int | None = None
    is_file: bool = True

    def open(self) -> IO[bytes]:
        return self.opener()


@dataclass
class Evaluation:
    """Outcome of evaluating one top-level stream, with evidence."""

    verdict: Verdict
    reason: RejectReason | None = None
    entry_path: str | None = None
    extension: str | None = None
    entries_inspected: int = 0

    @property
    def admitted(self) -> bool:
        return self.verdict == Verdict.ADMIT

    def to_dict(self) -> dict[str, Any]:
        """Convert evaluation to dictionary."""
        return {
            "verdict": self.verdict.value,
            "reason": self.reason.value if self.reason else None,
            "entry_path": self.entry_path,
            "extension": self.extension,
            "entries_inspected": self.entries_inspected,
        }


def join_entry_path(trail: tuple[str, ...]) -> str:
    """Render a chain of nested entry names as ``outer.zip!/inner.tar!/file``."""
    return ENTRY_PATH_SEPARATOR.join(trail)
