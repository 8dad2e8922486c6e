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

"""Archive Gate exceptions.

This module defines the exceptions raised inside the archive walkers and
by the helper utilities.  All exceptions inherit from ArchiveGateError.
The dispatcher translates them into verdicts, so callers of
``evaluate()`` only ever see a :class:`~archive_gate.core.models.Verdict`.

Example:
    >>> from archive_gate.core.exceptions import PolicyLoadError
    >>> from archive_gate.core.extension_policy import ExtensionPolicy
    >>>
    >>> try:
    ...     policy = ExtensionPolicy.from_yaml("corp_policy.yaml")
    ... except PolicyLoadError as e:
    ...     print(f"Failed to load policy: {e}")
"""


class ArchiveGateError(Exception):
    """Base exception for all Archive Gate errors."""

    pass


class UnrecognisedFormatError(ArchiveGateError):
    """Raised when a walker's parser rejects the stream header outright."""

    pass


class MalformedArchiveError(ArchiveGateError):
    """Raised when a recognised archive cannot be fully parsed.

    This can indicate:
    - A truncated archive
    - A corrupt header after the first entry
    - A stream read failure in the middle of a walk
    """

    pass


class EntryReadError(ArchiveGateError):
    """Raised when a single entry's body cannot be buffered.

    The walker skips the entry and carries on with the next one.
    """

    pass


class EntryTooLargeError(EntryReadError):
    """Raised when an entry body exceeds the per-entry byte cap."""

    pass


class WorkBudgetExceeded(ArchiveGateError):
    """Raised when the aggregate byte budget of an evaluation is spent."""

    pass


class StreamDeadlineExceeded(ArchiveGateError, OSError):
    """Raised by :class:`~archive_gate.core.streams.DeadlineReader` once its time budget elapses."""

    pass


class PolicyLoadError(ArchiveGateError):
    """Raised when an extension policy file cannot be loaded.

    This can indicate:
    - Missing policy file
    - Invalid YAML
    - Wrong type for a policy field
    """

    pass
