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
Constants for Archive Gate.
"""


class ArchiveGateConstants:
    """Defaults and environment variable names used by :class:`Config`."""

    # Default limits
    DEFAULT_MAX_DEPTH = 8
    DEFAULT_MAX_ENTRY_BYTES = 64 * 1024 * 1024
    DEFAULT_MAX_TOTAL_BYTES = None
    DEFAULT_POLICY_PRESET = "balanced"

    # Environment variables read by Config.from_env()
    ENV_MAX_DEPTH = "ARCHIVE_GATE_MAX_DEPTH"
    ENV_MAX_ENTRY_BYTES = "ARCHIVE_GATE_MAX_ENTRY_BYTES"
    ENV_MAX_TOTAL_BYTES = "ARCHIVE_GATE_MAX_TOTAL_BYTES"
    ENV_POLICY_PRESET = "ARCHIVE_GATE_POLICY_PRESET"
    ENV_POLICY_FILE = "ARCHIVE_GATE_POLICY_FILE"
