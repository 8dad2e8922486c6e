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
Configuration class for Archive Gate.

The engine itself never reads the environment; the host mail pipeline builds
a ``Config`` (from code, the environment, or a ``.env`` file) and hands
``config.to_limits()`` and ``config.load_policy()`` to ``evaluate``.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

from ..core.extension_policy import ExtensionPolicy
from ..core.models import WalkLimits
from .constants import ArchiveGateConstants


def _parse_int(key: str, value: str) -> int:
    try:
        return int(value.strip().replace("_", ""))
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {value!r}") from None


@dataclass
class Config:
    """
    Configuration for Archive Gate.
    """

    # Traversal limits
    max_depth: int = ArchiveGateConstants.DEFAULT_MAX_DEPTH
    max_entry_bytes: int = ArchiveGateConstants.DEFAULT_MAX_ENTRY_BYTES
    max_total_bytes: int | None = ArchiveGateConstants.DEFAULT_MAX_TOTAL_BYTES

    # Policy selection: an explicit file wins over the preset
    policy_preset: str = ArchiveGateConstants.DEFAULT_POLICY_PRESET
    policy_file: Path | None = None

    def to_limits(self) -> WalkLimits:
        """Build the traversal limits for ``evaluate``."""
        return WalkLimits(
            max_depth=self.max_depth,
            max_entry_bytes=self.max_entry_bytes,
            max_total_bytes=self.max_total_bytes,
        )

    def load_policy(self) -> ExtensionPolicy:
        """Load the configured extension policy."""
        if self.policy_file is not None:
            return ExtensionPolicy.from_yaml(self.policy_file)
        return ExtensionPolicy.from_preset(self.policy_preset)

    @classmethod
    def from_mapping(cls, values: Mapping[str, str | None]) -> "Config":
        """
        Create configuration from ``ARCHIVE_GATE_*`` keys.

        Args:
            values: Mapping such as ``os.environ``; missing or empty keys
                keep their defaults.

        Returns:
            Config instance
        """
        config = cls()
        C = ArchiveGateConstants

        if raw := values.get(C.ENV_MAX_DEPTH):
            config.max_depth = _parse_int(C.ENV_MAX_DEPTH, raw)

        if raw := values.get(C.ENV_MAX_ENTRY_BYTES):
            config.max_entry_bytes = _parse_int(C.ENV_MAX_ENTRY_BYTES, raw)

        if raw := values.get(C.ENV_MAX_TOTAL_BYTES):
            if raw.strip().lower() in ("none", "off"):
                config.max_total_bytes = None
            else:
                config.max_total_bytes = _parse_int(C.ENV_MAX_TOTAL_BYTES, raw)

        if raw := values.get(C.ENV_POLICY_PRESET):
            config.policy_preset = raw.strip().lower()

        if raw := values.get(C.ENV_POLICY_FILE):
            config.policy_file = Path(raw.strip())

        return config

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Config instance with values from environment
        """
        return cls.from_mapping(os.environ)

    @classmethod
    def from_file(cls, config_file: Path) -> "Config":
        """
        Load configuration from .env file.

        Values in the file take precedence over the process environment.

        Args:
            config_file: Path to .env file

        Returns:
            Config instance
        """
        values: dict[str, str | None] = dict(os.environ)
        if Path(config_file).exists():
            values.update(dotenv_values(config_file))
        return cls.from_mapping(values)
