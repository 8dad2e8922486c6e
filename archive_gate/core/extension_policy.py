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
Extension policy: which filename extensions may travel inside an attachment.

The engine only needs a predicate ``allowed(ext) -> bool`` over lowercased
extensions (``".exe"``, ``".txt"``, ``""``).  ``ExtensionPolicy`` is the
predicate that ships with the package: a blacklist that can be loaded from
YAML, merged on top of the built-in defaults.

Usage
-----
    from archive_gate.core.extension_policy import ExtensionPolicy

    # Load built-in defaults
    policy = ExtensionPolicy.default()

    # Load an org policy (merges on top of defaults)
    policy = ExtensionPolicy.from_yaml("mail_policy.yaml")

    # Use it as a predicate
    policy(".exe")  # -> False

    # Dump the current policy for editing
    policy.to_yaml("generated_policy.yaml")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import PolicyLoadError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Where the built-in default policy lives (ships with the package)
# ---------------------------------------------------------------------------
_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
_DEFAULT_POLICY_PATH = _DATA_DIR / "default_policy.yaml"

# Named preset policies
_PRESET_POLICIES: dict[str, Path] = {
    "strict": _DATA_DIR / "strict_policy.yaml",
    "balanced": _DEFAULT_POLICY_PATH,
    "permissive": _DATA_DIR / "permissive_policy.yaml",
}


def extension_of(name: str) -> str:
    """Return the lowercased extension of the final path component of *name*.

    The extension includes the leading ``.``; names without a dot yield
    ``""``.  Only ``/`` separates path components, whatever the archive
    format's native convention.

    >>> extension_of("docs/Setup.EXE")
    '.exe'
    >>> extension_of("release.d/README")
    ''
    >>> extension_of("trailing.")
    '.'
    """
    base = name.rpartition("/")[2]
    _, dot, ext = base.rpartition(".")
    if not dot:
        return ""
    return (dot + ext).lower()


def normalize_extension(ext: str) -> str:
    """Lowercase *ext* and make sure it carries a leading dot (``"EXE"`` -> ``".exe"``)."""
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


@dataclass(frozen=True)
class ExtensionPolicy:
    """Blacklist of filename extensions that may not appear in an attachment."""

    policy_name: str = "default"
    policy_version: str = "1.0"
    blocked_extensions: frozenset[str] = field(default_factory=frozenset)
    # Reject entries whose final path component has no extension at all
    block_missing_extension: bool = False

    # -----------------------------------------------------------------------
    # Predicate
    # -----------------------------------------------------------------------

    def allowed(self, ext: str) -> bool:
        """Return ``True`` when an entry with extension *ext* may pass."""
        if not ext:
            return not self.block_missing_extension
        return ext not in self.blocked_extensions

    def __call__(self, ext: str) -> bool:
        return self.allowed(ext)

    def allows_name(self, name: str) -> bool:
        """Apply the predicate to the extension of an entry *name*."""
        return self.allowed(extension_of(name))

    # -----------------------------------------------------------------------
    # Construction helpers
    # -----------------------------------------------------------------------

    @classmethod
    def from_extensions(cls, extensions: Iterable[str], **kwargs: Any) -> ExtensionPolicy:
        """Build a policy straight from a list of blocked extensions."""
        blocked = frozenset(normalize_extension(e) for e in extensions if e.strip())
        return cls(blocked_extensions=blocked, **kwargs)

    @classmethod
    def default(cls) -> ExtensionPolicy:
        """Load the built-in default policy that ships with the package."""
        return cls.from_yaml(_DEFAULT_POLICY_PATH)

    @classmethod
    def from_preset(cls, name: str) -> ExtensionPolicy:
        """Load a named preset policy: ``strict``, ``balanced``, or ``permissive``."""
        name_lower = name.lower()
        if name_lower not in _PRESET_POLICIES:
            raise ValueError(f"Unknown preset '{name}'. Available: {', '.join(sorted(_PRESET_POLICIES))}")
        return cls.from_yaml(_PRESET_POLICIES[name_lower])

    @classmethod
    def preset_names(cls) -> list[str]:
        """Return available preset policy names."""
        return sorted(_PRESET_POLICIES.keys())

    @classmethod
    def from_yaml(cls, path: str | Path) -> ExtensionPolicy:
        """
        Load a policy from a YAML file.

        The YAML is first merged on top of the built-in defaults so that
        users only need to specify the keys they want to override.
        """
        path = Path(path)
        if not path.exists():
            raise PolicyLoadError(f"Policy file not found: {path}")

        raw = cls._read_yaml(path)

        # If this IS the default file, just parse directly
        if path.resolve() == _DEFAULT_POLICY_PATH.resolve():
            merged = raw
        else:
            merged = {**cls._read_yaml(_DEFAULT_POLICY_PATH), **raw}

        policy = cls._from_dict(merged)
        logger.debug(
            "Loaded extension policy %s v%s from %s (%d blocked extensions)",
            policy.policy_name,
            policy.policy_version,
            path,
            len(policy.blocked_extensions),
        )
        return policy

    def to_yaml(self, path: str | Path) -> None:
        """Dump the full policy to a YAML file for editing."""
        data = self._to_dict()
        with open(path, "w") as fh:
            fh.write("# Archive Gate – Extension Policy\n")
            fh.write("# Entries whose extension appears in blocked_extensions are rejected,\n")
            fh.write("# at any nesting depth.  Omitted keys use the built-in defaults.\n\n")
            yaml.dump(data, fh, default_flow_style=False, sort_keys=False, width=120)

    # -----------------------------------------------------------------------
    # Internal parsing
    # -----------------------------------------------------------------------

    @staticmethod
    def _read_yaml(path: Path) -> dict[str, Any]:
        try:
            with open(path) as fh:
                raw = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as e:
            raise PolicyLoadError(f"Could not read policy file {path}: {e}") from e
        if not isinstance(raw, dict):
            raise PolicyLoadError(f"Policy file {path} must contain a mapping, got {type(raw).__name__}")
        return raw

    @classmethod
    def _from_dict(cls, d: dict[str, Any]) -> ExtensionPolicy:
        blocked = d.get("blocked_extensions", [])
        if not isinstance(blocked, list) or not all(isinstance(e, str) for e in blocked):
            raise PolicyLoadError("blocked_extensions must be a list of strings")

        block_missing = d.get("block_missing_extension", False)
        if not isinstance(block_missing, bool):
            raise PolicyLoadError("block_missing_extension must be a boolean")

        return cls.from_extensions(
            blocked,
            policy_name=str(d.get("policy_name", "default")),
            policy_version=str(d.get("policy_version", "1.0")),
            block_missing_extension=block_missing,
        )

    def _to_dict(self) -> dict[str, Any]:
        return {
            "policy_name": self.policy_name,
            "policy_version": self.policy_version,
            "blocked_extensions": sorted(self.blocked_extensions),
            "block_missing_extension": self.block_missing_extension,
        }
