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
Centralized walker construction.

Every entry point (the module-level ``evaluate``/``inspect`` helpers and
``Dispatcher`` when no registry is given) builds walkers through this module
so that:

* The canonical probe order is defined in exactly one place.
* Adding or removing an archive format only requires a change here.

Probe order matters: a ZIP's central directory is located from the end of
the stream, so a TAR whose last member is a ZIP also parses as a ZIP.  TAR is
therefore probed first, then ZIP, then RAR.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .walkers.base import BaseWalker
from .walkers.rar_walker import RarWalker
from .walkers.tar_walker import TarWalker
from .walkers.zip_walker import ZipWalker

logger = logging.getLogger(__name__)

DEFAULT_WALKER_ORDER: tuple[str, ...] = ("tar", "zip", "rar")

_WALKER_CLASSES: dict[str, type[BaseWalker]] = {
    "tar": TarWalker,
    "zip": ZipWalker,
    "rar": RarWalker,
}


def available_formats() -> list[str]:
    """Return the names of the archive formats a walker exists for."""
    return sorted(_WALKER_CLASSES)


def build_walkers(order: Sequence[str]) -> list[BaseWalker]:
    """Build walkers for the given formats, in the given probe order.

    Args:
        order: Format names, e.g. ``["zip", "tar"]``.  Case-insensitive.

    Returns:
        A list of walker instances, ready for :class:`Dispatcher`.

    Raises:
        ValueError: for an unknown or repeated format name.
    """
    walkers: list[BaseWalker] = []
    seen: set[str] = set()
    for name in order:
        key = name.lower()
        if key not in _WALKER_CLASSES:
            raise ValueError(f"Unknown archive format '{name}'. Available: {', '.join(available_formats())}")
        if key in seen:
            raise ValueError(f"Archive format '{name}' listed twice")
        seen.add(key)
        walkers.append(_WALKER_CLASSES[key]())

    if tuple(w.get_name() for w in walkers) != DEFAULT_WALKER_ORDER:
        logger.debug("Using non-canonical walker order: %s", ", ".join(w.get_name() for w in walkers))
    return walkers


def build_default_walkers() -> list[BaseWalker]:
    """Build the canonical TAR, ZIP, RAR registry."""
    return build_walkers(DEFAULT_WALKER_ORDER)
