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
Dispatcher: format autodetection by trial parsing and recursive evaluation.

The dispatcher rewinds the stream, offers it to each registered walker in
order, and stops at the first definitive answer.  Walkers call back into the
dispatcher (through an :class:`EvaluationFrame`) for every entry body, so
nested archives are explored depth-first before the parent moves on.

Usage
-----
    from archive_gate import ExtensionPolicy, WalkLimits, evaluate

    policy = ExtensionPolicy.from_extensions([".exe", ".js", ".scr"])
    with open("attachment.zip", "rb") as fh:
        verdict = evaluate(fh, policy, WalkLimits(max_depth=4))
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import IO

from .models import Evaluation, RejectReason, Verdict, WalkLimits, join_entry_path
from .streams import WorkBudget
from .walker_factory import build_default_walkers
from .walkers.base import BaseWalker

logger = logging.getLogger(__name__)

ExtensionPredicate = Callable[[str], bool]


@dataclass
class _Trace:
    """Per-call state shared by every frame of one top-level evaluation."""

    budget: WorkBudget
    entries_inspected: int = 0
    reason: RejectReason | None = None
    entry_path: str | None = None
    extension: str | None = None


@dataclass
class EvaluationFrame:
    """One level of recursion: the stream being evaluated and where it sits."""

    dispatcher: Dispatcher
    trace: _Trace
    depth: int = 0
    trail: tuple[str, ...] = field(default_factory=tuple)

    @property
    def policy(self) -> ExtensionPredicate:
        return self.dispatcher.policy

    @property
    def limits(self) -> WalkLimits:
        return self.dispatcher.limits

    def count_entry(self) -> None:
        self.trace.entries_inspected += 1

    def charge(self, nbytes: int) -> None:
        self.trace.budget.charge(nbytes)

    def reject(self, reason: RejectReason, entry_name: str | None = None, extension: str | None = None) -> Verdict:
        """Record why traversal stopped and return ``REJECT_BLACKLISTED``."""
        trail = self.trail + (entry_name,) if entry_name is not None else self.trail
        self.trace.reason = reason
        self.trace.entry_path = join_entry_path(trail) if trail else None
        self.trace.extension = extension
        logger.info(
            "Rejecting attachment: %s at depth %d (%s)",
            reason.value,
            self.depth,
            self.trace.entry_path or "<top level>",
        )
        return Verdict.REJECT_BLACKLISTED

    def descend(self, entry_name: str, data: bytes) -> Verdict:
        """Evaluate a buffered entry body one level deeper."""
        child = EvaluationFrame(self.dispatcher, self.trace, self.depth + 1, self.trail + (entry_name,))
        return self.dispatcher._evaluate_frame(io.BytesIO(data), child)


class Dispatcher:
    """Chooses a walker for a stream and drives recursion into nested archives.

    A dispatcher holds no per-call state, so one instance may serve several
    threads as long as the policy predicate is itself thread-safe.
    """

    def __init__(
        self,
        policy: ExtensionPredicate,
        walkers: Sequence[BaseWalker] | None = None,
        limits: WalkLimits | None = None,
    ):
        """
        Initialize dispatcher.

        Args:
            policy: Predicate from a lowercased extension (``".exe"``, ``""``)
                to ``True`` when the extension is allowed.
            walkers: Ordered walker registry.  If None, uses the canonical
                TAR, ZIP, RAR order from the walker factory.
            limits: Resource caps.  If None, uses :class:`WalkLimits` defaults.
        """
        self.policy = policy
        self.walkers: list[BaseWalker] = list(walkers) if walkers is not None else build_default_walkers()
        self.limits = limits or WalkLimits()

    def new_frame(self) -> EvaluationFrame:
        """Start the top-level frame of a fresh evaluation (depth 0, full budget)."""
        return EvaluationFrame(self, _Trace(budget=WorkBudget(self.limits.max_total_bytes)))

    def evaluate(self, stream: IO[bytes] | bytes) -> Verdict:
        """
        Evaluate a stream and return a single verdict.

        Args:
            stream: Seekable binary stream (or bytes) holding the attachment

        Returns:
            ADMIT, REJECT_BLACKLISTED, or MALFORMED if the stream itself
            could not be rewound.
        """
        return self.inspect(stream).verdict

    def inspect(self, stream: IO[bytes] | bytes) -> Evaluation:
        """Evaluate a stream and report why it was admitted or rejected."""
        if isinstance(stream, (bytes, bytearray, memoryview)):
            stream = io.BytesIO(bytes(stream))

        frame = self.new_frame()
        trace = frame.trace
        verdict = self._evaluate_frame(stream, frame)

        # Leave the caller's stream where we found it: at the start
        try:
            stream.seek(0)
        except (OSError, ValueError) as e:
            logger.debug("Could not rewind caller stream: %s", e)

        return Evaluation(
            verdict=verdict,
            reason=trace.reason if verdict == Verdict.REJECT_BLACKLISTED else None,
            entry_path=trace.entry_path if verdict == Verdict.REJECT_BLACKLISTED else None,
            extension=trace.extension if verdict == Verdict.REJECT_BLACKLISTED else None,
            entries_inspected=trace.entries_inspected,
        )

    def _evaluate_frame(self, stream: IO[bytes], frame: EvaluationFrame) -> Verdict:
        for walker in self.walkers:
            try:
                stream.seek(0)
            except (OSError, ValueError) as e:
                logger.warning("Cannot rewind stream at depth %d: %s", frame.depth, e)
                return Verdict.MALFORMED

            verdict = walker.walk(stream, frame)
            if verdict in (Verdict.ADMIT, Verdict.REJECT_BLACKLISTED):
                logger.debug("%s walker: %s at depth %d", walker.get_name(), verdict.value, frame.depth)
                return verdict
            # UNRECOGNISED and MALFORMED both mean "try the next format"

        # A stream that failed under every walker may have failed itself
        try:
            stream.seek(0)
        except (OSError, ValueError) as e:
            logger.warning("Cannot rewind stream at depth %d: %s", frame.depth, e)
            return Verdict.MALFORMED

        # Not an archive we know: out of this filter's remit
        return Verdict.ADMIT


def evaluate(
    stream: IO[bytes] | bytes,
    policy: ExtensionPredicate,
    limits: WalkLimits | None = None,
) -> Verdict:
    """Evaluate *stream* with the canonical walker registry."""
    return Dispatcher(policy, limits=limits).evaluate(stream)


def inspect(
    stream: IO[bytes] | bytes,
    policy: ExtensionPredicate,
    limits: WalkLimits | None = None,
) -> Evaluation:
    """Like :func:`evaluate`, returning an :class:`Evaluation` with evidence."""
    return Dispatcher(policy, limits=limits).inspect(stream)
