# Copyright 2026 Cisco Systems, Inc.
# SPDX-License-Identifier: Apache-2.0

"""Tests for data models."""

import io

import pytest

from archive_gate.core.models import (
    ArchiveEntry,
    Evaluation,
    RejectReason,
    Verdict,
    WalkLimits,
    join_entry_path,
)


class TestVerdict:
    def test_values(self):
        assert [v.value for v in Verdict] == ["ADMIT", "REJECT_BLACKLISTED", "UNRECOGNISED", "MALFORMED"]

    def test_compares_as_string(self):
        assert Verdict.ADMIT == "ADMIT"


class TestWalkLimits:
    def test_defaults(self):
        limits = WalkLimits()
        assert limits.max_depth == 8
        assert limits.max_entry_bytes == 64 * 1024 * 1024
        assert limits.max_total_bytes is None

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_depth": -1}, {"max_entry_bytes": -1}, {"max_total_bytes": -5}],
    )
    def test_negative_limits_rejected(self, kwargs):
        with pytest.raises(ValueError):
            WalkLimits(**kwargs)

    def test_zero_limits_allowed(self):
        limits = WalkLimits(max_depth=0, max_entry_bytes=0, max_total_bytes=0)
        assert limits.max_depth == 0


class TestArchiveEntry:
    def test_open_calls_opener(self):
        entry = ArchiveEntry(name="a.txt", opener=lambda: io.BytesIO(b"body"))
        assert entry.open().read() == b"body"
        assert entry.is_file is True
        assert entry.size is None

    def test_repr_hides_opener(self):
        entry = ArchiveEntry(name="a.txt", opener=lambda: io.BytesIO(b""), size=0)
        assert "opener" not in repr(entry)


class TestEvaluation:
    def test_admitted(self):
        assert Evaluation(Verdict.ADMIT).admitted
        assert not Evaluation(Verdict.REJECT_BLACKLISTED).admitted
        assert not Evaluation(Verdict.MALFORMED).admitted

    def test_to_dict(self):
        result = Evaluation(
            verdict=Verdict.REJECT_BLACKLISTED,
            reason=RejectReason.BLACKLISTED_EXTENSION,
            entry_path="outer.tar!/evil.exe",
            extension=".exe",
            entries_inspected=3,
        )
        assert result.to_dict() == {
            "verdict": "REJECT_BLACKLISTED",
            "reason": "blacklisted_extension",
            "entry_path": "outer.tar!/evil.exe",
            "extension": ".exe",
            "entries_inspected": 3,
        }

    def test_to_dict_without_reason(self):
        assert Evaluation(Verdict.ADMIT).to_dict()["reason"] is None


def test_join_entry_path():
    assert join_entry_path(("a.zip", "b.tar", "c.exe")) == "a.zip!/b.tar!/c.exe"
    assert join_entry_path(("only.exe",)) == "only.exe"
