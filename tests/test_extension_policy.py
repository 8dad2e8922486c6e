# Copyright 2026 Cisco Systems, Inc.
# SPDX-License-Identifier: Apache-2.0

"""Tests for extension extraction and the YAML-backed extension policy."""

import dataclasses

import pytest
import yaml

from archive_gate.core.exceptions import PolicyLoadError
from archive_gate.core.extension_policy import ExtensionPolicy, extension_of, normalize_extension

# ── extension_of ────────────────────────────────────────────────────────


class TestExtensionOf:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("report.pdf", ".pdf"),
            ("a/b.TXT", ".txt"),
            ("payload.JS", ".js"),
            ("archive.tar.gz", ".gz"),
            ("dir.d/file", ""),
            ("README", ""),
            ("name.", "."),
            (".bashrc", ".bashrc"),
            ("folder/", ""),
            ("", ""),
        ],
    )
    def test_extension_of(self, name, expected):
        assert extension_of(name) == expected

    def test_backslash_is_not_a_separator(self):
        # only "/" splits path components
        assert extension_of("dir.d\\file") == ".d\\file"


class TestNormalizeExtension:
    @pytest.mark.parametrize("raw,expected", [("EXE", ".exe"), (".Js", ".js"), ("  .scr ", ".scr"), ("", "")])
    def test_normalize(self, raw, expected):
        assert normalize_extension(raw) == expected


# ── Predicate ───────────────────────────────────────────────────────────


class TestPredicate:
    def test_blocked_and_allowed(self, blacklist_policy):
        assert blacklist_policy(".exe") is False
        assert blacklist_policy(".txt") is True

    def test_missing_extension_allowed_by_default(self, blacklist_policy):
        assert blacklist_policy("") is True

    def test_block_missing_extension(self):
        policy = ExtensionPolicy.from_extensions([".exe"], block_missing_extension=True)
        assert policy("") is False
        assert policy(".txt") is True

    def test_allows_name(self, blacklist_policy):
        assert blacklist_policy.allows_name("docs/Setup.EXE") is False
        assert blacklist_policy.allows_name("docs/setup.txt") is True

    def test_from_extensions_normalises(self):
        policy = ExtensionPolicy.from_extensions(["EXE", ".Js", " ", "scr"])
        assert policy.blocked_extensions == frozenset({".exe", ".js", ".scr"})

    def test_policy_is_immutable(self, blacklist_policy):
        with pytest.raises(dataclasses.FrozenInstanceError):
            blacklist_policy.block_missing_extension = True


# ── Presets ─────────────────────────────────────────────────────────────


class TestPresets:
    def test_preset_names(self):
        assert ExtensionPolicy.preset_names() == ["balanced", "permissive", "strict"]

    def test_default_is_balanced(self):
        assert ExtensionPolicy.default() == ExtensionPolicy.from_preset("balanced")

    def test_default_blocks_common_executables(self):
        policy = ExtensionPolicy.default()
        for ext in (".exe", ".js", ".scr", ".bat", ".vbs", ".jar"):
            assert policy(ext) is False, ext
        assert policy(".pdf") is True
        assert policy("") is True

    def test_inf_extension_loads_as_string(self):
        # unquoted, YAML would read ".inf" as a float
        assert ".inf" in ExtensionPolicy.default().blocked_extensions

    def test_strict_is_superset_of_balanced(self):
        strict = ExtensionPolicy.from_preset("strict")
        assert ExtensionPolicy.default().blocked_extensions <= strict.blocked_extensions
        assert strict.block_missing_extension is True

    def test_permissive_is_subset_of_balanced(self):
        permissive = ExtensionPolicy.from_preset("permissive")
        assert permissive.blocked_extensions <= ExtensionPolicy.default().blocked_extensions
        assert permissive(".js") is True
        assert permissive(".exe") is False

    def test_preset_lookup_is_case_insensitive(self):
        assert ExtensionPolicy.from_preset("STRICT") == ExtensionPolicy.from_preset("strict")

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown preset"):
            ExtensionPolicy.from_preset("paranoid")


# ── YAML loading ────────────────────────────────────────────────────────


class TestFromYaml:
    def test_override_blocked_extensions(self, make_policy):
        policy = make_policy(
            """
            policy_name: corp
            blocked_extensions:
              - ".iso"
              - "IMG"
            """
        )
        assert policy.policy_name == "corp"
        assert policy.blocked_extensions == frozenset({".iso", ".img"})

    def test_omitted_keys_use_defaults(self, make_policy):
        policy = make_policy("block_missing_extension: true\n")
        assert policy.block_missing_extension is True
        assert policy.blocked_extensions == ExtensionPolicy.default().blocked_extensions

    def test_empty_file_is_the_default_policy(self, make_policy):
        assert make_policy("") == ExtensionPolicy.default()

    def test_missing_file(self, tmp_path):
        with pytest.raises(PolicyLoadError, match="not found"):
            ExtensionPolicy.from_yaml(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, make_policy):
        with pytest.raises(PolicyLoadError, match="Could not read"):
            make_policy("blocked_extensions: [.exe\n")

    def test_top_level_must_be_mapping(self, make_policy):
        with pytest.raises(PolicyLoadError, match="mapping"):
            make_policy("- .exe\n- .js\n")

    def test_blocked_extensions_must_be_strings(self, make_policy):
        with pytest.raises(PolicyLoadError, match="list of strings"):
            make_policy("blocked_extensions: [1, 2]\n")

    def test_block_missing_extension_must_be_bool(self, make_policy):
        with pytest.raises(PolicyLoadError, match="boolean"):
            make_policy("block_missing_extension: sometimes\n")

    def test_to_yaml_reloads_to_same_policy(self, tmp_path):
        original = ExtensionPolicy.from_extensions([".exe", ".hta"], policy_name="dumped", block_missing_extension=True)
        path = tmp_path / "dumped.yaml"
        original.to_yaml(path)

        assert yaml.safe_load(path.read_text())["blocked_extensions"] == [".exe", ".hta"]
        assert ExtensionPolicy.from_yaml(path) == original
