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
Archive Gate - extension-based admission filter for archive attachments.
"""

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0+unknown"

__author__ = "Cisco Systems, Inc."


def __getattr__(name: str):
    """Lazy-load public API symbols on first access.

    Keeps ``import archive_gate`` cheap for mail pipelines that only need the
    constants or config; ``rarfile`` and the YAML loader are pulled in when
    the engine is first used.
    """
    _lazy_map = {
        "Config": (".config.config", "Config"),
        "ArchiveGateConstants": (".config.constants", "ArchiveGateConstants"),
        "Dispatcher": (".core.dispatcher", "Dispatcher"),
        "evaluate": (".core.dispatcher", "evaluate"),
        "inspect": (".core.dispatcher", "inspect"),
        "ExtensionPolicy": (".core.extension_policy", "ExtensionPolicy"),
        "extension_of": (".core.extension_policy", "extension_of"),
        "ArchiveEntry": (".core.models", "ArchiveEntry"),
        "Evaluation": (".core.models", "Evaluation"),
        "RejectReason": (".core.models", "RejectReason"),
        "Verdict": (".core.models", "Verdict"),
        "WalkLimits": (".core.models", "WalkLimits"),
        "DeadlineReader": (".core.streams", "DeadlineReader"),
        "build_walkers": (".core.walker_factory", "build_walkers"),
        "build_default_walkers": (".core.walker_factory", "build_default_walkers"),
    }
    if name in _lazy_map:
        module_path, attr = _lazy_map[name]
        import importlib

        mod = importlib.import_module(module_path, __package__)
        val = getattr(mod, attr)
        # Cache on the module so __getattr__ is only called once per symbol
        globals()[name] = val
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "evaluate",
    "inspect",
    "Dispatcher",
    "Verdict",
    "Evaluation",
    "RejectReason",
    "WalkLimits",
    "ArchiveEntry",
    "ExtensionPolicy",
    "extension_of",
    "DeadlineReader",
    "build_walkers",
    "build_default_walkers",
    "Config",
    "ArchiveGateConstants",
]
