# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""Filesystem locations used by the quota segment."""

from pathlib import Path

CACHE_FILE_NAME = ".cli_proxy_api_quota_cache.json"


def get_config_dir() -> Path:
    """The statusline's per-user config directory (~/.claude/ccline)."""
    return Path.home() / ".claude" / "ccline"


def get_cache_file() -> Path:
    """Path of the persisted quota snapshot."""
    return get_config_dir() / CACHE_FILE_NAME
