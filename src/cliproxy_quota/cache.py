# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Persisted single-slot quota cache.

The file holds the last successful non-empty fetch:

    {"quotas": [{"model_id": ..., "display_name": ..., "remaining_fraction": ...,
                 "auth_type": ...}],
     "cached_at": "2026-01-01T12:00:00+00:00"}

Writes go to a temp file in the same directory and are renamed into place,
so a concurrent reader sees either the old or the new snapshot. Read and
write failures are logged and otherwise ignored.
"""

import json
import logging
import os
import re
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from .core.types import CachedQuotas
from .utils.paths import get_cache_file

lib_logger = logging.getLogger("cliproxy_quota")

_RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)
_FRACTION_RE = re.compile(r"\.(\d+)(?=[+-]\d{2}:\d{2}$)")


def parse_rfc3339(value: str) -> Optional[datetime]:
    """
    Parse an RFC 3339 timestamp. Timestamps without an offset are rejected.

    Returns:
        Aware datetime, or None if the value is not a valid RFC 3339 timestamp
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    # fromisoformat also takes forms RFC 3339 forbids (no seconds, basic format)
    if not _RFC3339_RE.match(text):
        return None
    text = text[:10] + "T" + text[11:]
    text = text.replace("Z", "+00:00").replace("z", "+00:00")
    # fromisoformat only takes up to microseconds; other writers emit nanoseconds
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def format_rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.isoformat()


class QuotaCache:
    """Loads, saves and validates the cache file."""

    def __init__(self, file_path: Optional[Union[str, Path]] = None):
        """
        Args:
            file_path: Cache file location (defaults to ~/.claude/ccline/...)
        """
        self.file_path = Path(file_path) if file_path else get_cache_file()

    def load(self) -> Optional[CachedQuotas]:
        """Read the snapshot. A missing, unreadable or malformed file is None."""
        if not self.file_path.exists():
            return None
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return CachedQuotas.from_dict(data)
        except (OSError, ValueError) as e:
            lib_logger.debug(f"Ignoring unusable quota cache {self.file_path}: {e}")
            return None

    def save(self, cache: CachedQuotas) -> bool:
        """
        Replace the snapshot on disk.

        Returns:
            True if the file was written
        """
        tmp_path = None
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=self.file_path.name + ".",
                suffix=".tmp",
                dir=str(self.file_path.parent),
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(cache.to_dict(), f, indent=2)
            os.replace(tmp_path, self.file_path)
            return True
        except (OSError, TypeError, ValueError) as e:
            lib_logger.warning(f"Failed to write quota cache {self.file_path}: {e}")
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            return False

    @staticmethod
    def is_valid(
        cache: CachedQuotas, ttl_seconds: int, now: Optional[datetime] = None
    ) -> bool:
        """
        Whether the snapshot is younger than ttl_seconds.

        Elapsed time is truncated to whole seconds. An unparseable
        cached_at makes the snapshot stale.
        """
        cached_at = parse_rfc3339(cache.cached_at)
        if cached_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        elapsed = int((now - cached_at).total_seconds())
        return elapsed < ttl_seconds

    def age_seconds(
        self, cache: CachedQuotas, now: Optional[datetime] = None
    ) -> Optional[int]:
        """Seconds since the snapshot was written, or None if unknown."""
        cached_at = parse_rfc3339(cache.cached_at)
        if cached_at is None:
            return None
        now = now or datetime.now(timezone.utc)
        return int((now - cached_at).total_seconds())
