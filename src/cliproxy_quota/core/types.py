# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Shared type definitions for the quota segment.

This module contains the tracked-model table and the dataclasses passed
between the fetcher, cache, aggregator, formatter and segment.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .colors import AnsiColor


# =============================================================================
# TRACKED MODELS
# =============================================================================


class TrackedModel(Enum):
    """
    The closed set of models whose remaining quota the segment displays.

    Anything that does not classify to one of these is dropped.
    """

    OPUS = "opus"
    GEMINI_3_PRO = "gemini3pro"
    GEMINI_3_FLASH = "gemini3flash"

    @property
    def alias_key(self) -> str:
        return f"{self.value}_alias"

    @property
    def color_key(self) -> str:
        return f"{self.value}_color"

    @property
    def default_alias(self) -> str:
        return TRACKED_MODEL_INFO[self].default_alias

    @property
    def default_color(self) -> AnsiColor:
        return TRACKED_MODEL_INFO[self].default_color

    @property
    def display_name(self) -> str:
        return TRACKED_MODEL_INFO[self].display_name

    @classmethod
    def all(cls) -> List["TrackedModel"]:
        """Return every tracked model in display order."""
        return list(cls)


@dataclass(frozen=True)
class TrackedModelInfo:
    """Static presentation data for a tracked model."""

    default_alias: str
    default_color: AnsiColor
    display_name: str


TRACKED_MODEL_INFO: Dict[TrackedModel, TrackedModelInfo] = {
    TrackedModel.OPUS: TrackedModelInfo("opus", AnsiColor.c256(214), "Opus"),
    TrackedModel.GEMINI_3_PRO: TrackedModelInfo(
        "3pro", AnsiColor.c256(129), "Gemini 3 Pro"
    ),
    TrackedModel.GEMINI_3_FLASH: TrackedModelInfo(
        "3flash", AnsiColor.c256(45), "Gemini 3 Flash"
    ),
}


# =============================================================================
# AUTH TYPES
# =============================================================================


class AuthType:
    """
    Provider type strings reported by the management API.

    The API is not consistent about '-' vs '_', so comparisons go through
    normalize_auth_type().
    """

    ALL = "all"
    ANTIGRAVITY = "antigravity"
    GEMINI_CLI = "gemini-cli"


def normalize_auth_type(value: str) -> str:
    """Fold case and underscores so 'gemini_cli' and 'gemini-cli' compare equal."""
    return value.strip().lower().replace("_", "-")


def as_fraction(value: Any) -> Optional[float]:
    """
    Convert a JSON number to a float.

    Returns None for booleans, non-numbers and integers too large for a float.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        return float(value)
    except OverflowError:
        return None


# =============================================================================
# REMOTE DATA
# =============================================================================


@dataclass
class AuthEntry:
    """
    One credential record listed by the management API.

    Read-only; the segment never mutates auth entries.
    """

    auth_type: str
    auth_index: str
    label: Optional[str] = None
    name: Optional[str] = None
    disabled: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthEntry":
        """
        Build an entry from the management API's JSON object.

        Raises:
            ValueError: If the required 'type' or 'auth_index' fields are missing,
                or 'disabled' is present but not a boolean
        """
        auth_type = data.get("type")
        auth_index = data.get("auth_index")
        if not isinstance(auth_type, str) or auth_index is None:
            raise ValueError("auth entry is missing 'type' or 'auth_index'")
        disabled = data.get("disabled")
        if disabled is not None and not isinstance(disabled, bool):
            raise ValueError(f"auth entry 'disabled' must be a boolean, got {disabled!r}")
        label = data.get("label")
        name = data.get("name")
        return cls(
            auth_type=auth_type,
            auth_index=str(auth_index),
            label=label if isinstance(label, str) else None,
            name=name if isinstance(name, str) else None,
            disabled=bool(disabled),
        )

    @property
    def normalized_type(self) -> str:
        return normalize_auth_type(self.auth_type)


@dataclass
class ModelQuota:
    """
    Remaining quota for one reported model under one auth entry.

    remaining_fraction is stored as reported; clamping happens when formatting.
    """

    model_id: str
    display_name: str
    remaining_fraction: float
    auth_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model_id": self.model_id,
            "display_name": self.display_name,
            "remaining_fraction": self.remaining_fraction,
            "auth_type": self.auth_type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelQuota":
        """
        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        try:
            model_id = data["model_id"]
            display_name = data["display_name"]
            remaining = data["remaining_fraction"]
            auth_type = data["auth_type"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"malformed quota record: {e}") from e
        if not isinstance(model_id, str) or not isinstance(display_name, str):
            raise ValueError("quota record model_id/display_name must be strings")
        if not isinstance(auth_type, str):
            raise ValueError("quota record auth_type must be a string")
        fraction = as_fraction(remaining)
        if fraction is None:
            raise ValueError("quota record remaining_fraction must be a number that fits in a float")
        return cls(
            model_id=model_id,
            display_name=display_name,
            remaining_fraction=fraction,
            auth_type=auth_type,
        )


@dataclass
class CachedQuotas:
    """
    The single persisted snapshot: the last successful non-empty fetch.

    cached_at is an RFC 3339 timestamp string. The snapshot is always
    replaced wholesale, never edited in place.
    """

    quotas: List[ModelQuota] = field(default_factory=list)
    cached_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quotas": [q.to_dict() for q in self.quotas],
            "cached_at": self.cached_at,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "CachedQuotas":
        """
        Raises:
            ValueError: If the document does not have the cache file's shape
        """
        if not isinstance(data, dict):
            raise ValueError("cache document must be an object")
        quotas = data.get("quotas")
        cached_at = data.get("cached_at")
        if not isinstance(quotas, list) or not isinstance(cached_at, str):
            raise ValueError("cache document needs 'quotas' list and 'cached_at'")
        return cls(
            quotas=[ModelQuota.from_dict(q) for q in quotas],
            cached_at=cached_at,
        )


# =============================================================================
# SEGMENT OUTPUT
# =============================================================================


class SegmentState(Enum):
    """Where the quotas shown for this invocation came from."""

    USE_CACHE = "cache"
    FETCH = "fetch"
    FETCH_EMPTY_FALLBACK = "stale_cache"
    NO_DATA = "none"


@dataclass
class SegmentData:
    """
    Output handed to the statusline renderer.

    metadata["raw_text"] == "true" tells the renderer the primary text is
    already colored.
    """

    primary: str
    secondary: str = ""
    metadata: Dict[str, str] = field(default_factory=dict)
