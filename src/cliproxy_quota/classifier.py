# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Map raw model identifiers to tracked models.

Upstream providers name the same model differently ("gemini-3-pro-preview",
"Gemini 3 Pro Preview", "claude-opus-4-5-thinking"), so matching is a
case-insensitive substring test on both the id and the display name.
"""

from typing import Optional

from .core.types import TrackedModel

_PREVIEW_SUFFIXES = ("-preview", " preview")

# (model, id substring, display-name substring); first match wins
_PATTERNS = (
    (TrackedModel.OPUS, "opus", "opus"),
    (TrackedModel.GEMINI_3_PRO, "gemini-3-pro", "gemini 3 pro"),
    (TrackedModel.GEMINI_3_FLASH, "gemini-3-flash", "gemini 3 flash"),
)


def normalize_model_text(text: str) -> str:
    """
    Lowercase and trim a model id or name, dropping a trailing preview marker.

    Examples:
        "Gemini-3-Pro-Preview " -> "gemini-3-pro"
        "Gemini 3 Flash Preview" -> "gemini 3 flash"
    """
    normalized = text.strip().lower()
    for suffix in _PREVIEW_SUFFIXES:
        if normalized.endswith(suffix):
            normalized = normalized[: -len(suffix)].rstrip()
    return normalized


def classify_model(model_id: str, display_name: str = "") -> Optional[TrackedModel]:
    """
    Return the tracked model for a model id / display name pair, or None.

    Either field matching is enough. Never raises.
    """
    model_id = normalize_model_text(model_id or "")
    display_name = normalize_model_text(display_name or "")

    for model, id_pattern, name_pattern in _PATTERNS:
        if id_pattern in model_id or name_pattern in display_name:
            return model
    return None


def is_tracked(model_id: str, display_name: str = "") -> bool:
    return classify_model(model_id, display_name) is not None
