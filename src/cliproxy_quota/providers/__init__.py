# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

from typing import Dict, Optional

from ..core.types import normalize_auth_type
from .antigravity_provider import AntigravityQuotaProvider
from .gemini_cli_provider import GeminiCliQuotaProvider, extract_project_from_name
from .provider_interface import QuotaProviderInterface

# Normalized auth type -> adapter. Auth entries of any other type are ignored.
PROVIDER_ADAPTERS: Dict[str, QuotaProviderInterface] = {
    adapter.auth_type: adapter
    for adapter in (AntigravityQuotaProvider(), GeminiCliQuotaProvider())
}


def get_provider_adapter(auth_type: str) -> Optional[QuotaProviderInterface]:
    """Return the adapter for an auth type, or None if it has no quota API."""
    return PROVIDER_ADAPTERS.get(normalize_auth_type(auth_type))


__all__ = [
    "AntigravityQuotaProvider",
    "GeminiCliQuotaProvider",
    "PROVIDER_ADAPTERS",
    "QuotaProviderInterface",
    "extract_project_from_name",
    "get_provider_adapter",
]
