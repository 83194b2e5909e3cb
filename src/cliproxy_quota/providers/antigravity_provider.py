# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Antigravity quota lookup.

API Details:
- Endpoint: POST https://daily-cloudcode-pa.googleapis.com/v1internal:fetchAvailableModels
- Body: {}
- Requires the Antigravity client User-Agent
- Response: {"models": {"<model_id>": {"displayName": str,
                                        "quotaInfo": {"remainingFraction": float}}}}
"""

import logging
from typing import List

from ..classifier import is_tracked
from ..core.types import AuthEntry, AuthType, ModelQuota, as_fraction
from ..management import ManagementClient
from .provider_interface import QuotaProviderInterface

lib_logger = logging.getLogger("cliproxy_quota")

ANTIGRAVITY_MODELS_URL = (
    "https://daily-cloudcode-pa.googleapis.com/v1internal:fetchAvailableModels"
)
ANTIGRAVITY_USER_AGENT = "antigravity/1.11.5 windows/amd64"


class AntigravityQuotaProvider(QuotaProviderInterface):
    """Reads per-model remaining fractions from fetchAvailableModels."""

    auth_type = AuthType.ANTIGRAVITY

    def fetch_quotas(
        self, client: ManagementClient, entry: AuthEntry
    ) -> List[ModelQuota]:
        result = client.api_call(
            entry.auth_index,
            "POST",
            ANTIGRAVITY_MODELS_URL,
            "{}",
            extra_headers={"User-Agent": ANTIGRAVITY_USER_AGENT},
        )
        if result is None:
            return []

        data = result.json_body()
        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, dict):
            return []

        quotas = []
        for model_id, model_info in models.items():
            if not isinstance(model_info, dict):
                continue
            quota_info = model_info.get("quotaInfo")
            if not isinstance(quota_info, dict):
                continue
            remaining = as_fraction(quota_info.get("remainingFraction"))
            if remaining is None:
                continue

            display_name = model_info.get("displayName")
            if not isinstance(display_name, str):
                display_name = model_id

            if not is_tracked(model_id, display_name):
                continue

            quotas.append(
                ModelQuota(
                    model_id=model_id,
                    display_name=display_name,
                    remaining_fraction=remaining,
                    auth_type=AuthType.ANTIGRAVITY,
                )
            )

        lib_logger.debug(
            f"Antigravity auth {entry.auth_index}: {len(quotas)} tracked model(s)"
        )
        return quotas
