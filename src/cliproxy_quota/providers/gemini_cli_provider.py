# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Gemini CLI quota lookup.

API Details:
- Endpoint: POST https://cloudcode-pa.googleapis.com/v1internal:retrieveUserQuota
- Body: {"project": "<project_id>"}
- Response: {"buckets": [{"modelId": str, "remainingFraction": float, ...}]}

The project id is not exposed by the management API; it is recovered from
the credential file name, which the proxy writes as
"gemini-<email>-<project_id>.json".
"""

import json
import logging
from typing import List, Optional

from ..classifier import is_tracked
from ..core.types import AuthEntry, AuthType, ModelQuota, as_fraction
from ..management import ManagementClient
from .provider_interface import QuotaProviderInterface

lib_logger = logging.getLogger("cliproxy_quota")

GEMINI_CLI_QUOTA_URL = "https://cloudcode-pa.googleapis.com/v1internal:retrieveUserQuota"


def extract_project_from_name(name: str) -> Optional[str]:
    """
    Recover the Google Cloud project id from a credential file name.

    Examples:
        gemini-user@gmail.com-airy-lodge-481706-r3.json -> airy-lodge-481706-r3
        gemini-nobody.json -> None

    Args:
        name: Credential file name as listed by the management API

    Returns:
        Project id, or None if the name does not have the expected shape
    """
    if name.endswith(".json"):
        name = name[: -len(".json")]
    parts = name.split("-")
    if len(parts) < 4:
        return None
    for i, part in enumerate(parts):
        if "@" in part:
            return "-".join(parts[i + 1 :]) or None
    return None


class GeminiCliQuotaProvider(QuotaProviderInterface):
    """Reads per-bucket remaining fractions from retrieveUserQuota."""

    auth_type = AuthType.GEMINI_CLI

    def fetch_quotas(
        self, client: ManagementClient, entry: AuthEntry
    ) -> List[ModelQuota]:
        project = extract_project_from_name(entry.name or "")
        if not project:
            lib_logger.debug(
                f"Gemini CLI auth {entry.auth_index}: no project id in name {entry.name!r}"
            )
            return []

        result = client.api_call(
            entry.auth_index,
            "POST",
            GEMINI_CLI_QUOTA_URL,
            json.dumps({"project": project}),
        )
        if result is None:
            return []

        data = result.json_body()
        buckets = data.get("buckets") if isinstance(data, dict) else None
        if not isinstance(buckets, list):
            return []

        quotas = []
        for bucket in buckets:
            if not isinstance(bucket, dict):
                continue
            model_id = bucket.get("modelId")
            remaining = as_fraction(bucket.get("remainingFraction"))
            if not isinstance(model_id, str):
                continue
            if remaining is None:
                continue
            if not is_tracked(model_id, model_id):
                continue

            quotas.append(
                ModelQuota(
                    model_id=model_id,
                    display_name=model_id,
                    remaining_fraction=remaining,
                    auth_type=AuthType.GEMINI_CLI,
                )
            )

        lib_logger.debug(
            f"Gemini CLI auth {entry.auth_index} ({project}): {len(quotas)} tracked bucket(s)"
        )
        return quotas
