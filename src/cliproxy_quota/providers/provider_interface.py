# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""Common interface for per-provider quota adapters."""

from abc import ABC, abstractmethod
from typing import List

from ..core.types import AuthEntry, ModelQuota
from ..management import ManagementClient


class QuotaProviderInterface(ABC):
    """
    Looks up remaining quota for one auth entry of a given provider type.

    Adapters call the upstream provider through ManagementClient.api_call and
    return only quotas for tracked models. They never raise: any failure
    yields an empty list.
    """

    # Normalized auth type this adapter handles (e.g. "gemini-cli")
    auth_type: str = ""

    @abstractmethod
    def fetch_quotas(
        self, client: ManagementClient, entry: AuthEntry
    ) -> List[ModelQuota]:
        """Return tracked-model quotas for one auth entry."""
