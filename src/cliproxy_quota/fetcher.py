# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Fetch tracked-model quotas for every enabled auth entry.

Entries are processed one at a time, in the order the management API lists
them. There are no retries: a failed call contributes nothing for this
invocation.
"""

import logging
from typing import Callable, List, Optional

import httpx

from .core.types import AuthEntry, AuthType, ModelQuota, normalize_auth_type
from .management import ManagementClient
from .providers import get_provider_adapter

lib_logger = logging.getLogger("cliproxy_quota")


class QuotaFetcher:
    """Enumerates auth entries and dispatches each to its provider adapter."""

    def __init__(
        self,
        host: str,
        key: str,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.host = host
        self.key = key
        self._transport = transport

    @staticmethod
    def should_fetch(entry: AuthEntry, auth_type_filter: str) -> bool:
        """Disabled entries and entries outside the type filter are skipped."""
        if entry.disabled:
            return False
        auth_type_filter = normalize_auth_type(auth_type_filter)
        if auth_type_filter != AuthType.ALL and entry.normalized_type != auth_type_filter:
            return False
        return True

    def fetch_all(self, auth_type_filter: str = AuthType.ALL) -> List[ModelQuota]:
        """
        Fetch quotas across all matching auth entries.

        Args:
            auth_type_filter: "all", "antigravity" or "gemini-cli"

        Returns:
            Concatenated quotas in discovery order. Empty if the auth listing
            fails or nothing tracked was found.
        """
        with ManagementClient(self.host, self.key, transport=self._transport) as client:
            entries = client.list_auth_files()
            if entries is None:
                lib_logger.debug(f"No auth entries available from {self.host}")
                return []

            all_quotas: List[ModelQuota] = []
            for entry in entries:
                if not self.should_fetch(entry, auth_type_filter):
                    continue

                adapter = get_provider_adapter(entry.auth_type)
                if adapter is None:
                    continue

                all_quotas.extend(adapter.fetch_quotas(client, entry))

        lib_logger.debug(
            f"Fetched {len(all_quotas)} quota reading(s) from {len(entries)} auth entries"
        )
        return all_quotas


# Signature used by QuotaSegment to build a fetcher for a config
FetcherFactory = Callable[[str, str], QuotaFetcher]
