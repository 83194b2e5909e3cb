# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Client for the local proxy's management API.

Two endpoints are used:
- GET  /v0/management/auth-files  lists the configured credentials
- POST /v0/management/api-call    forwards a request upstream using one
                                  credential; the proxy substitutes the
                                  credential's token for "$TOKEN$"

Every failure (connect error, timeout, non-200, malformed JSON) is logged
and reported as None. Nothing here raises to the caller.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from .core.types import AuthEntry

lib_logger = logging.getLogger("cliproxy_quota")

AUTH_FILES_ENDPOINT = "/v0/management/auth-files"
API_CALL_ENDPOINT = "/v0/management/api-call"

AUTH_FILES_TIMEOUT = 5.0  # seconds
API_CALL_TIMEOUT = 10.0  # seconds

# Placeholder the proxy replaces with the selected credential's access token
TOKEN_PLACEHOLDER = "$TOKEN$"


@dataclass
class ApiCallResult:
    """Envelope returned by the api-call endpoint."""

    body: Optional[str] = None
    error: Optional[str] = None

    def json_body(self) -> Optional[Any]:
        """Decode the upstream provider's response body, or None if unusable."""
        if not self.body:
            return None
        try:
            return json.loads(self.body)
        except ValueError as e:
            lib_logger.debug(f"Upstream body is not JSON: {e}")
            return None


class ManagementClient:
    """
    Synchronous client for the management API.

    Usage:
        with ManagementClient(host, key) as client:
            entries = client.list_auth_files()
    """

    def __init__(
        self,
        host: str,
        key: str,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            host: Base URL of the management API (no trailing slash)
            key: Management key, sent as a bearer token
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.host = host.rstrip("/")
        self.key = key
        self._client = httpx.Client(transport=transport)

    def __enter__(self) -> "ManagementClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.key}"}

    def list_auth_files(self) -> Optional[List[AuthEntry]]:
        """
        List the proxy's auth entries.

        Returns:
            Auth entries in the order the API reports them, or None on failure.
            Individually malformed entries are skipped.
        """
        url = f"{self.host}{AUTH_FILES_ENDPOINT}"
        try:
            response = self._client.get(
                url, headers=self._headers(), timeout=AUTH_FILES_TIMEOUT
            )
        except httpx.TimeoutException:
            lib_logger.debug(f"Timed out listing auth files at {url}")
            return None
        except httpx.HTTPError as e:
            lib_logger.debug(f"Failed to list auth files: {type(e).__name__}: {e}")
            return None

        if response.status_code != 200:
            if response.status_code == 401:
                lib_logger.warning("Management API rejected the key (HTTP 401)")
            else:
                lib_logger.debug(f"auth-files returned HTTP {response.status_code}")
            return None

        try:
            files = response.json().get("files")
        except (ValueError, AttributeError) as e:
            lib_logger.debug(f"Malformed auth-files response: {e}")
            return None
        if not isinstance(files, list):
            lib_logger.debug("auth-files response has no 'files' list")
            return None

        entries = []
        for item in files:
            if not isinstance(item, dict):
                continue
            try:
                entries.append(AuthEntry.from_dict(item))
            except ValueError as e:
                lib_logger.debug(f"Skipping auth entry: {e}")
        return entries

    def api_call(
        self,
        auth_index: str,
        method: str,
        url: str,
        data: str,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Optional[ApiCallResult]:
        """
        Forward a request to an upstream provider through the proxy.

        Args:
            auth_index: Which credential the proxy should use
            method: HTTP method for the upstream request
            url: Upstream URL
            data: Upstream request body (already serialized)
            extra_headers: Headers added to the upstream request

        Returns:
            ApiCallResult, or None if the proxy call itself failed
        """
        headers = {
            "Authorization": f"Bearer {TOKEN_PLACEHOLDER}",
            "Content-Type": "application/json",
        }
        if extra_headers:
            headers.update(extra_headers)

        payload = {
            "authIndex": auth_index,
            "method": method,
            "url": url,
            "header": headers,
            "data": data,
        }

        api_url = f"{self.host}{API_CALL_ENDPOINT}"
        try:
            response = self._client.post(
                api_url,
                headers=self._headers(),
                json=payload,
                timeout=API_CALL_TIMEOUT,
            )
        except httpx.TimeoutException:
            lib_logger.debug(f"api-call timed out for auth {auth_index} -> {url}")
            return None
        except httpx.HTTPError as e:
            lib_logger.debug(f"api-call failed: {type(e).__name__}: {e}")
            return None

        if response.status_code != 200:
            lib_logger.debug(
                f"api-call returned HTTP {response.status_code} for auth {auth_index}"
            )
            return None

        try:
            envelope = response.json()
        except ValueError as e:
            lib_logger.debug(f"Malformed api-call response: {e}")
            return None
        if not isinstance(envelope, dict):
            return None

        body = envelope.get("body")
        error = envelope.get("error")
        result = ApiCallResult(
            body=body if isinstance(body, str) else None,
            error=error if isinstance(error, str) else None,
        )
        if result.error:
            lib_logger.debug(f"Upstream error for auth {auth_index}: {result.error}")
        return result
