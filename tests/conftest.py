"""Shared fixtures: a fake management API built on httpx.MockTransport."""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from cliproxy_quota.cache import QuotaCache
from cliproxy_quota.fetcher import QuotaFetcher
from cliproxy_quota.providers.antigravity_provider import ANTIGRAVITY_MODELS_URL
from cliproxy_quota.providers.gemini_cli_provider import GEMINI_CLI_QUOTA_URL

HOST = "http://proxy.test"
KEY = "test-key"


def antigravity_body(models: Dict[str, Any]) -> str:
    return json.dumps({"models": models})


def gemini_body(buckets: List[Dict[str, Any]]) -> str:
    return json.dumps({"buckets": buckets})


class FakeManagementApi:
    """
    Records calls and answers them from canned data.

    upstream maps auth_index -> upstream body string (or None for a failed call).
    """

    def __init__(
        self,
        files: Optional[List[Dict[str, Any]]] = None,
        upstream: Optional[Dict[str, Optional[str]]] = None,
        auth_files_status: int = 200,
    ):
        self.files = files or []
        self.upstream = upstream or {}
        self.auth_files_status = auth_files_status
        self.api_calls: List[Dict[str, Any]] = []
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/v0/management/auth-files":
            if self.auth_files_status != 200:
                return httpx.Response(self.auth_files_status, text="nope")
            return httpx.Response(200, json={"files": self.files})
        if request.url.path == "/v0/management/api-call":
            payload = json.loads(request.content)
            self.api_calls.append(payload)
            body = self.upstream.get(payload["authIndex"])
            if body is None:
                return httpx.Response(502, text="upstream failed")
            return httpx.Response(200, json={"body": body})
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def fetcher_factory(self) -> Callable[[str, str], QuotaFetcher]:
        def factory(host: str, key: str) -> QuotaFetcher:
            return QuotaFetcher(host, key, transport=self.transport)

        return factory


@pytest.fixture
def cache(tmp_path) -> QuotaCache:
    return QuotaCache(tmp_path / "ccline" / ".cli_proxy_api_quota_cache.json")


@pytest.fixture
def urls() -> Dict[str, str]:
    return {"antigravity": ANTIGRAVITY_MODELS_URL, "gemini-cli": GEMINI_CLI_QUOTA_URL}
