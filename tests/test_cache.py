"""Tests for the persisted quota cache."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from cliproxy_quota.cache import QuotaCache, format_rfc3339, parse_rfc3339
from cliproxy_quota.core.types import CachedQuotas, ModelQuota

CACHED_AT = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_snapshot(cached_at: str = "2026-03-01T12:00:00+00:00") -> CachedQuotas:
    return CachedQuotas(
        quotas=[
            ModelQuota("claude-opus-4-5", "Claude Opus 4.5", 0.8, "antigravity"),
            ModelQuota("gemini-3-pro-preview", "gemini-3-pro-preview", 0.25, "gemini-cli"),
        ],
        cached_at=cached_at,
    )


class TestParseRfc3339:
    def test_offset(self):
        assert parse_rfc3339("2026-03-01T12:00:00+00:00") == CACHED_AT

    def test_z_suffix(self):
        assert parse_rfc3339("2026-03-01T12:00:00Z") == CACHED_AT

    def test_nanoseconds(self):
        parsed = parse_rfc3339("2026-03-01T12:00:00.123456789+00:00")
        assert parsed == CACHED_AT + timedelta(microseconds=123456)

    def test_non_utc_offset(self):
        assert parse_rfc3339("2026-03-01T14:00:00+02:00") == CACHED_AT

    def test_invalid(self):
        assert parse_rfc3339("") is None
        assert parse_rfc3339("yesterday") is None
        assert parse_rfc3339("2026-03-01T12:00:00") is None  # no offset
        assert parse_rfc3339("2026-03-01T12:00+00:00") is None  # no seconds
        assert parse_rfc3339("20260301T120000+00:00") is None  # basic format
        assert parse_rfc3339("2026-03-01T12:00:00+0000") is None
        assert parse_rfc3339("2026-03-01") is None

    def test_alternate_separators(self):
        assert parse_rfc3339("2026-03-01t12:00:00z") == CACHED_AT
        assert parse_rfc3339("2026-03-01 12:00:00+00:00") == CACHED_AT

    def test_format_is_parseable(self):
        assert parse_rfc3339(format_rfc3339(CACHED_AT)) == CACHED_AT


class TestLoadSave:
    def test_round_trip(self, cache):
        snapshot = make_snapshot()
        assert cache.save(snapshot) is True
        assert cache.load() == snapshot

    def test_creates_parent_directories(self, cache):
        assert not cache.file_path.parent.exists()
        cache.save(make_snapshot())
        assert cache.file_path.exists()

    def test_overwrites_wholesale(self, cache):
        cache.save(make_snapshot())
        replacement = CachedQuotas(
            quotas=[ModelQuota("gemini-3-flash", "gemini-3-flash", 1.0, "gemini-cli")],
            cached_at="2026-03-02T00:00:00+00:00",
        )
        cache.save(replacement)
        assert cache.load() == replacement

    def test_no_temp_files_left_behind(self, cache):
        cache.save(make_snapshot())
        assert [p.name for p in cache.file_path.parent.iterdir()] == [cache.file_path.name]

    def test_file_format(self, cache):
        cache.save(make_snapshot())
        data = json.loads(cache.file_path.read_text())
        assert data["cached_at"] == "2026-03-01T12:00:00+00:00"
        assert data["quotas"][0] == {
            "model_id": "claude-opus-4-5",
            "display_name": "Claude Opus 4.5",
            "remaining_fraction": 0.8,
            "auth_type": "antigravity",
        }

    def test_missing_file(self, cache):
        assert cache.load() is None

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "[]",
            '{"quotas": "nope", "cached_at": "2026-03-01T12:00:00Z"}',
            '{"quotas": [{"model_id": "x"}], "cached_at": "2026-03-01T12:00:00Z"}',
            '{"quotas": []}',
            '{"quotas": [{"model_id": "claude-opus-4-5", "display_name": "Opus", '
            '"remaining_fraction": 1' + "0" * 400 + ', "auth_type": "antigravity"}], '
            '"cached_at": "2026-03-01T12:00:00Z"}',
        ],
    )
    def test_malformed_file_is_absent(self, cache, content):
        cache.file_path.parent.mkdir(parents=True)
        cache.file_path.write_text(content)
        assert cache.load() is None

    def test_save_failure_is_swallowed(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        cache = QuotaCache(blocker / "cache.json")
        assert cache.save(make_snapshot()) is False


class TestValidity:
    def test_boundary(self):
        snapshot = make_snapshot()
        ttl = 180
        assert QuotaCache.is_valid(snapshot, ttl, now=CACHED_AT + timedelta(seconds=ttl - 1))
        assert not QuotaCache.is_valid(snapshot, ttl, now=CACHED_AT + timedelta(seconds=ttl))
        assert not QuotaCache.is_valid(snapshot, ttl, now=CACHED_AT + timedelta(seconds=ttl + 1))

    def test_fresh(self):
        assert QuotaCache.is_valid(make_snapshot(), 180, now=CACHED_AT)

    def test_zero_ttl_never_valid(self):
        assert not QuotaCache.is_valid(make_snapshot(), 0, now=CACHED_AT)

    def test_bad_timestamp_is_stale(self):
        assert not QuotaCache.is_valid(make_snapshot("garbage"), 10_000, now=CACHED_AT)

    def test_non_rfc3339_iso_timestamp_is_stale(self):
        now = CACHED_AT + timedelta(seconds=10)
        assert not QuotaCache.is_valid(make_snapshot("2026-03-01T12:00+00:00"), 180, now=now)
        assert not QuotaCache.is_valid(make_snapshot("20260301T120000+00:00"), 180, now=now)

    def test_age_seconds(self, cache):
        snapshot = make_snapshot()
        assert cache.age_seconds(snapshot, now=CACHED_AT + timedelta(seconds=200)) == 200
        assert cache.age_seconds(make_snapshot("garbage")) is None
