"""Tests for the command-line front end."""

import json
import os
from unittest.mock import patch

import pytest

from cliproxy_quota.core.types import ModelQuota, SegmentData, SegmentState
from cliproxy_quota.segment import QuotaResolution
from quota_app import main as app
from quota_app.quota_viewer import create_progress_bar, format_time_ago, show_quota_details


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CLIPROXY_QUOTA_HOST", raising=False)
    monkeypatch.delenv("CLIPROXY_QUOTA_KEY", raising=False)
    monkeypatch.setattr(app, "configure_logging", lambda **kwargs: None)


class TestParseOverride:
    def test_json_value(self):
        assert app.parse_override("cache_duration=60") == ("cache_duration", 60)
        assert app.parse_override('opus_color={"c16": 9}') == ("opus_color", {"c16": 9})

    def test_string_value(self):
        assert app.parse_override("separator= / ") == ("separator", " / ")
        assert app.parse_override("host=http://x:1") == ("host", "http://x:1")

    def test_invalid(self):
        with pytest.raises(ValueError):
            app.parse_override("no-equals-sign")
        with pytest.raises(ValueError):
            app.parse_override("=value")


class TestLoadOptions:
    def test_bare_map(self, tmp_path):
        path = tmp_path / "opts.json"
        path.write_text(json.dumps({"key": "abc", "cache_duration": 5}))
        assert app.load_options(str(path), ["cache_duration=7"]) == {"key": "abc", "cache_duration": 7}

    def test_segment_entry(self, tmp_path):
        path = tmp_path / "segment.json"
        path.write_text(json.dumps({"id": "cli_proxy_api_quota", "options": {"key": "abc"}}))
        assert app.load_options(str(path), []) == {"key": "abc"}

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "opts.json"
        path.write_text("[1, 2]")
        with pytest.raises(app.ConfigError):
            app.load_options(str(path), [])

    def test_missing_file(self, tmp_path):
        with pytest.raises(app.ConfigError):
            app.load_options(str(tmp_path / "nope.json"), [])


class TestMain:
    def test_prints_segment(self, capsys):
        data = SegmentData(primary="opus:70%", metadata={"raw_text": "true"})
        with patch.object(app.QuotaSegment, "collect", return_value=data) as collect:
            assert app.main(["--set", "auth_type=antigravity"]) == 0
        assert capsys.readouterr().out == "opus:70%\n"
        config = collect.call_args[0][0]
        assert config.auth_type == "antigravity"
        assert collect.call_args[1] == {"force_refresh": False}

    def test_no_data_prints_nothing(self, capsys):
        with patch.object(app.QuotaSegment, "collect", return_value=None):
            assert app.main([]) == 0
        assert capsys.readouterr().out == ""

    def test_refresh_flag(self):
        with patch.object(app.QuotaSegment, "collect", return_value=None) as collect:
            app.main(["--refresh"])
        assert collect.call_args[1] == {"force_refresh": True}

    def test_invalid_option_exits_2(self, capsys):
        with patch.object(app.QuotaSegment, "collect") as collect:
            assert app.main(["--set", "cache_duration=-5"]) == 2
        collect.assert_not_called()
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "cache_duration" in captured.err

    def test_print_defaults(self, capsys):
        assert app.main(["--print-defaults"]) == 0
        defaults = json.loads(capsys.readouterr().out)
        assert defaults["host"] == "http://localhost:8317"
        assert defaults["opus_color"] == {"c256": 214}

    def test_env_file_supplies_key(self, tmp_path):
        (tmp_path / ".env").write_text("CLIPROXY_QUOTA_KEY=from-dotenv\n")
        with patch.dict(os.environ), patch.object(
            app.QuotaSegment, "collect", return_value=None
        ) as collect:
            app.main([])
        assert collect.call_args[0][0].key == "from-dotenv"

    def test_details(self):
        resolution = QuotaResolution(SegmentState.NO_DATA)
        with patch.object(app.QuotaSegment, "resolve_quotas", return_value=resolution), patch(
            "quota_app.quota_viewer.show_quota_details"
        ) as show:
            assert app.main(["--details"]) == 0
        assert show.call_args[0][0] is resolution


class TestQuotaViewer:
    def test_progress_bar(self):
        assert create_progress_bar(None, 4) == "░░░░"
        assert create_progress_bar(50, 4) == "▓▓░░"
        assert create_progress_bar(100, 4) == "▓▓▓▓"

    def test_time_ago(self):
        assert format_time_ago(None) == "Never"
        assert format_time_ago("bad") == "Never"

    def test_renders_readings(self):
        from rich.console import Console

        from cliproxy_quota.core.config import QuotaSegmentConfig

        console = Console(record=True, width=120)
        resolution = QuotaResolution(
            SegmentState.FETCH,
            [
                ModelQuota("claude-opus-4-5", "Claude Opus 4.5", 0.8, "antigravity"),
                ModelQuota("gemini-3-pro-preview", "gemini-3-pro-preview", 0.05, "gemini-cli"),
            ],
            "2026-03-01T12:00:00+00:00",
        )
        show_quota_details(resolution, QuotaSegmentConfig.from_options({}, environ={}), console)
        text = console.export_text()
        assert "Claude Opus 4.5" in text
        assert "80%" in text
        assert "Gemini 3 Pro" in text
        assert "live" in text

    def test_renders_empty(self):
        from rich.console import Console

        from cliproxy_quota.core.config import QuotaSegmentConfig

        console = Console(record=True, width=120)
        show_quota_details(
            QuotaResolution(SegmentState.NO_DATA),
            QuotaSegmentConfig.from_options({}, environ={}),
            console,
        )
        assert "No quota data available" in console.export_text()
