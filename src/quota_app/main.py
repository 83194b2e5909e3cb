# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Mirrowel

"""
Command-line entry point for the quota segment.

Prints the segment's statusline text to stdout (nothing if there is no
data). Logs go to stderr or a file so they never end up in the statusline.

Examples:
    ccline-quota
    ccline-quota --options ~/.claude/ccline/quota.json
    ccline-quota --set auth_type=gemini-cli --set cache_duration=60
    ccline-quota --details --refresh
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from cliproxy_quota import QuotaSegment, QuotaSegmentConfig, default_segment_options
from cliproxy_quota.core.errors import ConfigError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ccline-quota",
        description="Render remaining CLI Proxy API quota as a statusline segment.",
    )
    parser.add_argument(
        "--options",
        metavar="PATH",
        help="JSON file holding the segment's options map ('-' reads stdin).",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override one option; VALUE is parsed as JSON when possible.",
    )
    parser.add_argument(
        "--refresh", action="store_true", help="Ignore a still-valid cache."
    )
    parser.add_argument(
        "--details",
        action="store_true",
        help="Show every reading and the per-model averages instead of the segment.",
    )
    parser.add_argument(
        "--print-defaults",
        action="store_true",
        help="Print the default options map as JSON and exit.",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Log debug output to stderr."
    )
    parser.add_argument(
        "--log-file", metavar="PATH", help="Also write debug logs to this file."
    )
    return parser


def configure_logging(debug: bool = False, log_file: Optional[str] = None) -> None:
    """Send logs to stderr (and optionally a file); stdout stays clean."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        root_logger.addHandler(file_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def parse_override(item: str) -> tuple:
    """
    Split a KEY=VALUE override.

    Examples:
        "cache_duration=60" -> ("cache_duration", 60)
        "opus_color={\"c16\": 9}" -> ("opus_color", {"c16": 9})
        "separator= / " -> ("separator", " / ")

    Raises:
        ValueError: If there is no '=' or the key is empty
    """
    key, sep, raw = item.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"expected KEY=VALUE, got {item!r}")
    try:
        value = json.loads(raw)
    except ValueError:
        value = raw
    return key, value


def load_options(path: Optional[str], overrides: List[str]) -> Dict[str, Any]:
    """
    Read the options map and apply --set overrides.

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object
    """
    options: Dict[str, Any] = {}
    if path:
        try:
            if path == "-":
                data = json.load(sys.stdin)
            else:
                with open(Path(path).expanduser(), "r", encoding="utf-8") as f:
                    data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError("options", f"cannot read {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("options", f"{path} must contain a JSON object")
        # Accept either a bare options map or a whole segment entry
        nested = data.get("options")
        options.update(nested if isinstance(nested, dict) else data)

    for item in overrides:
        try:
            key, value = parse_override(item)
        except ValueError as e:
            raise ConfigError("--set", str(e)) from e
        options[key] = value
    return options


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(debug=args.debug, log_file=args.log_file)

    # Local .env may carry CLIPROXY_QUOTA_HOST / CLIPROXY_QUOTA_KEY
    load_dotenv(Path.cwd() / ".env", override=False)

    if args.print_defaults:
        print(json.dumps(default_segment_options(), indent=2))
        return 0

    try:
        options = load_options(args.options, args.overrides)
        config = QuotaSegmentConfig.from_options(options)
    except ConfigError as e:
        print(f"ccline-quota: invalid option {e}", file=sys.stderr)
        return 2

    segment = QuotaSegment()

    if args.details:
        from .quota_viewer import show_quota_details

        resolution = segment.resolve_quotas(config, force_refresh=args.refresh)
        show_quota_details(resolution, config)
        return 0

    data = segment.collect(config, force_refresh=args.refresh)
    if data is not None:
        print(data.primary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
