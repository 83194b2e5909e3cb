# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Mirrowel

"""
One-shot quota details view.

Shows every tracked-model reading behind the statusline fragment, grouped by
provider type, followed by the per-model averages the segment displays.
Uses only rich on top of cliproxy_quota.
"""

from datetime import datetime, timezone
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from cliproxy_quota.aggregator import aggregate_quotas, count_readings
from cliproxy_quota.cache import parse_rfc3339
from cliproxy_quota.classifier import classify_model
from cliproxy_quota.core.config import QuotaSegmentConfig
from cliproxy_quota.core.types import ModelQuota, SegmentState, TrackedModel
from cliproxy_quota.formatter import quota_percent
from cliproxy_quota.segment import QuotaResolution

# =============================================================================
# DISPLAY CONFIGURATION
# =============================================================================

TABLE_MODEL_WIDTH = 28
TABLE_PROVIDER_WIDTH = 12
QUOTA_BAR_WIDTH = 10

SOURCE_LABELS = {
    SegmentState.USE_CACHE: ("cached", "green"),
    SegmentState.FETCH: ("live", "cyan"),
    SegmentState.FETCH_EMPTY_FALLBACK: ("stale cache (fetch failed)", "yellow"),
    SegmentState.NO_DATA: ("no data", "red"),
}


def format_time_ago(timestamp: Optional[str], now: Optional[datetime] = None) -> str:
    """Format an RFC 3339 timestamp as relative time (e.g., '5 min ago')."""
    moment = parse_rfc3339(timestamp or "")
    if moment is None:
        return "Never"
    now = now or datetime.now(timezone.utc)
    delta = (now - moment).total_seconds()
    if delta < 60:
        return f"{max(0, int(delta))}s ago"
    elif delta < 3600:
        return f"{int(delta / 60)} min ago"
    elif delta < 86400:
        return f"{int(delta / 3600)}h ago"
    else:
        return f"{int(delta / 86400)}d ago"


def create_progress_bar(percent: Optional[int], width: int = QUOTA_BAR_WIDTH) -> str:
    """Create a text-based progress bar."""
    if percent is None:
        return "░" * width
    filled = int(percent / 100 * width)
    return "▓" * filled + "░" * (width - filled)


def percent_style(percent: int) -> str:
    """Color remaining quota: red when nearly exhausted, yellow when low."""
    if percent <= 10:
        return "red"
    if percent <= 40:
        return "yellow"
    return "green"


def quota_sort_key(quota: ModelQuota) -> tuple:
    """Order readings by provider, then tracked model, then model id."""
    model = classify_model(quota.model_id, quota.display_name)
    order = TrackedModel.all().index(model) if model else len(TrackedModel.all())
    return (quota.auth_type, order, quota.model_id.lower())


def build_readings_table(quotas: List[ModelQuota]) -> Table:
    table = Table(box=None, show_header=True, header_style="bold", padding=(0, 1))
    table.add_column("Provider", style="cyan", min_width=TABLE_PROVIDER_WIDTH)
    table.add_column("Model", min_width=TABLE_MODEL_WIDTH)
    table.add_column("Remaining", justify="right")
    table.add_column("")

    for quota in sorted(quotas, key=quota_sort_key):
        percent = quota_percent(quota.remaining_fraction)
        style = percent_style(percent)
        table.add_row(
            quota.auth_type,
            quota.display_name,
            Text(f"{percent}%", style=style),
            Text(create_progress_bar(percent), style=style),
        )
    return table


def build_summary_table(quotas: List[ModelQuota], config: QuotaSegmentConfig) -> Table:
    averages = aggregate_quotas(quotas)
    counts = count_readings(quotas)

    table = Table(box=None, show_header=True, header_style="bold", padding=(0, 1))
    table.add_column("Model", min_width=TABLE_MODEL_WIDTH)
    table.add_column("Alias")
    table.add_column("Creds", justify="center")
    table.add_column("Average", justify="right")
    table.add_column("")

    for model in TrackedModel.all():
        if model not in averages:
            continue
        percent = quota_percent(averages[model])
        style = percent_style(percent)
        table.add_row(
            model.display_name,
            config.display_for(model).alias,
            str(counts.get(model, 0)),
            Text(f"{percent}%", style=style),
            Text(create_progress_bar(percent), style=style),
        )
    return table


def show_quota_details(
    resolution: QuotaResolution,
    config: QuotaSegmentConfig,
    console: Optional[Console] = None,
) -> None:
    """Print the readings and per-model averages for one resolution."""
    console = console or Console()

    label, color = SOURCE_LABELS[resolution.state]
    console.print("━" * 60)
    console.print("[bold cyan]CLI Proxy API Quota[/bold cyan]")
    console.print("━" * 60)
    console.print(
        f"Host: [bold]{config.host}[/bold] | Filter: {config.auth_type} | "
        f"Source: [{color}]{label}[/{color}] | "
        f"Updated: {format_time_ago(resolution.cached_at)}"
    )
    console.print()

    if not resolution.quotas:
        console.print("[yellow]No quota data available.[/yellow]")
        return

    console.print(build_readings_table(resolution.quotas))
    console.print()
    console.print("[bold]Averages[/bold]")
    console.print(build_summary_table(resolution.quotas, config))
