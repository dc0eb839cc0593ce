"""
Command-line entry point for the CTV attribution core.

Loads the campaign catalog once, then prints the derived dashboard metrics for
a campaign or writes CSV exports. Stands in for the presentation layer when
the numbers are needed outside the dashboard.

Usage:
    python -m ctv_attribution.main --list
    python -m ctv_attribution.main camp-ecom-spring --mode individual --threshold 70
    python -m ctv_attribution.main camp-auto-launch --export report --export-dir out/
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from ctv_attribution.core.config import get_settings
from ctv_attribution.core.exceptions import CampaignNotFoundError, CatalogLoadError
from ctv_attribution.jobs.export import run_export
from ctv_attribution.models.enums import AttributionMode, ExportKind
from ctv_attribution.models.schemas import ShareState
from ctv_attribution.services.catalog import CampaignCatalog, get_catalog
from ctv_attribution.services.dashboard import build_dashboard_snapshot
from ctv_attribution.services.formatting import (
    format_currency,
    format_large_number,
    format_percentage,
    hours_to_label,
)
from ctv_attribution.services.share_link import encode_share_link

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CTV attribution metrics")
    parser.add_argument("campaign", nargs="?", help="Campaign id (default: first campaign)")
    parser.add_argument("--list", action="store_true", help="List campaigns and exit")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in AttributionMode],
        default=AttributionMode.HOUSEHOLD.value,
    )
    parser.add_argument("--threshold", type=int, default=0, help="Confidence threshold percent (0-100)")
    parser.add_argument("--export", choices=[k.value for k in ExportKind], help="Write a CSV export")
    parser.add_argument("--export-dir", help="Directory for exports (default: CTV_EXPORT_DIR)")
    parser.add_argument("--log-level", help="Override CTV_LOG_LEVEL")
    return parser


def format_summary(catalog: CampaignCatalog, campaign_id: str, mode: AttributionMode, threshold: int) -> List[str]:
    snapshot = build_dashboard_snapshot(catalog, campaign_id, mode, threshold)
    record = snapshot.campaign
    funnel = snapshot.funnel
    quality = snapshot.quality
    impact = snapshot.impact
    timing = snapshot.timing

    share = ShareState(campaign_index=catalog.index_of(record.id), mode=funnel.mode)

    lines = [
        f"{record.name} ({record.id}) - {funnel.mode.value} mode, threshold {funnel.threshold_percent}%",
        f"  Paths shown:            {funnel.retained_count}/{funnel.total_count}",
        f"  Crossover rate:         {format_percentage(funnel.crossover_rate)}",
        f"  Cross-device share:     {format_percentage(funnel.cross_device_conversion_share)}",
        f"  Avg confidence:         {format_percentage(funnel.average_adjusted_confidence)}"
        f" ({funnel.high_confidence_count} high-confidence paths)",
        f"  Data quality:           {quality.grade.value} ({quality.composite_score:.1f}/100)",
        f"  Median / p75:           {hours_to_label(timing.median_hours)} / {hours_to_label(timing.p75_hours)}",
        f"  Peak window:            {timing.peak_bucket.value}",
        f"  Lift:                   +{impact.relative_lift:.1f}% (p={impact.p_value:g})",
        f"  Incremental:            {format_large_number(impact.conversions)} conversions,"
        f" {format_currency(impact.revenue)}",
        f"  CI vs control:          {impact.ci_low_pct:.1f}% - {impact.ci_high_pct:.1f}%",
        "  Insights:",
    ]
    lines.extend(f"    - {insight.text}" for insight in snapshot.insights)
    lines.append(f"  Share link:             {encode_share_link(share)}")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        catalog = get_catalog()
    except CatalogLoadError as e:
        logger.error(str(e))
        return 2

    if args.list:
        for summary in catalog.list_campaigns():
            print(f"{summary.index}: {summary.id} - {summary.name} ({format_large_number(summary.impressions)} impressions)")
        return 0

    mode = AttributionMode(args.mode)
    try:
        record = catalog.get_campaign(args.campaign) if args.campaign else catalog.get_campaign_by_index(0)
    except CampaignNotFoundError as e:
        logger.error(str(e))
        return 1

    if args.export:
        result = asyncio.run(run_export(record, mode, ExportKind(args.export), args.export_dir))
        if not result['success']:
            print(result['error'], file=sys.stderr)
            return 1
        print(result['path'])
        return 0

    print("\n".join(format_summary(catalog, record.id, mode, args.threshold)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
