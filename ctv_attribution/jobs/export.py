"""
CSV Export Jobs

One-shot export of campaign data for analysts:

- Full report CSV: summary, overview metrics, nodes, links (raw and adjusted
  confidence), time-to-conversion distribution, incrementality, data source.
- Metrics CSV: the two-column ``Metric,Value`` summary of the metrics panel.

Rendering is pure (``render_report_csv`` / ``render_metrics_csv`` return the
CSV text, built from pandas DataFrames). The async ``export_*`` jobs write the
text to disk in a worker thread and report the outcome as a result dict:

    {'success': True, 'path': '/.../CTV_Attribution_X_2026-10-18.csv', 'kind': 'report'}
    {'success': False, 'error': '...', 'kind': 'report'}

Jobs are best-effort: failures are logged and returned, never raised and
never retried.
"""

import asyncio
import io
import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd

from ctv_attribution.core.config import get_settings
from ctv_attribution.models.enums import AttributionMode, ExportKind
from ctv_attribution.models.schemas import CampaignRecord
from ctv_attribution.services.catalog import CampaignCatalog
from ctv_attribution.services.confidence import adjust_confidence, classify_confidence_tier, coerce_mode
from ctv_attribution.services.formatting import format_percentage, hours_to_label
from ctv_attribution.services.funnel import derive_funnel
from ctv_attribution.services.insights import generate_report_insights
from ctv_attribution.services.lift import compute_incremental_impact
from ctv_attribution.services.timing import CANONICAL_BUCKETS, summarize_timing

logger = logging.getLogger(__name__)

REPORT_TITLE = "CTV Attribution Report"
DATA_SOURCE_NOTE = "Synthetic data generated for demonstration purposes. Not real campaign data."

Section = Tuple[Optional[str], pd.DataFrame]


# =============================================================================
# Rendering
# =============================================================================


def export_filename(
    record: CampaignRecord,
    kind: ExportKind = ExportKind.REPORT,
    on: Optional[date] = None
) -> str:
    """``CTV_Attribution_E-commerce_Spring_Sale_2026-10-18.csv`` style file name."""
    on = on or date.today()
    prefix = "CTV_Attribution" if kind == ExportKind.REPORT else "CTV_Metrics"
    # Path separators and dot runs never survive into the file name
    name = re.sub(r"[^\w.-]+", "_", record.name.strip()).strip("._")
    name = re.sub(r"\.{2,}", "_", name) or "campaign"
    return f"{prefix}_{name}_{on.isoformat()}.csv"


def _metric_frame(rows: List[Tuple[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=["Metric", "Value"])


def build_report_sections(
    record: CampaignRecord,
    mode: AttributionMode,
    generated_at: Optional[datetime] = None
) -> List[Section]:
    """
    Assemble the report as titled tables.

    Returns:
        List of ``(title, DataFrame)`` pairs in output order; the first
        section has no title (it sits under the report heading).
    """
    mode = coerce_mode(mode)
    generated_at = generated_at or datetime.now()
    exposed = record.exposed_group
    control = record.control_group
    lift = record.lift
    impact = compute_incremental_impact(record)

    summary = pd.DataFrame(
        [
            ("Campaign", record.name),
            ("Attribution Mode", mode.value),
            ("Generated", generated_at.strftime("%Y-%m-%d %H:%M:%S")),
        ],
        columns=["Field", "Value"],
    )

    overview = _metric_frame([
        ("CTV Impressions", exposed.impressions),
        ("Total Conversions", exposed.conversions),
        ("Overall Conversion Rate", format_percentage(exposed.conversion_rate, 3)),
        ("Attribution Paths", len(record.links)),
    ])

    nodes = pd.DataFrame(
        [(node.id, node.label, node.kind.value, node.value) for node in record.nodes],
        columns=["Node ID", "Label", "Kind", "Volume"],
    )

    link_rows = []
    for link in record.links:
        adjusted = adjust_confidence(link.confidence, mode)
        link_rows.append((
            link.source,
            link.target,
            link.value,
            format_percentage(link.confidence),
            format_percentage(adjusted),
            classify_confidence_tier(adjusted).value,
        ))
    links = pd.DataFrame(
        link_rows,
        columns=["Source", "Target", "Volume", "Raw Confidence", "Adjusted Confidence", "Confidence Level"],
    )

    timing_rows = []
    for bucket in CANONICAL_BUCKETS:
        stats = record.time_to_conversion.get(bucket)
        count = stats.count if stats is not None else 0
        percentage = stats.percentage if stats is not None else 0
        timing_rows.append((bucket.value, count, f"{percentage:g}%"))
    timing = pd.DataFrame(timing_rows, columns=["Time Window", "Count", "Percentage"])

    groups = pd.DataFrame(
        [
            ("Exposed", exposed.impressions, exposed.conversions, format_percentage(exposed.conversion_rate, 3)),
            ("Control", control.impressions, control.conversions, format_percentage(control.conversion_rate, 3)),
        ],
        columns=["Group", "Impressions", "Conversions", "Conversion Rate"],
    )

    ci_low, ci_high = lift.confidence_interval
    lift_frame = _metric_frame([
        ("Relative Lift", f"+{lift.relative:.1f}%"),
        ("Absolute Lift", f"+{lift.absolute * 100:.4f}%"),
        ("P-Value", lift.p_value),
        ("Confidence Interval", f"{ci_low * 100:.3f}% - {ci_high * 100:.3f}%"),
        ("Incremental Conversions", impact.conversions),
        ("Incremental Revenue", round(impact.revenue, 2)),
    ])

    insights = pd.DataFrame(
        [(text,) for text in generate_report_insights(record, mode)],
        columns=["Insight"],
    )

    source = pd.DataFrame([("Note", DATA_SOURCE_NOTE)], columns=["Field", "Value"])

    return [
        (None, summary),
        ("CAMPAIGN OVERVIEW", overview),
        ("ATTRIBUTION NODES", nodes),
        ("ATTRIBUTION LINKS", links),
        ("TIME-TO-CONVERSION DISTRIBUTION", timing),
        ("INCREMENTALITY ANALYSIS", groups),
        ("LIFT", lift_frame),
        ("KEY INSIGHTS", insights),
        ("DATA SOURCE", source),
    ]


def render_sections(sections: List[Section], heading: Optional[str] = None) -> str:
    """Concatenate titled tables into one CSV document, blank line between sections."""
    buffer = io.StringIO()
    if heading:
        buffer.write(f"{heading}\n")
    for title, frame in sections:
        if title:
            buffer.write(f"=== {title} ===\n")
        frame.to_csv(buffer, index=False, lineterminator="\n")
        buffer.write("\n")
    return buffer.getvalue()


def render_report_csv(
    record: CampaignRecord,
    mode: AttributionMode,
    generated_at: Optional[datetime] = None
) -> str:
    return render_sections(build_report_sections(record, mode, generated_at), heading=REPORT_TITLE)


def build_metrics_frame(record: CampaignRecord, mode: AttributionMode) -> pd.DataFrame:
    """Two-column summary of the metrics panel."""
    mode = coerce_mode(mode)
    funnel = derive_funnel(record, mode, 0)
    timing = summarize_timing(record)
    impact = compute_incremental_impact(record)
    ci_low, ci_high = record.lift.confidence_interval
    impression = record.impression_node

    return _metric_frame([
        ("Campaign", record.name),
        ("Attribution Mode", mode.value),
        ("CTV Impressions", impression.value if impression is not None else 0),
        ("Total Conversions", record.exposed_group.conversions),
        ("Overall CVR", format_percentage(record.exposed_group.conversion_rate, 3)),
        ("Attribution Paths", funnel.total_count),
        ("Device Crossover Rate", format_percentage(funnel.crossover_rate)),
        ("Avg Attribution Confidence", format_percentage(funnel.average_adjusted_confidence)),
        ("High-Confidence Paths", funnel.high_confidence_count),
        ("Cross-Device Conversions", format_percentage(funnel.cross_device_conversion_share)),
        ("CTV Lift vs Control", f"+{impact.relative_lift:.1f}%"),
        ("P-Value", impact.p_value),
        ("Incremental Conversions", impact.conversions),
        ("Confidence Interval", f"{ci_low * 100:.2f}% - {ci_high * 100:.2f}%"),
        ("Median Time-to-Conversion", hours_to_label(timing.median_hours)),
        ("75th %ile", hours_to_label(timing.p75_hours)),
        ("Peak Window", timing.peak_bucket.value),
        ("Fastest Bucket", timing.fastest_bucket.value),
    ])


def render_metrics_csv(record: CampaignRecord, mode: AttributionMode) -> str:
    return build_metrics_frame(record, mode).to_csv(index=False, lineterminator="\n")


# =============================================================================
# Jobs
# =============================================================================


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


async def run_export(
    record: CampaignRecord,
    mode: AttributionMode,
    kind: ExportKind = ExportKind.REPORT,
    export_dir: Optional[Union[str, Path]] = None,
    on: Optional[date] = None
) -> Dict[str, Any]:
    """
    Render and write one CSV export.

    Args:
        record: Campaign to export
        mode: Attribution mode for adjusted confidence columns
        kind: REPORT (full sectioned report) or METRICS (summary table)
        export_dir: Target directory (default Settings.export_dir)
        on: Date stamped into the file name (default today)

    Returns:
        Dict with:
        - success: True if the file was written
        - path: Written file path (on success)
        - error: Error message (on failure)
        - kind: Export kind value

    Raises:
        No exceptions are raised - all errors are captured in the return dict.
    """
    try:
        kind = ExportKind(kind)
    except ValueError:
        logger.error(f"Unknown export kind {kind!r}")
        return {
            'success': False,
            'error': f'Unknown export kind: {kind!r}',
            'kind': str(kind),
        }

    target_dir = Path(export_dir if export_dir is not None else get_settings().export_dir)

    try:
        if kind == ExportKind.REPORT:
            content = render_report_csv(record, mode)
        else:
            content = render_metrics_csv(record, mode)
        path = target_dir / export_filename(record, kind, on)
        await asyncio.to_thread(_write_text, path, content)
    except Exception as e:
        logger.exception(f"Error exporting {kind.value} CSV for campaign {record.id}")
        return {
            'success': False,
            'error': f'Failed to export {kind.value} CSV: {str(e)}',
            'kind': kind.value,
        }

    logger.info(f"Exported {kind.value} CSV for campaign {record.id} to {path}")
    return {
        'success': True,
        'path': str(path),
        'kind': kind.value,
    }


async def export_report_csv(
    record: CampaignRecord,
    mode: AttributionMode,
    export_dir: Optional[Union[str, Path]] = None,
    on: Optional[date] = None
) -> Dict[str, Any]:
    return await run_export(record, mode, ExportKind.REPORT, export_dir, on)


async def export_metrics_csv(
    record: CampaignRecord,
    mode: AttributionMode,
    export_dir: Optional[Union[str, Path]] = None,
    on: Optional[date] = None
) -> Dict[str, Any]:
    return await run_export(record, mode, ExportKind.METRICS, export_dir, on)


async def export_all_reports(
    catalog: CampaignCatalog,
    mode: AttributionMode,
    export_dir: Optional[Union[str, Path]] = None,
    on: Optional[date] = None
) -> List[Dict[str, Any]]:
    """Export the full report for every campaign; one result dict per campaign, catalog order."""
    return list(await asyncio.gather(*(
        export_report_csv(record, mode, export_dir, on) for record in catalog
    )))
