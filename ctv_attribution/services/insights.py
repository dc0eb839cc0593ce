"""
Key Insights Service

Generates the short narrative findings shown beside the funnel and in exported
reports, plus industry-benchmark comparisons for headline metrics.

Insights are derived from the same pure functions as the dashboard metrics,
so they always agree with the numbers rendered next to them.
"""

from typing import Dict, List, Optional

from ctv_attribution.core.config import Settings, get_settings
from ctv_attribution.models.enums import AttributionMode, InsightCategory, NodeKind
from ctv_attribution.models.schemas import BenchmarkComparison, CampaignRecord, KeyInsight
from ctv_attribution.services.confidence import (
    average_adjusted_confidence,
    classify_confidence_tier,
    coerce_mode,
)
from ctv_attribution.services.formatting import format_large_number
from ctv_attribution.services.funnel import compute_crossover_rate
from ctv_attribution.services.lift import compute_incremental_impact
from ctv_attribution.services.timing import share_within_24_hours


# Industry averages used for "vs avg" badges
INDUSTRY_BENCHMARKS: Dict[str, float] = {
    'crossover_rate': 0.18,
    'conversion_rate': 0.0018,
    'average_confidence': 0.76,
}

# Crossover rate above which matching capability is described as strong
STRONG_CROSSOVER_RATE = 0.2

CAMPAIGN_CONTEXT: Dict[str, str] = {
    'camp-ecom-spring': (
        "Typical for e-commerce: Short consideration period (hours to days), "
        "mobile-first audience, high conversion rate. Expected behavior."
    ),
    'camp-auto-launch': (
        "Typical for automotive: Extended consideration period (weeks), desktop "
        "research phase, lower but high-value conversions. Expected behavior."
    ),
    'camp-cpg-awareness': (
        "Typical for CPG: Impulse purchases, very short consideration, balanced "
        "device usage. Note: In-store conversions may not be fully captured."
    ),
}

CONVERSIONS_LABEL_SUFFIX = " Conversions"


def get_campaign_context(campaign_id: str) -> Optional[str]:
    """Archetype note for a campaign, or None if it has none."""
    return CAMPAIGN_CONTEXT.get(campaign_id)


def compare_to_benchmark(
    value: float,
    benchmark: Optional[float],
    higher_is_better: bool = True
) -> Optional[BenchmarkComparison]:
    """
    Compare a metric with its industry average.

    Returns:
        Percent difference and whether it is favorable, or None when there is
        no usable benchmark (missing or zero).
    """
    if not benchmark:
        return None
    diff_pct = (value - benchmark) / benchmark * 100
    favorable = diff_pct > 0 if higher_is_better else diff_pct < 0
    return BenchmarkComparison(diff_pct=diff_pct, favorable=favorable)


def _format_revenue_short(revenue: float) -> str:
    if revenue >= 1000:
        return f"${revenue / 1000:.0f}K"
    return f"${revenue:.0f}"


def generate_key_insights(
    record: CampaignRecord,
    mode: AttributionMode,
    settings: Optional[Settings] = None
) -> List[KeyInsight]:
    """
    Build the five headline insights for a campaign.

    Order: primary conversion device, 24-hour conversion share, lift,
    attribution confidence, incremental revenue. The device insight is
    omitted when the record has no conversion nodes.
    """
    settings = settings or get_settings()
    mode = coerce_mode(mode)
    total_conversions = record.exposed_group.conversions
    insights: List[KeyInsight] = []

    conversion_nodes = record.nodes_of_kind(NodeKind.CONVERSION)
    if conversion_nodes:
        top = conversion_nodes[0]
        for node in conversion_nodes[1:]:
            if node.value > top.value:
                top = node
        top_pct = top.value / total_conversions * 100 if total_conversions else 0.0
        device = top.label.replace(CONVERSIONS_LABEL_SUFFIX, "")
        insights.append(KeyInsight(
            category=InsightCategory.DEVICE,
            text=f"{device} is the primary conversion device ({top_pct:.0f}% of conversions)",
        ))

    within_pct = share_within_24_hours(record) * 100
    insights.append(KeyInsight(
        category=InsightCategory.TIMING,
        text=f"Most users convert within 24 hours ({within_pct:.0f}% of conversions)",
    ))

    impact = compute_incremental_impact(record, settings=settings)
    suffix = " (statistically significant)" if impact.is_significant else ""
    insights.append(KeyInsight(
        category=InsightCategory.LIFT,
        text=f"CTV delivers {impact.relative_lift:.0f}% lift vs control group{suffix}",
    ))

    avg_confidence = average_adjusted_confidence(record.links, mode, settings)
    tier = classify_confidence_tier(avg_confidence, settings)
    insights.append(KeyInsight(
        category=InsightCategory.CONFIDENCE,
        text=f"{avg_confidence * 100:.0f}% attribution confidence - {tier.value} quality",
    ))

    insights.append(KeyInsight(
        category=InsightCategory.REVENUE,
        text=f"Estimated incremental revenue: {_format_revenue_short(impact.revenue)}",
    ))

    return insights


def generate_report_insights(
    record: CampaignRecord,
    mode: AttributionMode,
    settings: Optional[Settings] = None
) -> List[str]:
    """Narrative bullet points for exported reports."""
    settings = settings or get_settings()
    mode = coerce_mode(mode)

    crossover_rate = compute_crossover_rate(record)
    avg_confidence = average_adjusted_confidence(record.links, mode, settings)
    tier = classify_confidence_tier(avg_confidence, settings)
    impact = compute_incremental_impact(record, settings=settings)

    strength = "strong" if crossover_rate > STRONG_CROSSOVER_RATE else "moderate"
    p_text = "< 0.001" if impact.p_value < 0.001 else f"{impact.p_value:.4f}"

    if mode == AttributionMode.HOUSEHOLD:
        mode_note = (
            "Household-level attribution captures multi-user viewing but may "
            "overcount individual intent."
        )
    else:
        mode_note = (
            "Individual-level attribution is more conservative but may "
            "undercount shared-device scenarios."
        )

    bullets = [
        f"Device crossover rate of {crossover_rate * 100:.1f}% indicates {strength} cross-device matching capability.",
        f"Average attribution confidence of {avg_confidence * 100:.1f}% ({tier.value}) in {mode.value} mode.",
        f"CTV ads drove a +{impact.relative_lift:.1f}% lift in conversions compared to the control group (p = {p_text}).",
        f"An estimated {format_large_number(impact.conversions)} incremental conversions are directly attributable to CTV exposure.",
    ]
    if impact.is_significant:
        bullets.append(
            f"The statistical significance (p < {settings.significance_level:g}) confirms "
            "that the observed lift is not due to random chance."
        )
    bullets.append(mode_note)
    return bullets
