"""
Lift / Incrementality Service

Frames the precomputed exposed-vs-control statistics for display and derives
the control-group funnel. No statistics are inferred here: relative lift,
p-value and the confidence interval are read from the record as-is.

Incremental impact:
- conversions = exposed.conversions - control.conversions
- revenue = conversions * average_order_value (Settings, default 74.50)
- CI bounds as a percentage of the control rate:
  ``lift.confidence_interval[i] / (control.conversion_rate or 1) * 100``.
  A zero control rate divides by 1 instead, which yields a misleadingly small
  percentage; kept so figures match the dashboard.

Control funnel synthesis scales every node and edge volume by
``control.conversion_rate / exposed.conversion_rate`` (rounded to the nearest
integer) and multiplies each edge confidence by the control dampening factor
(0.6).
"""

from typing import Optional

from ctv_attribution.core.config import Settings, get_settings
from ctv_attribution.models.schemas import CampaignRecord, IncrementalImpact
from ctv_attribution.services.formatting import round_half_up


def calculate_conversion_rate(conversions: float, impressions: float) -> float:
    """Conversions / impressions, or 0 when there are no impressions."""
    if impressions == 0:
        return 0.0
    return conversions / impressions


def calculate_lift(exposed_rate: float, control_rate: float) -> float:
    """Relative lift as a decimal (1.0 = +100%), or 0 when the control rate is 0."""
    if control_rate == 0:
        return 0.0
    return (exposed_rate - control_rate) / control_rate


def is_significant(p_value: float, settings: Optional[Settings] = None) -> bool:
    settings = settings or get_settings()
    return p_value < settings.significance_level


def compute_incremental_impact(
    record: CampaignRecord,
    average_order_value: Optional[float] = None,
    settings: Optional[Settings] = None
) -> IncrementalImpact:
    """
    Derive display-ready incremental conversions, revenue and CI range.

    Args:
        record: Campaign with exposed/control group stats and lift
        average_order_value: Revenue per conversion; defaults to
            Settings.average_order_value
        settings: Optional settings override

    Returns:
        IncrementalImpact
    """
    settings = settings or get_settings()
    if average_order_value is None:
        average_order_value = settings.average_order_value

    exposed = record.exposed_group
    control = record.control_group

    incremental_conversions = exposed.conversions - control.conversions
    denominator = control.conversion_rate or 1
    ci_low, ci_high = record.lift.confidence_interval

    return IncrementalImpact(
        conversions=incremental_conversions,
        revenue=incremental_conversions * average_order_value,
        ci_low_pct=ci_low / denominator * 100,
        ci_high_pct=ci_high / denominator * 100,
        relative_lift=record.lift.relative,
        p_value=record.lift.p_value,
        is_significant=is_significant(record.lift.p_value, settings),
    )


def synthesize_control_funnel(
    record: CampaignRecord,
    settings: Optional[Settings] = None
) -> CampaignRecord:
    """
    Build the control-group funnel from an exposed campaign.

    The source record is untouched; a structurally identical new record is
    returned, usable by every derivation function.
    """
    settings = settings or get_settings()

    exposed_rate = record.exposed_group.conversion_rate
    ratio = record.control_group.conversion_rate / exposed_rate if exposed_rate else 0.0
    dampening = settings.control_confidence_dampening

    nodes = tuple(
        node.model_copy(update={'value': round_half_up(node.value * ratio)})
        for node in record.nodes
    )
    links = tuple(
        link.model_copy(update={
            'value': round_half_up(link.value * ratio),
            'confidence': link.confidence * dampening,
        })
        for link in record.links
    )

    return record.model_copy(update={'nodes': nodes, 'links': links})
