"""
Funnel Derivation Service

Filters a campaign's flow graph down to the edges eligible for display at a
confidence threshold and computes the funnel-level aggregates shown next to
the Sankey view.

Filtering rule:
- ``adjusted = adjust_confidence(edge.confidence, mode)``
- keep the edge iff ``adjusted >= threshold_percent / 100``
- retained edges keep their original order (display order is meaningful)

Aggregates:
- crossover_rate: impressions matched to any device (edges leaving the
  impression node, minus the no-detection sentinel) / impression volume
- cross_device_conversion_share: conversions on non-TV devices / total
  exposed conversions
- high_confidence_count: edges whose adjusted confidence is High (all edges,
  not just retained ones)

Every ratio falls back to 0 on a zero denominator.
"""

from typing import Any, List, Optional, Set

from ctv_attribution.core.config import Settings, get_settings
from ctv_attribution.models.enums import ConfidenceTier, NodeKind
from ctv_attribution.models.schemas import (
    CampaignRecord,
    FilteredFunnel,
    FlowNode,
    ScoredEdge,
)
from ctv_attribution.services.confidence import (
    adjust_confidence,
    average_adjusted_confidence,
    classify_confidence_tier,
    coerce_mode,
    coerce_threshold,
)


def compute_crossover_rate(record: CampaignRecord) -> float:
    """
    Fraction of CTV impressions matched to an identifiable device.

    Returns:
        Detected crossover volume / impression volume, or 0 when the record
        has no impression node or it has zero volume.
    """
    impression = record.impression_node
    if impression is None or impression.value == 0:
        return 0.0

    detected = sum(
        link.value
        for link in record.links
        if link.source == impression.id and link.target != record.no_detection_node_id
    )
    return detected / impression.value


def compute_cross_device_conversion_share(record: CampaignRecord) -> float:
    """
    Share of exposed conversions that happened on a device other than the TV.

    Returns:
        Sum of conversion-node volumes except the direct (TV) conversion node,
        divided by exposed conversions; 0 when there are no conversions.
    """
    total_conversions = record.exposed_group.conversions
    if total_conversions == 0:
        return 0.0

    cross_device = sum(
        node.value
        for node in record.nodes_of_kind(NodeKind.CONVERSION)
        if node.id != record.direct_conversion_node_id
    )
    return cross_device / total_conversions


def count_high_confidence_edges(
    record: CampaignRecord,
    mode: Any,
    settings: Optional[Settings] = None
) -> int:
    """Number of edges (unfiltered) whose adjusted confidence is in the High tier."""
    return sum(
        1
        for link in record.links
        if classify_confidence_tier(adjust_confidence(link.confidence, mode, settings), settings)
        == ConfidenceTier.HIGH
    )


def derive_funnel(
    record: CampaignRecord,
    mode: Any,
    threshold_percent: Any = 0,
    settings: Optional[Settings] = None
) -> FilteredFunnel:
    """
    Filter a campaign funnel by adjusted confidence.

    Args:
        record: Campaign to derive from (not modified)
        mode: AttributionMode; unknown values fall back to household
        threshold_percent: Minimum adjusted confidence in percent, clamped to [0, 100]
        settings: Optional settings override

    Returns:
        FilteredFunnel with retained edges in original order, their tiers,
        the nodes they touch and the funnel aggregates
    """
    settings = settings or get_settings()
    mode = coerce_mode(mode)
    threshold_percent = coerce_threshold(threshold_percent)
    cutoff = threshold_percent / 100

    retained: List[ScoredEdge] = []
    for link in record.links:
        adjusted = adjust_confidence(link.confidence, mode, settings)
        if adjusted >= cutoff:
            retained.append(
                ScoredEdge(
                    edge=link,
                    adjusted_confidence=adjusted,
                    tier=classify_confidence_tier(adjusted, settings),
                )
            )

    # Nodes referenced by a retained edge, in catalog node order
    touched: Set[str] = set()
    for scored in retained:
        touched.add(scored.edge.source)
        touched.add(scored.edge.target)
    nodes: List[FlowNode] = [node for node in record.nodes if node.id in touched]

    return FilteredFunnel(
        campaign_id=record.id,
        mode=mode,
        threshold_percent=threshold_percent,
        edges=tuple(retained),
        nodes=tuple(nodes),
        retained_count=len(retained),
        total_count=len(record.links),
        crossover_rate=compute_crossover_rate(record),
        cross_device_conversion_share=compute_cross_device_conversion_share(record),
        high_confidence_count=count_high_confidence_edges(record, mode, settings),
        average_adjusted_confidence=average_adjusted_confidence(record.links, mode, settings),
    )
