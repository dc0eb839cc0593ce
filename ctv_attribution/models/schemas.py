"""
Pydantic models for the CTV attribution core.

Two families of models live here:

- Campaign data (CampaignRecord and its parts): loaded once from the bundled
  fixture and never mutated. Field aliases accept the camelCase keys used by
  the fixture (``timeToConversion``, ``exposedGroup`` ...), while Python code
  uses snake_case names.
- Derived results (FilteredFunnel, DataQualityScore, IncrementalImpact ...):
  freshly built by the services on every call.

Every model is frozen. Callers may cache and share instances freely; a
"transformation" such as control-group synthesis returns a new record.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ctv_attribution.models.enums import (
    AttributionMode,
    ConfidenceTier,
    DashboardTab,
    InsightCategory,
    NodeKind,
    QualityGrade,
    TimeBucket,
)


# Id of the impression-source node in the fixture naming convention
IMPRESSION_NODE_ID = "ctv"
CONVERSION_SUFFIX = "_conv"
VISIT_SUFFIX = "_visit"


def infer_node_kind(node_id: str) -> NodeKind:
    """
    Map a fixture node id onto its NodeKind.

    Used only while constructing a FlowNode whose payload carries no explicit
    ``kind``; nothing downstream looks at id suffixes.
    """
    if node_id == IMPRESSION_NODE_ID:
        return NodeKind.IMPRESSION
    if node_id.endswith(CONVERSION_SUFFIX):
        return NodeKind.CONVERSION
    if node_id.endswith(VISIT_SUFFIX):
        return NodeKind.VISIT
    return NodeKind.CROSSOVER


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# =============================================================================
# Campaign Data Models
# =============================================================================


class FlowNode(_FrozenModel):
    """One stage/segment of the funnel with its absolute volume."""

    id: str = Field(..., min_length=1)
    label: str
    value: int = Field(..., ge=0, description="People/impressions at this node")
    kind: NodeKind

    @model_validator(mode='before')
    @classmethod
    def assign_kind(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get('kind') is None and isinstance(data.get('id'), str):
            data = {**data, 'kind': infer_node_kind(data['id'])}
        return data


class FlowEdge(_FrozenModel):
    """Directed flow between two nodes with its raw match confidence."""

    source: str
    target: str
    value: int = Field(..., ge=0)
    confidence: float = Field(..., ge=0, le=1, description="Raw match confidence")


class TimeBucketStats(_FrozenModel):
    count: int = Field(..., ge=0)
    percentage: float = 0.0


class GroupStats(_FrozenModel):
    """
    Exposed or control group totals.

    ``conversion_rate`` is stored as given (conversions / impressions in a
    well-formed fixture) and never recomputed.
    """

    impressions: int = Field(..., ge=0)
    conversions: int = Field(..., ge=0)
    conversion_rate: float = Field(..., ge=0, alias='conversionRate')


class LiftStats(_FrozenModel):
    """Precomputed lift statistics, consumed as-is."""

    absolute: float
    relative: float = Field(..., description="Relative lift in percent (100.0 = +100%)")
    p_value: float = Field(..., ge=0, le=1, alias='pValue')
    confidence_interval: Tuple[float, float] = Field(..., alias='confidenceInterval')


class CampaignRecord(_FrozenModel):
    """
    One campaign's full attribution dataset: a funnel graph plus summary stats.

    ``no_detection_node_id`` names the crossover sentinel for impressions that
    were never matched to a device; ``direct_conversion_node_id`` names the
    conversion node reached on the TV itself. Both are excluded from the
    cross-device aggregates.
    """

    id: str = Field(..., min_length=1)
    name: str
    nodes: Tuple[FlowNode, ...]
    links: Tuple[FlowEdge, ...]
    time_to_conversion: Dict[TimeBucket, TimeBucketStats] = Field(
        default_factory=dict, alias='timeToConversion'
    )
    exposed_group: GroupStats = Field(..., alias='exposedGroup')
    control_group: GroupStats = Field(..., alias='controlGroup')
    lift: LiftStats
    no_detection_node_id: str = Field('no_detection', alias='noDetectionNodeId')
    direct_conversion_node_id: str = Field('tv_conv', alias='directConversionNodeId')

    @field_validator('nodes')
    @classmethod
    def node_ids_unique(cls, nodes: Tuple[FlowNode, ...]) -> Tuple[FlowNode, ...]:
        seen = set()
        for node in nodes:
            if node.id in seen:
                raise ValueError(f"duplicate node id {node.id!r}")
            seen.add(node.id)
        return nodes

    @property
    def impression_node(self) -> Optional[FlowNode]:
        """The impression-source node, or None for a partial record."""
        for node in self.nodes:
            if node.kind == NodeKind.IMPRESSION:
                return node
        return None

    def node_by_id(self, node_id: str) -> Optional[FlowNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def node_value(self, node_id: str) -> int:
        """Volume at ``node_id``; a missing node reads as zero."""
        node = self.node_by_id(node_id)
        return node.value if node is not None else 0

    def nodes_of_kind(self, kind: NodeKind) -> List[FlowNode]:
        return [node for node in self.nodes if node.kind == kind]

    def bucket_count(self, bucket: TimeBucket) -> int:
        """Histogram count for ``bucket``; a missing bucket reads as zero."""
        stats = self.time_to_conversion.get(bucket)
        return stats.count if stats is not None else 0


class CampaignSummary(_FrozenModel):
    """Lightweight catalog entry for campaign pickers."""

    index: int
    id: str
    name: str
    impressions: int
    conversions: int


# =============================================================================
# Derived Result Models
# =============================================================================


class ScoredEdge(_FrozenModel):
    """A retained edge with its mode-adjusted confidence and tier."""

    edge: FlowEdge
    adjusted_confidence: float
    tier: ConfidenceTier


class FilteredFunnel(_FrozenModel):
    """Edges and nodes eligible for display at a confidence threshold."""

    campaign_id: str
    mode: AttributionMode
    threshold_percent: int
    edges: Tuple[ScoredEdge, ...]
    nodes: Tuple[FlowNode, ...]
    retained_count: int
    total_count: int
    crossover_rate: float
    cross_device_conversion_share: float
    high_confidence_count: int
    average_adjusted_confidence: float


class TimingSummary(_FrozenModel):
    median_hours: float
    p75_hours: float
    peak_bucket: TimeBucket
    peak_percentage: float
    fastest_bucket: TimeBucket
    within_24h_share: float


class QualityComponents(_FrozenModel):
    crossover_score: float
    confidence_score: float
    sample_size_score: float


class DataQualityScore(_FrozenModel):
    grade: QualityGrade
    composite_score: float
    components: QualityComponents
    crossover_rate: float
    average_confidence: float
    sample_size: int


class IncrementalImpact(_FrozenModel):
    """
    Display-ready incrementality figures.

    ``ci_low_pct``/``ci_high_pct`` express the absolute lift confidence
    interval relative to the control conversion rate, in percent.
    """

    conversions: int
    revenue: float
    ci_low_pct: float
    ci_high_pct: float
    relative_lift: float
    p_value: float
    is_significant: bool


class KeyInsight(_FrozenModel):
    category: InsightCategory
    text: str


class BenchmarkComparison(_FrozenModel):
    diff_pct: float = Field(..., description="Percent difference from the benchmark")
    favorable: bool


class ShareState(_FrozenModel):
    """Dashboard state carried by a share link."""

    campaign_index: int = 0
    mode: AttributionMode = AttributionMode.HOUSEHOLD
    tab: DashboardTab = DashboardTab.FLOW


class DashboardSnapshot(_FrozenModel):
    """Every derivation for one (campaign, mode, threshold) key."""

    campaign: CampaignRecord
    funnel: FilteredFunnel
    control_funnel: FilteredFunnel
    timing: TimingSummary
    quality: DataQualityScore
    impact: IncrementalImpact
    insights: Tuple[KeyInsight, ...]
