"""
Package initialization file for the attribution models.

Exports all Pydantic schemas and enumerations from schemas.py and enums.py so
other modules can import them from ctv_attribution.models directly.

Usage:
    from ctv_attribution.models import (
        AttributionMode,
        CampaignRecord,
        FilteredFunnel,
        # ... etc
    )
"""

# =============================================================================
# Enums
# =============================================================================

from ctv_attribution.models.enums import (
    AttributionMode,
    NodeKind,
    ConfidenceTier,
    QualityGrade,
    TimeBucket,
    DashboardTab,
    InsightCategory,
    ExportKind,
)

# =============================================================================
# Schemas
# =============================================================================

from ctv_attribution.models.schemas import (
    # Campaign data
    FlowNode,
    FlowEdge,
    TimeBucketStats,
    GroupStats,
    LiftStats,
    CampaignRecord,
    CampaignSummary,
    infer_node_kind,
    # Derived results
    ScoredEdge,
    FilteredFunnel,
    TimingSummary,
    QualityComponents,
    DataQualityScore,
    IncrementalImpact,
    KeyInsight,
    BenchmarkComparison,
    ShareState,
    DashboardSnapshot,
)

__all__ = [
    # Enums
    'AttributionMode',
    'NodeKind',
    'ConfidenceTier',
    'QualityGrade',
    'TimeBucket',
    'DashboardTab',
    'InsightCategory',
    'ExportKind',
    # Campaign data
    'FlowNode',
    'FlowEdge',
    'TimeBucketStats',
    'GroupStats',
    'LiftStats',
    'CampaignRecord',
    'CampaignSummary',
    'infer_node_kind',
    # Derived results
    'ScoredEdge',
    'FilteredFunnel',
    'TimingSummary',
    'QualityComponents',
    'DataQualityScore',
    'IncrementalImpact',
    'KeyInsight',
    'BenchmarkComparison',
    'ShareState',
    'DashboardSnapshot',
]
