"""
Derivation Services Module

Pure business logic for the CTV attribution dashboard. Every function takes
immutable campaign records plus parameters (attribution mode, confidence
threshold) and returns freshly built result models; no service holds mutable
state or performs I/O beyond the one-time catalog load.

Services:
- catalog: Load-once campaign catalog (dataset provider)
- confidence: Attribution-mode confidence adjustment and tiers
- funnel: Threshold filtering and funnel aggregates
- timing: Time-to-conversion percentile estimation
- quality: Composite data-quality grade
- lift: Incrementality framing and control-funnel synthesis
- formatting: Display formatting helpers
- insights: Key insights and industry benchmarks
- share_link: Dashboard-state link codec
- dashboard: Memoized all-in-one dashboard snapshot

Primary API:
    catalog = CampaignCatalog.load()
    catalog.list_campaigns()
    record = catalog.get_campaign("camp-ecom-spring")
    adjust_confidence(0.82, AttributionMode.HOUSEHOLD)
    derive_funnel(record, AttributionMode.HOUSEHOLD, 85)
    estimate_timing_percentile(record, 0.5)
    score_data_quality(record, AttributionMode.INDIVIDUAL)
    synthesize_control_funnel(record)
    compute_incremental_impact(record)
"""

# =============================================================================
# Catalog
# =============================================================================

from ctv_attribution.services.catalog import (
    CampaignCatalog,
    get_catalog,
)

# =============================================================================
# Confidence Adjustment
# =============================================================================

from ctv_attribution.services.confidence import (
    adjust_confidence,
    classify_confidence_tier,
    average_adjusted_confidence,
    coerce_mode,
    coerce_threshold,
)

# =============================================================================
# Funnel Derivation
# =============================================================================

from ctv_attribution.services.funnel import (
    derive_funnel,
    compute_crossover_rate,
    compute_cross_device_conversion_share,
    count_high_confidence_edges,
)

# =============================================================================
# Timing Distribution
# =============================================================================

from ctv_attribution.services.timing import (
    BUCKET_MIDPOINT_HOURS,
    CANONICAL_BUCKETS,
    estimate_percentile,
    estimate_timing_percentile,
    find_peak_bucket,
    find_fastest_bucket,
    share_within_24_hours,
    bucket_for_hours,
    summarize_timing,
)

# =============================================================================
# Data Quality
# =============================================================================

from ctv_attribution.services.quality import (
    score_data_quality,
    grade_for_score,
)

# =============================================================================
# Lift / Incrementality
# =============================================================================

from ctv_attribution.services.lift import (
    compute_incremental_impact,
    synthesize_control_funnel,
    calculate_conversion_rate,
    calculate_lift,
    is_significant,
)

# =============================================================================
# Formatting, Insights, Sharing, Snapshot
# =============================================================================

from ctv_attribution.services.formatting import (
    format_large_number,
    format_percentage,
    format_currency,
    hours_to_label,
    round_half_up,
)

from ctv_attribution.services.insights import (
    INDUSTRY_BENCHMARKS,
    compare_to_benchmark,
    generate_key_insights,
    generate_report_insights,
    get_campaign_context,
)

from ctv_attribution.services.share_link import (
    encode_share_link,
    encode_share_query,
    decode_share_link,
)

from ctv_attribution.services.dashboard import (
    build_dashboard_snapshot,
    clear_snapshot_cache,
)

__all__ = [
    # Catalog
    'CampaignCatalog',
    'get_catalog',
    # Confidence
    'adjust_confidence',
    'classify_confidence_tier',
    'average_adjusted_confidence',
    'coerce_mode',
    'coerce_threshold',
    # Funnel
    'derive_funnel',
    'compute_crossover_rate',
    'compute_cross_device_conversion_share',
    'count_high_confidence_edges',
    # Timing
    'BUCKET_MIDPOINT_HOURS',
    'CANONICAL_BUCKETS',
    'estimate_percentile',
    'estimate_timing_percentile',
    'find_peak_bucket',
    'find_fastest_bucket',
    'share_within_24_hours',
    'bucket_for_hours',
    'summarize_timing',
    # Quality
    'score_data_quality',
    'grade_for_score',
    # Lift
    'compute_incremental_impact',
    'synthesize_control_funnel',
    'calculate_conversion_rate',
    'calculate_lift',
    'is_significant',
    # Formatting
    'format_large_number',
    'format_percentage',
    'format_currency',
    'hours_to_label',
    'round_half_up',
    # Insights
    'INDUSTRY_BENCHMARKS',
    'compare_to_benchmark',
    'generate_key_insights',
    'generate_report_insights',
    'get_campaign_context',
    # Share link
    'encode_share_link',
    'encode_share_query',
    'decode_share_link',
    # Snapshot
    'build_dashboard_snapshot',
    'clear_snapshot_cache',
]
