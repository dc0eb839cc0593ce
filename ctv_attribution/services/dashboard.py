"""
Dashboard Snapshot Service

Bundles every derivation for one ``(campaign_id, mode, threshold)`` view into a
single immutable DashboardSnapshot, which is what a presentation layer renders.

Snapshots are memoized per key. The active Settings instance is part of the
key, so reloading settings (``get_settings.cache_clear()``) yields fresh
figures instead of ones computed under the old configuration. All inputs are
immutable and every derivation is pure; clearing the cache
(``clear_snapshot_cache()``) only costs a recompute.
"""

from functools import lru_cache
from typing import Any, Optional

from ctv_attribution.core.config import Settings, get_settings
from ctv_attribution.models.enums import AttributionMode
from ctv_attribution.models.schemas import DashboardSnapshot
from ctv_attribution.services.catalog import CampaignCatalog, get_catalog
from ctv_attribution.services.confidence import coerce_mode, coerce_threshold
from ctv_attribution.services.funnel import derive_funnel
from ctv_attribution.services.insights import generate_key_insights
from ctv_attribution.services.lift import compute_incremental_impact, synthesize_control_funnel
from ctv_attribution.services.quality import score_data_quality
from ctv_attribution.services.timing import summarize_timing


SNAPSHOT_CACHE_SIZE = 128


def _compute_snapshot(
    catalog: CampaignCatalog,
    campaign_id: str,
    mode: AttributionMode,
    threshold_percent: int,
    settings: Settings
) -> DashboardSnapshot:
    record = catalog.get_campaign(campaign_id)
    control = synthesize_control_funnel(record, settings)

    return DashboardSnapshot(
        campaign=record,
        funnel=derive_funnel(record, mode, threshold_percent, settings),
        control_funnel=derive_funnel(control, mode, threshold_percent, settings),
        timing=summarize_timing(record),
        quality=score_data_quality(record, mode, settings),
        impact=compute_incremental_impact(record, settings=settings),
        insights=tuple(generate_key_insights(record, mode, settings)),
    )


_cached_snapshot = lru_cache(maxsize=SNAPSHOT_CACHE_SIZE)(_compute_snapshot)


def build_dashboard_snapshot(
    catalog: Optional[CampaignCatalog],
    campaign_id: str,
    mode: Any = AttributionMode.HOUSEHOLD,
    threshold_percent: Any = 0,
    settings: Optional[Settings] = None
) -> DashboardSnapshot:
    """
    Derive (or fetch from cache) everything the dashboard shows for a campaign.

    Args:
        catalog: Catalog holding the campaign; None uses ``get_catalog()``
        campaign_id: Campaign to render
        mode: Attribution mode; unknown values fall back to household
        threshold_percent: Confidence threshold, clamped to [0, 100]
        settings: Optional settings override; defaults to ``get_settings()``
            at call time

    Raises:
        CampaignNotFoundError: If the catalog has no such campaign.
    """
    if catalog is None:
        catalog = get_catalog()
    settings = settings or get_settings()
    return _cached_snapshot(
        catalog, campaign_id, coerce_mode(mode), coerce_threshold(threshold_percent), settings
    )


def clear_snapshot_cache() -> None:
    _cached_snapshot.cache_clear()
