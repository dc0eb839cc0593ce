"""
Pytest Configuration and Shared Fixtures for the CTV attribution tests.

Provides:
- The bundled campaign catalog and its three reference records
- A factory for small synthetic campaign records (partial or degenerate data)
- Cache isolation for get_settings / get_catalog / dashboard snapshots
- Custom markers
"""

from typing import Any, Callable, Dict

import pytest

from ctv_attribution.core.config import get_settings
from ctv_attribution.models import CampaignRecord
from ctv_attribution.services.catalog import CampaignCatalog, get_catalog
from ctv_attribution.services.dashboard import clear_snapshot_cache


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Register custom markers.

    - property: invariant checks over parameter grids
    - scenario: end-to-end checks against the bundled reference campaigns
    """
    config.addinivalue_line(
        'markers',
        'property: invariant checks over parameter grids'
    )
    config.addinivalue_line(
        'markers',
        'scenario: end-to-end checks against the bundled reference campaigns'
    )


# ============================================================
# CACHE ISOLATION
# ============================================================

@pytest.fixture(autouse=True)
def reset_caches():
    """Clear cached settings, catalog and snapshots around every test."""
    get_settings.cache_clear()
    get_catalog.cache_clear()
    clear_snapshot_cache()
    yield
    get_settings.cache_clear()
    get_catalog.cache_clear()
    clear_snapshot_cache()


# ============================================================
# CATALOG FIXTURES
# ============================================================

@pytest.fixture
def catalog() -> CampaignCatalog:
    return CampaignCatalog.load()


@pytest.fixture
def ecommerce_record(catalog: CampaignCatalog) -> CampaignRecord:
    """E-commerce Spring Sale: 1.5M impressions, 4,650 exposed conversions."""
    return catalog.get_campaign('camp-ecom-spring')


@pytest.fixture
def automotive_record(catalog: CampaignCatalog) -> CampaignRecord:
    return catalog.get_campaign('camp-auto-launch')


@pytest.fixture
def cpg_record(catalog: CampaignCatalog) -> CampaignRecord:
    return catalog.get_campaign('camp-cpg-awareness')


# ============================================================
# SYNTHETIC RECORD FACTORY
# ============================================================

def _default_payload() -> Dict[str, Any]:
    return {
        'id': 'camp-test',
        'name': 'Test Campaign',
        'nodes': [
            {'id': 'ctv', 'label': 'CTV Impressions', 'value': 1000},
            {'id': 'mobile', 'label': 'Mobile Crossover', 'value': 400},
            {'id': 'no_detection', 'label': 'No Detection', 'value': 600},
            {'id': 'mobile_visit', 'label': 'Mobile Visits', 'value': 100},
            {'id': 'mobile_conv', 'label': 'Mobile Conversions', 'value': 30},
            {'id': 'tv_conv', 'label': 'TV Conversions', 'value': 10},
        ],
        'links': [
            {'source': 'ctv', 'target': 'mobile', 'value': 400, 'confidence': 0.8},
            {'source': 'ctv', 'target': 'no_detection', 'value': 600, 'confidence': 0.2},
            {'source': 'mobile', 'target': 'mobile_visit', 'value': 100, 'confidence': 0.9},
            {'source': 'mobile_visit', 'target': 'mobile_conv', 'value': 30, 'confidence': 0.7},
        ],
        'timeToConversion': {
            '< 1 hour': {'count': 10, 'percentage': 25.0},
            '1-6 hours': {'count': 10, 'percentage': 25.0},
            '6-24 hours': {'count': 10, 'percentage': 25.0},
            '1-3 days': {'count': 10, 'percentage': 25.0},
        },
        'exposedGroup': {'impressions': 1000, 'conversions': 40, 'conversionRate': 0.04},
        'controlGroup': {'impressions': 1000, 'conversions': 20, 'conversionRate': 0.02},
        'lift': {'absolute': 0.02, 'relative': 100.0, 'pValue': 0.01, 'confidenceInterval': [0.01, 0.03]},
    }


@pytest.fixture
def make_record() -> Callable[..., CampaignRecord]:
    """
    Build a small CampaignRecord, overriding top-level payload keys.

    Example:
        record = make_record(links=[], exposedGroup={...})
    """
    def _make(**overrides: Any) -> CampaignRecord:
        payload = _default_payload()
        payload.update(overrides)
        return CampaignRecord.model_validate(payload)

    return _make


@pytest.fixture
def raw_payload() -> Callable[[], Dict[str, Any]]:
    """Fresh, valid single-campaign payload for catalog validation tests."""
    return _default_payload
