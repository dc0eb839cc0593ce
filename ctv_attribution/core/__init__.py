"""
Core infrastructure package for the CTV attribution core.

Provides:
- Configuration management via pydantic-settings
- Error types shared by the catalog and services

This module re-exports key components from submodules for convenient importing:

    from ctv_attribution.core import get_settings, CatalogLoadError

Components Re-exported:
    Settings: Pydantic settings class with all configuration parameters
    get_settings: Function returning the cached Settings singleton
    CatalogLoadError: Fatal fixture load failure
    CampaignNotFoundError: Unknown campaign id lookup
"""

from ctv_attribution.core.config import Settings, get_settings
from ctv_attribution.core.exceptions import CatalogLoadError, CampaignNotFoundError

__all__ = [
    'Settings',
    'get_settings',
    'CatalogLoadError',
    'CampaignNotFoundError',
]
