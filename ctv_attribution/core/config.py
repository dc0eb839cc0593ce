"""
Settings and environment management module for the CTV attribution core.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion (prefix ``CTV_``)
- Defaults that reproduce the reference dashboard numbers exactly
- Singleton pattern via @lru_cache for efficient access
- Frozen (hashable) so a Settings instance can key memoized derivations
- Every domain constant (multipliers, normalization constants, order value)
  is a named, overridable setting rather than a literal in derivation code

Environment Variables:
- CTV_CAMPAIGN_DATA_PATH: Alternative campaign fixture (default: bundled JSON)
- CTV_AVERAGE_ORDER_VALUE: Revenue per incremental conversion (default: 74.50)
- CTV_SAMPLE_SIZE_NORMALIZATION: Impressions for a full sample-size score (default: 2000000)
- CTV_EXPORT_DIR: Directory that CSV export jobs write into (default: exports)
- CTV_LOG_LEVEL: Root log level for the entrypoint (default: INFO)

Usage:
    from ctv_attribution.core.config import get_settings

    settings = get_settings()
    multiplier = settings.household_confidence_multiplier
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        household_confidence_multiplier: Confidence multiplier in household mode.
        individual_confidence_multiplier: Confidence multiplier in individual mode.
        high_confidence_threshold: Adjusted confidence above which an edge is High.
        medium_confidence_threshold: Adjusted confidence at or above which an edge is Medium.
        crossover_rate_target: Crossover rate that earns the full crossover score.
        sample_size_normalization: Impression volume that earns the full sample-size score.
        crossover_weight: Maximum points from the crossover sub-score.
        confidence_weight: Maximum points from the confidence sub-score.
        sample_size_weight: Maximum points from the sample-size sub-score.
        grade_a_plus_min: Lowest composite score graded A+.
        grade_a_min: Lowest composite score graded A.
        grade_b_min: Lowest composite score graded B.
        average_order_value: Revenue credited per incremental conversion.
        significance_level: p-value below which lift is reported as significant.
        control_confidence_dampening: Edge confidence factor for synthesized control funnels.
        campaign_data_path: Override path for the campaign fixture JSON.
        share_link_base_url: Base URL that share links are appended to.
        export_dir: Directory for CSV export jobs.
        log_level: Log level applied by the entrypoint.
    """

    model_config = SettingsConfigDict(
        env_prefix='CTV_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
        frozen=True,
    )

    # =========================================================================
    # Confidence Adjustment
    # =========================================================================

    # Household matching trusts shared-screen signals more; result is capped at 1.0
    household_confidence_multiplier: float = 1.15

    # Individual matching is stricter; factor < 1 so no clamp is needed
    individual_confidence_multiplier: float = 0.85

    # Tier boundaries: High is strictly above, Medium is inclusive on both ends
    high_confidence_threshold: float = 0.85
    medium_confidence_threshold: float = 0.70

    # =========================================================================
    # Data-Quality Scoring
    # =========================================================================

    crossover_rate_target: float = 0.5
    sample_size_normalization: int = 2_000_000

    # Weights sum to 100 so the composite score lands in [0, 100]
    crossover_weight: float = 33.0
    confidence_weight: float = 34.0
    sample_size_weight: float = 33.0

    # Lower bounds are inclusive
    grade_a_plus_min: float = 85.0
    grade_a_min: float = 70.0
    grade_b_min: float = 55.0

    # =========================================================================
    # Lift / Incrementality
    # =========================================================================

    average_order_value: float = 74.50
    significance_level: float = 0.05

    # Control population saw no ad, so cross-device matches are less reliable
    control_confidence_dampening: float = 0.6

    # =========================================================================
    # Data, Sharing and Export
    # =========================================================================

    # None means the fixture bundled at ctv_attribution/data/campaigns.json
    campaign_data_path: Optional[str] = None

    share_link_base_url: str = 'http://localhost:5173/'

    export_dir: str = 'exports'

    log_level: str = 'INFO'


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The application settings instance with all configuration values.

    Raises:
        pydantic.ValidationError: If an environment override has an invalid value
            (e.g., CTV_AVERAGE_ORDER_VALUE=abc).

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
