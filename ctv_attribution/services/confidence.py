"""
Confidence Adjustment Service

Applies the attribution-mode multiplier to raw per-edge match confidence and
classifies the result into High/Medium/Low tiers.

Attribution modes:
- Household: ``min(raw * 1.15, 1.0)``; shared-screen matches are trusted more
- Individual: ``raw * 0.85``; stricter person-level matching

Tier boundaries (on the adjusted score):
- High: > 0.85 (exclusive)
- Medium: 0.70 <= score <= 0.85 (inclusive on both ends)
- Low: < 0.70

Invalid UI state never raises here. An unknown mode degrades to Household and
an out-of-range threshold is clamped, both with a warning.
"""

import logging
import math
from typing import Any, Iterable, Optional

import numpy as np

from ctv_attribution.core.config import Settings, get_settings
from ctv_attribution.models.enums import AttributionMode, ConfidenceTier
from ctv_attribution.models.schemas import FlowEdge

logger = logging.getLogger(__name__)


def coerce_mode(mode: Any) -> AttributionMode:
    """
    Normalize an attribution mode value.

    Accepts AttributionMode members or their string values (case-insensitive).
    Anything else falls back to HOUSEHOLD.
    """
    if isinstance(mode, AttributionMode):
        return mode
    if isinstance(mode, str):
        try:
            return AttributionMode(mode.strip().lower())
        except ValueError:
            pass
    logger.warning(f"Unrecognized attribution mode {mode!r}, defaulting to household")
    return AttributionMode.HOUSEHOLD


def coerce_threshold(threshold_percent: Any) -> int:
    """
    Normalize a confidence threshold slider value to an int in [0, 100].

    Non-numeric input and NaN fall back to 0 (show everything); infinities
    clamp like any other out-of-range number.
    """
    try:
        value = float(threshold_percent)
    except (TypeError, ValueError):
        value = math.nan
    if math.isnan(value):
        logger.warning(f"Invalid confidence threshold {threshold_percent!r}, defaulting to 0")
        return 0

    if value < 0 or value > 100:
        clamped = 0 if value < 0 else 100
        logger.warning(f"Confidence threshold {value} outside [0, 100], clamped to {clamped}")
        return clamped
    return int(round(value))


def adjust_confidence(
    raw_confidence: float,
    mode: Any,
    settings: Optional[Settings] = None
) -> float:
    """
    Adjust a raw match confidence for the attribution mode.

    A raw value outside [0, 1] is clamped into range before adjusting.

    Args:
        raw_confidence: Raw edge confidence in [0, 1]
        mode: AttributionMode (or its string value)
        settings: Optional settings override (multipliers)

    Returns:
        Adjusted confidence in [0, 1]
    """
    settings = settings or get_settings()
    mode = coerce_mode(mode)

    raw = float(raw_confidence)
    if math.isnan(raw):
        raw = 0.0
    raw = min(max(raw, 0.0), 1.0)
    if raw != raw_confidence:
        logger.debug(f"Raw confidence {raw_confidence} clamped to {raw}")

    if mode == AttributionMode.HOUSEHOLD:
        return min(raw * settings.household_confidence_multiplier, 1.0)
    return min(raw * settings.individual_confidence_multiplier, 1.0)


def classify_confidence_tier(
    score: float,
    settings: Optional[Settings] = None
) -> ConfidenceTier:
    """
    Classify an adjusted confidence score.

    Returns:
        HIGH if score > 0.85, MEDIUM if score >= 0.70, otherwise LOW
    """
    settings = settings or get_settings()
    if score > settings.high_confidence_threshold:
        return ConfidenceTier.HIGH
    elif score >= settings.medium_confidence_threshold:
        return ConfidenceTier.MEDIUM
    else:
        return ConfidenceTier.LOW


def average_adjusted_confidence(
    links: Iterable[FlowEdge],
    mode: Any,
    settings: Optional[Settings] = None
) -> float:
    """
    Arithmetic mean of the mode-adjusted confidence over all edges.

    No threshold filtering is applied. An empty edge list averages to 0.
    """
    adjusted = [adjust_confidence(link.confidence, mode, settings) for link in links]
    if not adjusted:
        return 0.0
    return float(np.mean(adjusted))
