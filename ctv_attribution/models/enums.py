"""
Enumeration definitions for the CTV attribution core.

All enums inherit from both `str` and `Enum` so they serialize as plain strings
inside Pydantic models and compare equal to their raw values (e.g.
``AttributionMode.HOUSEHOLD == "household"``), which keeps share links and CSV
exports free of conversion code.
"""

from enum import Enum


class AttributionMode(str, Enum):
    """
    How conservatively cross-device matches are trusted.

    - household: Shared-screen matching, confidence boosted (x1.15, capped at 1.0)
    - individual: Person-level matching, confidence discounted (x0.85)
    """
    HOUSEHOLD = "household"
    INDIVIDUAL = "individual"


class NodeKind(str, Enum):
    """
    Structural role of a funnel node.

    Assigned when a record is constructed; derivation code branches on this
    tag and never on node id strings.

    - impression: The single root node (CTV ad impressions)
    - crossover: A device the impression was matched to (or the no-detection sentinel)
    - visit: Site visits from a device
    - conversion: Conversion events from a device
    """
    IMPRESSION = "impression"
    CROSSOVER = "crossover"
    VISIT = "visit"
    CONVERSION = "conversion"


class ConfidenceTier(str, Enum):
    """
    Classification of an edge's adjusted match-confidence.

    - High: score > 0.85
    - Medium: 0.70 <= score <= 0.85
    - Low: score < 0.70
    """
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class QualityGrade(str, Enum):
    """
    Composite data-quality grade.

    - A+: composite >= 85 (excellent)
    - A: composite >= 70 (good)
    - B: composite >= 55 (fair)
    - C: below 55 (limited)
    """
    A_PLUS = "A+"
    A = "A"
    B = "B"
    C = "C"


class TimeBucket(str, Enum):
    """
    Time-to-conversion histogram buckets.

    Declaration order is the canonical ascending time order used by the
    percentile estimator; it must not be re-sorted alphabetically.
    """
    UNDER_1_HOUR = "< 1 hour"
    HOURS_1_6 = "1-6 hours"
    HOURS_6_24 = "6-24 hours"
    DAYS_1_3 = "1-3 days"
    DAYS_3_7 = "3-7 days"
    DAYS_7_PLUS = "7+ days"


class DashboardTab(str, Enum):
    """Dashboard views that a share link can point at."""
    FLOW = "flow"
    TIMING = "timing"
    COMPARISON = "comparison"


class InsightCategory(str, Enum):
    """Topic of a generated key insight."""
    DEVICE = "device"
    TIMING = "timing"
    LIFT = "lift"
    CONFIDENCE = "confidence"
    REVENUE = "revenue"


class ExportKind(str, Enum):
    """CSV exports produced by the export jobs."""
    REPORT = "report"
    METRICS = "metrics"
