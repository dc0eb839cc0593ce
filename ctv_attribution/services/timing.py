"""
Timing Distribution Estimator

Turns the six-bucket time-to-conversion histogram into continuous estimates
(median, 75th percentile) and simple bucket statistics.

Percentile estimation walks the buckets in canonical ascending order
(TimeBucket declaration order), accumulating each bucket's share of total
conversions. In the first bucket where the cumulative share reaches the
target fraction:

    progress = (target - prev) / (cum - prev)      # 0 if the bucket is empty
    estimate = midpoint * (0.5 + 0.5 * progress)

Only bucket midpoints are tracked (no bucket edges), so the estimate lands in
the upper half of [0, midpoint] rather than interpolating between edges. The
formula is kept as-is so figures match the dashboard.

Peak bucket is a plain argmax over raw counts and deliberately does not share
the percentile code.
"""

from typing import Dict, Mapping, Optional, Union

from ctv_attribution.models.enums import TimeBucket
from ctv_attribution.models.schemas import CampaignRecord, TimeBucketStats, TimingSummary


CANONICAL_BUCKETS = tuple(TimeBucket)

# Representative hour value per bucket
BUCKET_MIDPOINT_HOURS: Dict[TimeBucket, float] = {
    TimeBucket.UNDER_1_HOUR: 0.5,
    TimeBucket.HOURS_1_6: 3.5,
    TimeBucket.HOURS_6_24: 15.0,
    TimeBucket.DAYS_1_3: 48.0,
    TimeBucket.DAYS_3_7: 120.0,
    TimeBucket.DAYS_7_PLUS: 240.0,
}

# Buckets that end at or before 24 hours
WITHIN_24H_BUCKETS = (
    TimeBucket.UNDER_1_HOUR,
    TimeBucket.HOURS_1_6,
    TimeBucket.HOURS_6_24,
)

BucketEntry = Union[TimeBucketStats, int]


def _lookup(mapping: Mapping, bucket: TimeBucket, default=None):
    # Enum members and their raw labels hash differently; accept either key
    if bucket in mapping:
        return mapping[bucket]
    return mapping.get(bucket.value, default)


def _bucket_count(buckets: Mapping, bucket: TimeBucket) -> int:
    entry = _lookup(buckets, bucket)
    if entry is None:
        return 0
    if isinstance(entry, TimeBucketStats):
        return entry.count
    if isinstance(entry, Mapping):
        return int(entry.get('count', 0))
    return int(entry)


def estimate_percentile(
    buckets: Mapping,
    bucket_midpoint_hours: Optional[Mapping] = None,
    total_conversions: int = 0,
    target_fraction: float = 0.5
) -> float:
    """
    Estimate a time-to-conversion percentile in hours.

    Args:
        buckets: Histogram keyed by TimeBucket (or its label); values are
            TimeBucketStats, ``{"count": n}`` dicts or plain counts. Missing
            buckets count as zero.
        bucket_midpoint_hours: Midpoint hours per bucket (default
            BUCKET_MIDPOINT_HOURS)
        total_conversions: Denominator for bucket fractions; 0 makes every
            fraction 0
        target_fraction: Percentile as a fraction in (0, 1], e.g. 0.5 for median

    Returns:
        Estimated hours. If the cumulative share never reaches the target
        (rounding, or a histogram smaller than the total), the last bucket's
        midpoint.
    """
    midpoints = bucket_midpoint_hours or BUCKET_MIDPOINT_HOURS

    cumulative = 0.0
    for bucket in CANONICAL_BUCKETS:
        count = _bucket_count(buckets, bucket)
        fraction = count / total_conversions if total_conversions else 0.0

        previous = cumulative
        cumulative += fraction
        if cumulative >= target_fraction:
            if cumulative == previous:
                progress = 0.0
            else:
                progress = (target_fraction - previous) / (cumulative - previous)
            midpoint = _lookup(midpoints, bucket, 0.0)
            return midpoint * (0.5 + 0.5 * progress)

    return _lookup(midpoints, CANONICAL_BUCKETS[-1], 0.0)


def estimate_timing_percentile(record: CampaignRecord, target_fraction: float) -> float:
    """Percentile estimate for a campaign, using exposed conversions as the total."""
    return estimate_percentile(
        record.time_to_conversion,
        BUCKET_MIDPOINT_HOURS,
        record.exposed_group.conversions,
        target_fraction,
    )


def find_peak_bucket(buckets: Mapping) -> TimeBucket:
    """
    Bucket with the most conversions.

    Ties go to the earlier bucket; an all-zero histogram returns the first bucket.
    """
    peak = CANONICAL_BUCKETS[0]
    peak_count = 0
    for bucket in CANONICAL_BUCKETS:
        count = _bucket_count(buckets, bucket)
        if count > peak_count:
            peak_count = count
            peak = bucket
    return peak


def find_fastest_bucket(buckets: Mapping) -> TimeBucket:
    """Earliest bucket with any conversions (first bucket if none have any)."""
    for bucket in CANONICAL_BUCKETS:
        if _bucket_count(buckets, bucket) > 0:
            return bucket
    return CANONICAL_BUCKETS[0]


def share_within_24_hours(record: CampaignRecord) -> float:
    total = record.exposed_group.conversions
    if not total:
        return 0.0
    within = sum(record.bucket_count(bucket) for bucket in WITHIN_24H_BUCKETS)
    return within / total


def bucket_for_hours(hours: float) -> TimeBucket:
    """Map an hour value onto its histogram bucket."""
    if hours < 1:
        return TimeBucket.UNDER_1_HOUR
    if hours < 6:
        return TimeBucket.HOURS_1_6
    if hours < 24:
        return TimeBucket.HOURS_6_24
    if hours < 72:
        return TimeBucket.DAYS_1_3
    if hours < 168:
        return TimeBucket.DAYS_3_7
    return TimeBucket.DAYS_7_PLUS


def summarize_timing(record: CampaignRecord) -> TimingSummary:
    histogram = record.time_to_conversion
    peak = find_peak_bucket(histogram)
    peak_stats = _lookup(histogram, peak)

    return TimingSummary(
        median_hours=estimate_timing_percentile(record, 0.5),
        p75_hours=estimate_timing_percentile(record, 0.75),
        peak_bucket=peak,
        peak_percentage=peak_stats.percentage if peak_stats is not None else 0.0,
        fastest_bucket=find_fastest_bucket(histogram),
        within_24h_share=share_within_24_hours(record),
    )
