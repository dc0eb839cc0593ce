"""
Data-Quality Scoring Service

Grades how much a campaign's attribution data can be trusted by combining three
sub-scores into a composite in [0, 100]:

- crossover_score   = min(crossover_rate / 0.5, 1) * 33
- confidence_score  = min(avg_adjusted_confidence / 1, 1) * 34
- sample_size_score = min(impressions / 2,000,000, 1) * 33

Grades (lower bound inclusive): A+ >= 85, A >= 70, B >= 55, otherwise C.

Average confidence is taken over ALL edges, ignoring the display threshold.
Normalization constants and weights come from Settings.
"""

from typing import Any, Optional

from ctv_attribution.core.config import Settings, get_settings
from ctv_attribution.models.enums import QualityGrade
from ctv_attribution.models.schemas import CampaignRecord, DataQualityScore, QualityComponents
from ctv_attribution.services.confidence import average_adjusted_confidence
from ctv_attribution.services.funnel import compute_crossover_rate


def grade_for_score(composite_score: float, settings: Optional[Settings] = None) -> QualityGrade:
    """Map a composite score onto its letter grade."""
    settings = settings or get_settings()
    if composite_score >= settings.grade_a_plus_min:
        return QualityGrade.A_PLUS
    elif composite_score >= settings.grade_a_min:
        return QualityGrade.A
    elif composite_score >= settings.grade_b_min:
        return QualityGrade.B
    else:
        return QualityGrade.C


def _capped_ratio(value: float, normalizer: float) -> float:
    if normalizer <= 0:
        return 0.0
    return min(value / normalizer, 1.0)


def score_data_quality(
    record: CampaignRecord,
    mode: Any,
    settings: Optional[Settings] = None
) -> DataQualityScore:
    """
    Score a campaign's data quality for an attribution mode.

    Args:
        record: Campaign to score
        mode: AttributionMode used to adjust edge confidence
        settings: Optional settings override (weights, normalizers, cut-offs)

    Returns:
        DataQualityScore with grade, composite, sub-scores and their inputs
    """
    settings = settings or get_settings()

    crossover_rate = compute_crossover_rate(record)
    average_confidence = average_adjusted_confidence(record.links, mode, settings)
    impression = record.impression_node
    sample_size = impression.value if impression is not None else 0

    components = QualityComponents(
        crossover_score=_capped_ratio(crossover_rate, settings.crossover_rate_target) * settings.crossover_weight,
        confidence_score=_capped_ratio(average_confidence, 1.0) * settings.confidence_weight,
        sample_size_score=_capped_ratio(sample_size, settings.sample_size_normalization) * settings.sample_size_weight,
    )
    composite = components.crossover_score + components.confidence_score + components.sample_size_score

    return DataQualityScore(
        grade=grade_for_score(composite, settings),
        composite_score=composite,
        components=components,
        crossover_rate=crossover_rate,
        average_confidence=average_confidence,
        sample_size=sample_size,
    )
