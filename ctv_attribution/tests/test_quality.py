"""
Data-Quality Scoring Tests

Covers the three weighted sub-scores, grade cut-offs and monotonicity of the
grade in its inputs.
"""

import pytest

from ctv_attribution.core.config import Settings
from ctv_attribution.models.enums import AttributionMode, QualityGrade
from ctv_attribution.services.quality import grade_for_score, score_data_quality


GRADE_RANK = {
    QualityGrade.C: 0,
    QualityGrade.B: 1,
    QualityGrade.A: 2,
    QualityGrade.A_PLUS: 3,
}


class TestGradeForScore:

    @pytest.mark.parametrize('score,expected', [
        (100.0, QualityGrade.A_PLUS),
        (85.0, QualityGrade.A_PLUS),
        (84.999, QualityGrade.A),
        (70.0, QualityGrade.A),
        (69.99, QualityGrade.B),
        (55.0, QualityGrade.B),
        (54.99, QualityGrade.C),
        (0.0, QualityGrade.C),
    ])
    def test_cutoffs_are_inclusive_lower_bounds(self, score, expected):
        assert grade_for_score(score) == expected

    def test_grade_values(self):
        assert QualityGrade.A_PLUS.value == 'A+'

    def test_custom_cutoffs(self):
        settings = Settings(grade_a_plus_min=90.0)
        assert grade_for_score(87.0, settings) == QualityGrade.A

    @pytest.mark.property
    def test_grade_monotone_in_score(self):
        previous = -1
        for score in range(0, 101):
            rank = GRADE_RANK[grade_for_score(float(score))]
            assert rank >= previous
            previous = rank


class TestScoreDataQuality:

    @pytest.mark.scenario
    def test_ecommerce_household(self, ecommerce_record):
        score = score_data_quality(ecommerce_record, AttributionMode.HOUSEHOLD)

        assert score.components.crossover_score == pytest.approx((575000 / 1500000) / 0.5 * 33)
        assert score.components.confidence_score == pytest.approx(0.89335 * 34)
        assert score.components.sample_size_score == pytest.approx(0.75 * 33)
        assert score.composite_score == pytest.approx(80.4239, abs=1e-3)
        assert score.grade == QualityGrade.A
        assert score.sample_size == 1500000

    @pytest.mark.scenario
    @pytest.mark.parametrize('campaign_id,mode,expected_grade,expected_score', [
        ('camp-ecom-spring', AttributionMode.INDIVIDUAL, QualityGrade.A, 72.9966),
        ('camp-auto-launch', AttributionMode.HOUSEHOLD, QualityGrade.A, 79.2488),
        ('camp-auto-launch', AttributionMode.INDIVIDUAL, QualityGrade.A, 72.4352),
        ('camp-cpg-awareness', AttributionMode.HOUSEHOLD, QualityGrade.B, 64.513),
        ('camp-cpg-awareness', AttributionMode.INDIVIDUAL, QualityGrade.B, 57.067),
    ])
    def test_reference_campaigns(self, catalog, campaign_id, mode, expected_grade, expected_score):
        score = score_data_quality(catalog.get_campaign(campaign_id), mode)
        assert score.composite_score == pytest.approx(expected_score, abs=1e-3)
        assert score.grade == expected_grade

    def test_sample_size_score_is_capped(self, automotive_record):
        # 2.2M impressions exceeds the 2M normalizer
        score = score_data_quality(automotive_record, AttributionMode.HOUSEHOLD)
        assert score.components.sample_size_score == pytest.approx(33.0)

    def test_crossover_score_is_capped(self, make_record):
        # every impression edge detected: crossover rate 1.0
        record = make_record(noDetectionNodeId='unmatched')
        score = score_data_quality(record, AttributionMode.HOUSEHOLD)
        assert score.components.crossover_score == pytest.approx(33.0)

    def test_composite_stays_within_bounds(self, make_record):
        record = make_record(noDetectionNodeId='unmatched')
        score = score_data_quality(record, AttributionMode.HOUSEHOLD)
        assert 0.0 <= score.composite_score <= 100.0

    def test_missing_impression_node_scores_zero_sample(self, make_record, raw_payload):
        nodes = [n for n in raw_payload()['nodes'] if n['id'] != 'ctv']
        score = score_data_quality(make_record(nodes=nodes), AttributionMode.HOUSEHOLD)
        assert score.sample_size == 0
        assert score.components.sample_size_score == 0.0
        assert score.components.crossover_score == 0.0

    def test_no_links(self, make_record):
        score = score_data_quality(make_record(links=[]), AttributionMode.HOUSEHOLD)
        assert score.average_confidence == 0.0
        assert score.components.confidence_score == 0.0
        assert score.grade == QualityGrade.C

    def test_household_never_grades_below_individual(self, catalog):
        for record in catalog:
            household = score_data_quality(record, AttributionMode.HOUSEHOLD)
            individual = score_data_quality(record, AttributionMode.INDIVIDUAL)
            assert household.composite_score >= individual.composite_score
            assert GRADE_RANK[household.grade] >= GRADE_RANK[individual.grade]

    @pytest.mark.property
    @pytest.mark.parametrize('impressions', [0, 100_000, 500_000, 1_000_000, 1_999_999, 2_000_000, 5_000_000])
    def test_more_impressions_never_lowers_grade(self, make_record, raw_payload, impressions):
        def scored(volume):
            nodes = raw_payload()['nodes']
            nodes[0] = {'id': 'ctv', 'label': 'CTV Impressions', 'value': volume}
            links = raw_payload()['links']
            links[0] = {**links[0], 'value': volume * 4 // 10}
            return score_data_quality(make_record(nodes=nodes, links=links), AttributionMode.HOUSEHOLD)

        low = scored(impressions)
        high = scored(impressions + 250_000)
        assert high.components.sample_size_score >= low.components.sample_size_score
        assert GRADE_RANK[high.grade] >= GRADE_RANK[low.grade]
