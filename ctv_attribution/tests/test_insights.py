"""
Key Insights and Benchmark Tests
"""

import pytest

from ctv_attribution.models.enums import AttributionMode, InsightCategory
from ctv_attribution.services.insights import (
    INDUSTRY_BENCHMARKS,
    compare_to_benchmark,
    generate_key_insights,
    generate_report_insights,
    get_campaign_context,
)


class TestKeyInsights:

    @pytest.mark.scenario
    def test_ecommerce_household(self, ecommerce_record):
        insights = generate_key_insights(ecommerce_record, AttributionMode.HOUSEHOLD)

        assert [i.category for i in insights] == [
            InsightCategory.DEVICE,
            InsightCategory.TIMING,
            InsightCategory.LIFT,
            InsightCategory.CONFIDENCE,
            InsightCategory.REVENUE,
        ]
        assert [i.text for i in insights] == [
            'Mobile is the primary conversion device (61% of conversions)',
            'Most users convert within 24 hours (57% of conversions)',
            'CTV delivers 100% lift vs control group (statistically significant)',
            '89% attribution confidence - High quality',
            'Estimated incremental revenue: $173K',
        ]

    @pytest.mark.scenario
    def test_ecommerce_individual_confidence(self, ecommerce_record):
        insights = generate_key_insights(ecommerce_record, 'individual')
        confidence = next(i for i in insights if i.category == InsightCategory.CONFIDENCE)
        assert confidence.text == '67% attribution confidence - Low quality'

    @pytest.mark.scenario
    def test_automotive_primary_device(self, automotive_record):
        device = generate_key_insights(automotive_record, AttributionMode.HOUSEHOLD)[0]
        assert device.text == 'Desktop is the primary conversion device (70% of conversions)'

    def test_no_conversion_nodes_omits_device_insight(self, make_record, raw_payload):
        nodes = [n for n in raw_payload()['nodes'] if not n['id'].endswith('_conv')]
        insights = generate_key_insights(make_record(nodes=nodes), AttributionMode.HOUSEHOLD)
        assert InsightCategory.DEVICE not in [i.category for i in insights]
        assert len(insights) == 4

    def test_not_significant_lift(self, make_record):
        record = make_record(lift={
            'absolute': 0.001, 'relative': 5.0, 'pValue': 0.3, 'confidenceInterval': [-0.001, 0.003],
        })
        lift = next(
            i for i in generate_key_insights(record, AttributionMode.HOUSEHOLD)
            if i.category == InsightCategory.LIFT
        )
        assert lift.text == 'CTV delivers 5% lift vs control group'

    def test_small_revenue_not_abbreviated(self, make_record):
        # 10 incremental conversions * 74.50
        record = make_record(controlGroup={'impressions': 1000, 'conversions': 30, 'conversionRate': 0.03})
        revenue = generate_key_insights(record, AttributionMode.HOUSEHOLD)[-1]
        assert revenue.text == 'Estimated incremental revenue: $745'

    def test_thousands_abbreviated(self, make_record):
        # 20 incremental conversions * 74.50 = 1490
        revenue = generate_key_insights(make_record(), AttributionMode.HOUSEHOLD)[-1]
        assert revenue.text == 'Estimated incremental revenue: $1K'


class TestReportInsights:

    @pytest.mark.scenario
    def test_ecommerce_household(self, ecommerce_record):
        bullets = generate_report_insights(ecommerce_record, AttributionMode.HOUSEHOLD)

        assert bullets[0] == (
            'Device crossover rate of 38.3% indicates strong cross-device matching capability.'
        )
        assert 'p = < 0.001' in bullets[2]
        assert '2,325 incremental conversions' in bullets[3]
        assert 'statistical significance' in bullets[4]
        assert bullets[-1].startswith('Household-level attribution')

    @pytest.mark.scenario
    def test_automotive_individual(self, automotive_record):
        bullets = generate_report_insights(automotive_record, AttributionMode.INDIVIDUAL)
        assert 'p = 0.0021' in bullets[2]
        assert '1,320 incremental conversions' in bullets[3]
        assert bullets[-1].startswith('Individual-level attribution')


class TestBenchmarks:

    def test_favorable_when_higher(self):
        comparison = compare_to_benchmark(575000 / 1500000, INDUSTRY_BENCHMARKS['crossover_rate'])
        assert comparison.diff_pct == pytest.approx((0.383333 - 0.18) / 0.18 * 100, rel=1e-4)
        assert comparison.favorable is True

    def test_unfavorable_when_lower(self):
        comparison = compare_to_benchmark(0.0015, INDUSTRY_BENCHMARKS['conversion_rate'])
        assert comparison.diff_pct < 0
        assert comparison.favorable is False

    def test_lower_is_better(self):
        assert compare_to_benchmark(0.5, 1.0, higher_is_better=False).favorable is True

    @pytest.mark.parametrize('benchmark', [None, 0, 0.0])
    def test_missing_benchmark(self, benchmark):
        assert compare_to_benchmark(0.3, benchmark) is None


class TestCampaignContext:

    def test_known_campaign(self):
        assert get_campaign_context('camp-auto-launch').startswith('Typical for automotive')

    def test_unknown_campaign(self):
        assert get_campaign_context('camp-missing') is None
