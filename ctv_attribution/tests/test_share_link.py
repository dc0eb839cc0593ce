"""
Share Link Codec Tests
"""

import pytest

from ctv_attribution.models.enums import AttributionMode, DashboardTab
from ctv_attribution.models.schemas import ShareState
from ctv_attribution.services.share_link import (
    decode_share_link,
    encode_share_link,
    encode_share_query,
)


BASE_URL = 'https://dash.example.com/'


class TestEncode:

    def test_query_format(self):
        state = ShareState(campaign_index=1, mode=AttributionMode.INDIVIDUAL, tab=DashboardTab.TIMING)
        assert encode_share_query(state) == 'campaign=1&mode=individual&tab=timing'

    def test_link_on_base_url(self):
        state = ShareState(campaign_index=2, tab=DashboardTab.COMPARISON)
        assert encode_share_link(state, BASE_URL) == (
            'https://dash.example.com/?campaign=2&mode=household&tab=comparison'
        )

    def test_existing_query_and_fragment_replaced(self):
        link = encode_share_link(ShareState(), 'https://dash.example.com/app?campaign=9#flow')
        assert link == 'https://dash.example.com/app?campaign=0&mode=household&tab=flow'

    def test_default_base_from_settings(self, monkeypatch):
        monkeypatch.setenv('CTV_SHARE_LINK_BASE_URL', 'https://ctv.example.org/dashboard')
        assert encode_share_link(ShareState()).startswith('https://ctv.example.org/dashboard?campaign=0')


class TestDecode:

    def test_round_trip(self):
        state = ShareState(campaign_index=1, mode=AttributionMode.INDIVIDUAL, tab=DashboardTab.TIMING)
        assert decode_share_link(encode_share_link(state, BASE_URL), campaign_count=3) == state

    @pytest.mark.parametrize('value', [None, '', BASE_URL, '?'])
    def test_empty_gives_defaults(self, value):
        assert decode_share_link(value, campaign_count=3) == ShareState(
            campaign_index=0, mode=AttributionMode.HOUSEHOLD, tab=DashboardTab.FLOW
        )

    @pytest.mark.parametrize('query', [
        'campaign=1&mode=individual&tab=timing',
        '?campaign=1&mode=individual&tab=timing',
        '/dashboard?campaign=1&mode=individual&tab=timing',
        'localhost:5173/?campaign=1&mode=individual&tab=timing',
        'localhost:5173/?campaign=1&mode=individual&tab=timing#top',
        'campaign=1&mode=Individual&tab=Timing',
        'campaign=1.0&mode=INDIVIDUAL&tab= timing ',
    ])
    def test_accepts_bare_queries_and_paths(self, query):
        state = decode_share_link(query, campaign_count=3)
        assert (state.campaign_index, state.mode, state.tab) == (
            1, AttributionMode.INDIVIDUAL, DashboardTab.TIMING
        )

    @pytest.mark.parametrize('query,expected_index', [
        ('campaign=7', 0),
        ('campaign=3', 0),
        ('campaign=-1', 0),
        ('campaign=abc', 0),
        ('campaign=1.5', 0),
        ('campaign=inf', 0),
        ('campaign=2.0', 2),
        ('campaign=2', 2),
    ])
    def test_campaign_index_validated(self, query, expected_index):
        assert decode_share_link(query, campaign_count=3).campaign_index == expected_index

    def test_each_field_falls_back_independently(self):
        state = decode_share_link('campaign=2&mode=team&tab=comparison', campaign_count=3)
        assert state.campaign_index == 2
        assert state.mode == AttributionMode.HOUSEHOLD
        assert state.tab == DashboardTab.COMPARISON

    def test_unknown_tab(self):
        assert decode_share_link('tab=settings', campaign_count=3).tab == DashboardTab.FLOW

    def test_partial_query(self):
        state = decode_share_link('?tab=comparison', campaign_count=3)
        assert state == ShareState(tab=DashboardTab.COMPARISON)

    def test_out_of_range_index_logs_warning(self, caplog):
        with caplog.at_level('WARNING'):
            decode_share_link('campaign=7', campaign_count=3)
        assert 'out-of-range campaign index 7' in caplog.text

    def test_scheme_less_host_is_not_a_query(self, caplog):
        with caplog.at_level('WARNING'):
            state = decode_share_link('localhost:5173/?campaign=2', campaign_count=3)
        assert state.campaign_index == 2
        assert 'non-integer' not in caplog.text

    def test_fractional_index_logs_warning(self, caplog):
        with caplog.at_level('WARNING'):
            decode_share_link('campaign=1.5', campaign_count=3)
        assert "non-integer campaign index '1.5'" in caplog.text
