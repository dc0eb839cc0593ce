"""
Share Link Codec

Encodes the dashboard state ``(campaign index, attribution mode, active tab)``
into a query-string link and decodes it back.

Format: ``<base_url>?campaign=<int>&mode=<household|individual>&tab=<flow|timing|comparison>``

Decoding never fails. Each parameter that is missing, malformed or out of
range falls back on its own default: first campaign, household mode, flow tab.
An integral float campaign (``1.0``) is accepted and mode and tab match
case-insensitively.
"""

import logging
import math
from typing import Optional
from urllib.parse import parse_qs, urlencode

from ctv_attribution.core.config import get_settings
from ctv_attribution.models.enums import AttributionMode, DashboardTab
from ctv_attribution.models.schemas import ShareState

logger = logging.getLogger(__name__)


def encode_share_query(state: ShareState) -> str:
    return urlencode({
        'campaign': str(state.campaign_index),
        'mode': state.mode.value,
        'tab': state.tab.value,
    })


def encode_share_link(state: ShareState, base_url: Optional[str] = None) -> str:
    """
    Build a shareable URL for a dashboard state.

    Args:
        state: State to encode
        base_url: URL to attach the query to (default Settings.share_link_base_url);
            any existing query string or fragment on it is replaced
    """
    if base_url is None:
        base_url = get_settings().share_link_base_url
    base = base_url.split('#', 1)[0].split('?', 1)[0]
    return f"{base}?{encode_share_query(state)}"


def _first(params: dict, key: str) -> Optional[str]:
    values = params.get(key)
    return values[0] if values else None


def decode_share_link(url_or_query: Optional[str], campaign_count: int) -> ShareState:
    """
    Decode a share link (full URL or bare query string).

    Args:
        url_or_query: ``https://host/?campaign=1&mode=individual&tab=timing``,
            ``?campaign=1...`` or ``campaign=1...``; None or empty gives defaults
        campaign_count: Number of campaigns in the catalog, for range checking

    Returns:
        ShareState with per-field fallbacks applied
    """
    if not url_or_query:
        return ShareState()

    if '?' in url_or_query:
        # Scheme-less URLs such as ``localhost:5173/?campaign=1`` included
        query = url_or_query.split('?', 1)[1].split('#', 1)[0]
    elif '://' in url_or_query or url_or_query.startswith('/'):
        query = ''
    else:
        query = url_or_query.split('#', 1)[0]
    params = parse_qs(query)

    campaign_index = 0
    raw_campaign = _first(params, 'campaign')
    if raw_campaign is not None:
        try:
            number = float(raw_campaign)
        except ValueError:
            number = math.nan
        if not math.isfinite(number) or not number.is_integer():
            logger.warning(f"Ignoring non-integer campaign index {raw_campaign!r} in share link")
        else:
            candidate = int(number)
            if 0 <= candidate < campaign_count:
                campaign_index = candidate
            else:
                logger.warning(f"Ignoring out-of-range campaign index {candidate} in share link")

    mode = AttributionMode.HOUSEHOLD
    raw_mode = (_first(params, 'mode') or '').strip().lower()
    if raw_mode in {m.value for m in AttributionMode}:
        mode = AttributionMode(raw_mode)

    tab = DashboardTab.FLOW
    raw_tab = (_first(params, 'tab') or '').strip().lower()
    if raw_tab in {t.value for t in DashboardTab}:
        tab = DashboardTab(raw_tab)

    return ShareState(campaign_index=campaign_index, mode=mode, tab=tab)
