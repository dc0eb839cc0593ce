"""
Error types raised across the derivation core.

Only two conditions surface as exceptions: a corrupt campaign fixture (fatal,
raised once at load time) and a lookup of a campaign id the catalog does not
hold. Parameter problems (bad thresholds, unknown modes) are coerced with a
warning instead of raised.
"""


class CatalogLoadError(RuntimeError):
    """The campaign fixture is missing, unreadable or fails validation."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load campaign catalog from {source}: {reason}")


class CampaignNotFoundError(KeyError):
    """No campaign with the requested id exists in the catalog."""

    def __init__(self, campaign_id: str):
        self.campaign_id = campaign_id
        super().__init__(campaign_id)

    def __str__(self) -> str:
        return f"Unknown campaign id: {self.campaign_id!r}"
