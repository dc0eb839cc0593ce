"""
Campaign Catalog Service

Dataset provider for the derivation core. Loads the static, synthetic campaign
fixture exactly once, validates it into frozen CampaignRecord models and hands
out read-only records.

Load lifecycle:
- ``CampaignCatalog.load()`` reads and validates the fixture; any problem
  (unreadable file, bad JSON, missing fields, out-of-range confidence,
  duplicate node ids) raises CatalogLoadError once, at startup.
- ``get_catalog()`` caches the default catalog the same way ``get_settings()``
  caches Settings; tests can call ``get_catalog.cache_clear()``.

Records are never mutated after loading. Services receive them and return
freshly built results.
"""

import json
import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from pydantic import ValidationError

from ctv_attribution.core.config import get_settings
from ctv_attribution.core.exceptions import CampaignNotFoundError, CatalogLoadError
from ctv_attribution.models.schemas import CampaignRecord, CampaignSummary

logger = logging.getLogger(__name__)

BUNDLED_FIXTURE = "campaigns.json"


def _read_fixture_text(path: Optional[Union[str, Path]]) -> str:
    if path is None:
        return resources.files("ctv_attribution.data").joinpath(BUNDLED_FIXTURE).read_text(encoding="utf-8")
    return Path(path).read_text(encoding="utf-8")


class CampaignCatalog:
    """
    Ordered, read-only collection of campaign records.

    Catalog order is meaningful: share links address campaigns by index.
    """

    def __init__(self, records: Sequence[CampaignRecord]):
        self._records = tuple(records)
        self._by_id: Dict[str, CampaignRecord] = {}
        for record in self._records:
            if record.id in self._by_id:
                raise CatalogLoadError("catalog", f"duplicate campaign id {record.id!r}")
            self._by_id[record.id] = record

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "CampaignCatalog":
        """
        Load and validate a campaign fixture.

        Args:
            path: JSON fixture path. None uses the bundled fixture.

        Returns:
            A validated CampaignCatalog.

        Raises:
            CatalogLoadError: If the fixture cannot be read or fails validation.
        """
        source = str(path) if path is not None else f"<bundled {BUNDLED_FIXTURE}>"
        try:
            text = _read_fixture_text(path)
        except OSError as e:
            raise CatalogLoadError(source, str(e)) from e

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise CatalogLoadError(source, f"invalid JSON: {e}") from e

        catalog = cls.from_payload(payload, source=source)
        logger.info(f"Loaded {len(catalog)} campaigns from {source}")
        return catalog

    @classmethod
    def from_payload(cls, payload: Any, source: str = "<payload>") -> "CampaignCatalog":
        """
        Validate an already-parsed fixture payload.

        Accepts either ``{"campaigns": [...]}`` or a bare list of campaigns.
        """
        if isinstance(payload, dict):
            items = payload.get("campaigns")
        else:
            items = payload
        if not isinstance(items, list):
            raise CatalogLoadError(source, "expected a list of campaigns")

        records: List[CampaignRecord] = []
        for position, item in enumerate(items):
            try:
                records.append(CampaignRecord.model_validate(item))
            except ValidationError as e:
                raise CatalogLoadError(source, f"campaign #{position} is invalid: {e}") from e

        return cls(records)

    # =========================================================================
    # Read API
    # =========================================================================

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[CampaignRecord]:
        return iter(self._records)

    @property
    def records(self) -> tuple:
        return self._records

    def list_campaigns(self) -> List[CampaignSummary]:
        return [
            CampaignSummary(
                index=index,
                id=record.id,
                name=record.name,
                impressions=record.exposed_group.impressions,
                conversions=record.exposed_group.conversions,
            )
            for index, record in enumerate(self._records)
        ]

    def get_campaign(self, campaign_id: str) -> CampaignRecord:
        """
        Look up a campaign by id.

        Raises:
            CampaignNotFoundError: If no campaign has this id.
        """
        try:
            return self._by_id[campaign_id]
        except KeyError:
            raise CampaignNotFoundError(campaign_id) from None

    def get_campaign_by_index(self, index: int) -> CampaignRecord:
        """Campaign at ``index``; an out-of-range index falls back to the first campaign."""
        if not self._records:
            raise CampaignNotFoundError(f"#{index}")
        if not 0 <= index < len(self._records):
            logger.warning(f"Campaign index {index} out of range, using 0")
            index = 0
        return self._records[index]

    def index_of(self, campaign_id: str) -> int:
        for index, record in enumerate(self._records):
            if record.id == campaign_id:
                return index
        raise CampaignNotFoundError(campaign_id)


@lru_cache()
def get_catalog() -> CampaignCatalog:
    """
    Get the default campaign catalog singleton.

    Loads ``Settings.campaign_data_path`` when set, otherwise the bundled
    fixture.

    Raises:
        CatalogLoadError: If the configured fixture is corrupt.
    """
    settings = get_settings()
    return CampaignCatalog.load(settings.campaign_data_path)
