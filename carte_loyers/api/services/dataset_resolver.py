"""
Découverte de la ressource CSV la plus récente du dataset "Carte des loyers".
"""

import logging
import re
from typing import Any, Iterable, List, Optional

import pandas as pd
from pydantic import ValidationError

from carte_loyers.api.config.settings import settings
from carte_loyers.api.models.schemas import DatasetResource
from carte_loyers.api.services.fetcher import ResilientFetcher
from carte_loyers.api.utils.exceptions import NoResourceFound

logger = logging.getLogger(__name__)

EPOCH = pd.Timestamp(0, tz="UTC")


def resource_timestamp(resource: DatasetResource) -> pd.Timestamp:
    """Date de dernière modification, à défaut de création, à défaut l'epoch."""
    value = resource.last_modified or resource.created_at
    if not value:
        return EPOCH
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    return EPOCH if pd.isna(ts) else ts


def parse_resources(raw: Iterable[Any]) -> List[DatasetResource]:
    resources = []
    for item in raw:
        try:
            resources.append(DatasetResource.model_validate(item))
        except ValidationError:
            logger.debug(f"Ressource ignorée (métadonnées invalides): {item!r}")
    return resources


def eligible_csv_resources(
    resources: Iterable[DatasetResource], exclude_pattern: Optional[str] = None
) -> List[DatasetResource]:
    """CSV (casse ignorée) dont le titre n'évoque pas une documentation."""
    excluded = re.compile(
        exclude_pattern or settings.RESOURCE_EXCLUDE_PATTERN, re.IGNORECASE
    )
    return [
        r
        for r in resources
        if r.id
        and (r.format or "").lower() == "csv"
        and not excluded.search(r.title or "")
    ]


def select_latest_csv(
    resources: Iterable[DatasetResource], exclude_pattern: Optional[str] = None
) -> Optional[DatasetResource]:
    candidates = eligible_csv_resources(resources, exclude_pattern)
    if not candidates:
        return None
    return sorted(candidates, key=resource_timestamp, reverse=True)[0]


class DatasetResolver:
    """Résout l'URL de téléchargement du CSV le plus récent d'un dataset."""

    def __init__(
        self,
        fetcher: ResilientFetcher,
        dataset_url: Optional[str] = None,
    ):
        self.fetcher = fetcher
        self.dataset_url = dataset_url or settings.dataset_url

    async def fetch_resources(self) -> List[DatasetResource]:
        response = await self.fetcher.get(self.dataset_url)
        try:
            meta = response.json()
        except ValueError:
            logger.warning(f"Métadonnées non JSON pour {self.dataset_url}")
            return []
        raw = meta.get("resources") if isinstance(meta, dict) else None
        return parse_resources(raw if isinstance(raw, list) else [])

    async def resolve_latest_csv_url(self) -> str:
        chosen = select_latest_csv(await self.fetch_resources())
        if chosen is None:
            raise NoResourceFound(self.dataset_url)

        logger.info(
            f"📄 Ressource retenue : {chosen.title or chosen.id} "
            f"({chosen.last_modified or chosen.created_at or 'date inconnue'})"
        )
        # URL stable data.gouv : la redirection est suivie au téléchargement
        return settings.resource_download_url(chosen.id)
