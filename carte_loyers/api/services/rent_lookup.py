"""Service de recherche de loyers par code INSEE ou par nom de commune."""

import logging
from typing import Any, Optional

from carte_loyers.api.models.schemas import RentRecord
from carte_loyers.api.monitoring.prometheus_registry import RENT_LOOKUPS_TOTAL
from carte_loyers.api.services.rent_index import RentIndexBuilder
from carte_loyers.api.utils.normalization import normalize_name

logger = logging.getLogger(__name__)


class RentLookupService:
    def __init__(self, builder: RentIndexBuilder):
        self.builder = builder

    @property
    def is_loaded(self) -> bool:
        return self.builder.is_built

    async def lookup_by_insee_code(self, code: Any) -> Optional[RentRecord]:
        key = str(code if code is not None else "").strip()
        index = await self.builder.build()
        return self._count("insee", index.by_insee.get(key))

    async def lookup_by_commune_name(self, name: Any) -> Optional[RentRecord]:
        key = normalize_name(name)
        index = await self.builder.build()
        return self._count("commune", index.by_name.get(key))

    @staticmethod
    def _count(method: str, record: Optional[RentRecord]) -> Optional[RentRecord]:
        RENT_LOOKUPS_TOTAL.labels(
            method=method, result="hit" if record else "miss"
        ).inc()
        return record
