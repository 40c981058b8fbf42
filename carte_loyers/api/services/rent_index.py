"""
Construction de l'index des loyers à partir du CSV "Carte des loyers".

L'index est construit une seule fois par process : les appels concurrents
pendant la première construction attendent la même tâche.
"""

import asyncio
import io
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

import pandas as pd

from carte_loyers.api.config.settings import OPTIONAL_RENT_FIELDS, settings
from carte_loyers.api.models.schemas import RentRecord
from carte_loyers.api.monitoring.prometheus_registry import (
    DATASET_DOWNLOADS_TOTAL, INDEX_BUILD_DURATION, INDEX_SIZE)
from carte_loyers.api.services.dataset_resolver import DatasetResolver
from carte_loyers.api.services.fetcher import ResilientFetcher
from carte_loyers.api.utils.exceptions import (MalformedDatasetError,
                                               MissingColumnsError)
from carte_loyers.api.utils.normalization import (normalize_name, to_label,
                                                  to_number)

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = ("loyer_m2", "borne_basse", "borne_haute", "nb_observations", "r2")
# Renseignés seulement si la cellule est non vide et non nulle
TYPED_RENT_FIELDS = ("loyer_m2_maison", "loyer_m2_appartement")


@dataclass
class RentIndex:
    by_insee: Dict[str, RentRecord] = field(default_factory=dict)
    by_name: Dict[str, RentRecord] = field(default_factory=dict)

    def add(self, record: RentRecord) -> None:
        if record.code_insee:
            self.by_insee[record.code_insee] = record
        name = normalize_name(record.commune)
        if name:
            self.by_name[name] = record


def detect_delimiter(text: str) -> str:
    header = text.lstrip("\ufeff").split("\n", 1)[0]
    return max((";", ",", "\t"), key=header.count)


def read_rent_table(text: str) -> pd.DataFrame:
    """Lit le CSV en texte brut ; seules les erreurs de structure sont fatales."""
    try:
        return pd.read_csv(
            io.StringIO(text.lstrip("\ufeff")),
            sep=detect_delimiter(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            on_bad_lines="skip",
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise MalformedDatasetError(str(exc)) from exc


def record_from_row(row: Mapping[str, str], columns: Mapping[str, str]) -> Optional[RentRecord]:
    def cell(name: str) -> Optional[str]:
        value = row.get(columns.get(name, ""))
        return value if isinstance(value, str) else None

    code_insee = (cell("code_insee") or "").strip()
    commune = (cell("commune") or "").strip()
    if not code_insee and not commune:
        return None

    values = {name: to_number(cell(name)) for name in NUMERIC_FIELDS}
    for name in TYPED_RENT_FIELDS:
        values[name] = to_number(cell(name)) or None

    return RentRecord(
        code_insee=code_insee,
        commune=commune,
        niveau_prediction=to_label(cell("niveau_prediction")),
        **values,
    )


def parse_rent_csv(text: str, columns: Optional[Mapping[str, str]] = None) -> RentIndex:
    columns = dict(columns or settings.RENT_COLUMNS)
    df = read_rent_table(text)
    df.columns = [str(c).strip() for c in df.columns]

    missing = {
        source
        for name, source in columns.items()
        if name not in OPTIONAL_RENT_FIELDS and source not in df.columns
    }
    if missing:
        raise MissingColumnsError(missing)

    index = RentIndex()
    skipped = 0
    for row in df.to_dict(orient="records"):
        record = record_from_row(row, columns)
        if record is None:
            skipped += 1
            continue
        index.add(record)

    logger.info(
        f"🗺️ {len(df)} lignes lues, {skipped} ignorées : "
        f"{len(index.by_insee)} codes INSEE, {len(index.by_name)} noms"
    )
    return index


class RentIndexBuilder:
    """Télécharge et indexe le CSV le plus récent, une fois par process."""

    def __init__(
        self,
        resolver: DatasetResolver,
        fetcher: ResilientFetcher,
        columns: Optional[Mapping[str, str]] = None,
    ):
        self.resolver = resolver
        self.fetcher = fetcher
        self.columns = dict(columns or settings.RENT_COLUMNS)
        self._index: Optional[RentIndex] = None
        self._build_task: Optional[asyncio.Task] = None

    @property
    def is_built(self) -> bool:
        return self._index is not None

    async def build(self) -> RentIndex:
        if self._index is not None:
            return self._index

        task = self._build_task
        if task is None:
            task = self._build_task = asyncio.ensure_future(self._download_and_parse())
            task.add_done_callback(self._on_build_done)
        # L'annulation d'un appelant ne doit pas interrompre la construction partagée
        return await asyncio.shield(task)

    def _on_build_done(self, task: asyncio.Future) -> None:
        if self._build_task is task:
            self._build_task = None
        # Un échec (ou une annulation) n'est pas mémorisé : le prochain appel retente
        if task.cancelled():
            logger.warning("⚠️ Construction de l'index annulée")
            return
        if task.exception() is None:
            self._index = task.result()

    async def _download_and_parse(self) -> RentIndex:
        start = time.perf_counter()
        csv_url = await self.resolver.resolve_latest_csv_url()
        logger.info(f"⬇️ Téléchargement de la carte des loyers : {csv_url}")
        response = await self.fetcher.get(csv_url)
        DATASET_DOWNLOADS_TOTAL.inc()

        index = parse_rent_csv(response.text, self.columns)

        elapsed = time.perf_counter() - start
        INDEX_BUILD_DURATION.observe(elapsed)
        INDEX_SIZE.labels(table="insee").set(len(index.by_insee))
        INDEX_SIZE.labels(table="nom").set(len(index.by_name))
        logger.info(f"✅ Index des loyers prêt en {elapsed:.2f}s")
        return index
