"""
Module pour le géocodage commune + code postal -> code INSEE.

Ordre de résolution : cache persistant, liste locale de villes, puis
geo.api.gouv.fr. Le géocodage distant est best-effort : ses erreurs
deviennent "non trouvé" à la frontière publique.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from carte_loyers.api.cache.store import GeocodeCache
from carte_loyers.api.config.settings import settings
from carte_loyers.api.models.schemas import CommuneCandidate
from carte_loyers.api.monitoring.prometheus_registry import \
    GEOCODE_RESOLUTIONS_TOTAL
from carte_loyers.api.services.fetcher import ResilientFetcher
from carte_loyers.api.utils.exceptions import (DownloadFailed,
                                               GeocodeLookupFailure)
from carte_loyers.api.utils.normalization import normalize_name
from carte_loyers.api.utils.villes import VILLES_SEED

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    code: str


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class GeocodeError:
    reason: str


GeocodeResult = Union[Found, NotFound, GeocodeError]


def score_candidate(candidate: CommuneCandidate, nom: str, code_postal: str) -> int:
    """+2 si le code postal figure dans la commune, +1 si le nom normalisé concorde."""
    score = 0
    if code_postal in candidate.codes_postaux:
        score += 2
    if normalize_name(candidate.nom) == normalize_name(nom):
        score += 1
    return score


def pick_candidate(
    candidates: Sequence[CommuneCandidate], nom: str, code_postal: str
) -> Optional[str]:
    if not candidates:
        return None
    best, best_score = candidates[0], 0
    for candidate in candidates:
        score = score_candidate(candidate, nom, code_postal)
        if score > best_score:
            best, best_score = candidate, score
    # Aucun critère satisfait : on garde le premier résultat (le plus peuplé)
    return best.code


def find_seed_code(
    nom: str, code_postal: str, seeds: Iterable[Dict[str, str]]
) -> Optional[str]:
    wanted = nom.lower()
    for ville in seeds:
        if ville["nom"].lower() != wanted:
            continue
        if code_postal and ville.get("code_postal") != code_postal:
            continue
        return ville["code_insee"]
    return None


class GeocodeResolver:
    def __init__(
        self,
        cache: GeocodeCache,
        fetcher: ResilientFetcher,
        seeds: Optional[Iterable[Dict[str, str]]] = None,
        geo_api_url: Optional[str] = None,
        limit: Optional[int] = None,
    ):
        self.cache = cache
        self.fetcher = fetcher
        self.seeds = list(VILLES_SEED if seeds is None else seeds)
        self.geo_api_url = geo_api_url or settings.GEO_API_URL
        self.limit = limit or settings.GEOCODE_CANDIDATES_LIMIT

    async def resolve_insee_code(self, nom: str, code_postal: str) -> Optional[str]:
        result = await self.resolve(nom, code_postal)
        return result.code if isinstance(result, Found) else None

    async def resolve(self, nom: str, code_postal: str) -> GeocodeResult:
        nom = (nom or "").strip()
        code_postal = (code_postal or "").strip()
        key = GeocodeCache.make_key(nom, code_postal)

        cached = self.cache.get(key)
        if cached:
            GEOCODE_RESOLUTIONS_TOTAL.labels(source="cache").inc()
            return Found(cached)

        source = "seed"
        code = find_seed_code(nom, code_postal, self.seeds)
        if code is None:
            if not (nom and code_postal):
                GEOCODE_RESOLUTIONS_TOTAL.labels(source="not_found").inc()
                return NotFound()
            result = await self._resolve_remote(nom, code_postal)
            if not isinstance(result, Found):
                GEOCODE_RESOLUTIONS_TOTAL.labels(
                    source="error" if isinstance(result, GeocodeError) else "not_found"
                ).inc()
                return result
            source, code = "api", result.code

        self.cache.put(key, code)
        GEOCODE_RESOLUTIONS_TOTAL.labels(source=source).inc()
        logger.info(f"📍 {key} -> {code} ({source})")
        return Found(code)

    async def _resolve_remote(self, nom: str, code_postal: str) -> GeocodeResult:
        try:
            candidates = await self.fetch_candidates(nom, code_postal)
        except GeocodeLookupFailure as e:
            logger.warning(e.detail)
            return GeocodeError(e.detail)

        code = pick_candidate(candidates, nom, code_postal)
        return Found(code) if code else NotFound()

    async def fetch_candidates(self, nom: str, code_postal: str) -> List[CommuneCandidate]:
        params: Dict[str, Any] = {
            "nom": nom,
            "codePostal": code_postal,
            "fields": "code,nom,codesPostaux",
            "boost": "population",
            "limit": self.limit,
        }
        try:
            response = await self.fetcher.get(self.geo_api_url, params=params)
            payload = response.json()
            if not isinstance(payload, list):
                raise ValueError(f"liste attendue, reçu {type(payload).__name__}")
            return [CommuneCandidate.model_validate(item) for item in payload]
        except DownloadFailed as e:
            raise GeocodeLookupFailure(e.detail) from e
        except ValueError as e:
            raise GeocodeLookupFailure(f"réponse illisible: {e}") from e
