"""Service d'estimation du loyer mensuel d'un bien à partir de la carte des loyers."""

import logging
import math
from typing import Optional

from carte_loyers.api.models.schemas import RentEstimateResponse, RentRecord
from carte_loyers.api.services.rent_lookup import RentLookupService

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Arrondi à l'entier le plus proche, .5 vers le haut."""
    return int(math.floor(value + 0.5))


async def find_rent_record(
    service: RentLookupService,
    code_insee: Optional[str] = None,
    ville: Optional[str] = None,
) -> Optional[RentRecord]:
    """Recherche par code INSEE d'abord, puis par nom de commune."""
    record = None
    if code_insee and code_insee.strip():
        record = await service.lookup_by_insee_code(code_insee)
    if record is None and ville and ville.strip():
        record = await service.lookup_by_commune_name(ville)
    return record


def select_rent_per_sqm(record: RentRecord, type_bien: str) -> Optional[float]:
    if type_bien == "maison" and record.loyer_m2_maison:
        return record.loyer_m2_maison
    if type_bien == "appartement" and record.loyer_m2_appartement:
        return record.loyer_m2_appartement
    return record.loyer_m2


def estimate_monthly_rent(loyer_m2: Optional[float], surface: float) -> Optional[int]:
    if loyer_m2 is None:
        return None
    # Indicateurs de la carte : loyers charges comprises, non meublés
    return round_half_up(loyer_m2 * surface) or None


def build_estimate(record: RentRecord, type_bien: str, surface: float) -> RentEstimateResponse:
    loyer_m2 = select_rent_per_sqm(record, type_bien)
    estimate = RentEstimateResponse(
        code_insee=record.code_insee,
        commune=record.commune,
        type_bien=type_bien,
        surface=surface,
        loyer_m2=loyer_m2,
        loyer_mensuel=estimate_monthly_rent(loyer_m2, surface),
        borne_basse=record.borne_basse,
        borne_haute=record.borne_haute,
        niveau_prediction=record.niveau_prediction,
        r2=record.r2,
    )
    logger.debug(f"Estimation {record.commune} : {estimate.loyer_mensuel} €/mois")
    return estimate
