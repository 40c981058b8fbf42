# carte_loyers/api/routes/loyers.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from carte_loyers.api.dependencies.services import get_rent_lookup_service
from carte_loyers.api.models.schemas import (RentEstimateResponse, RentRecord,
                                             TypeBien)
from carte_loyers.api.services.estimation_service import (build_estimate,
                                                          find_rent_record)
from carte_loyers.api.services.rent_lookup import RentLookupService
from carte_loyers.api.utils.exceptions import RentRecordNotFound

router = APIRouter()


@router.get("/insee/{code_insee}", response_model=RentRecord)
async def get_loyer_par_insee(
    code_insee: str,
    service: RentLookupService = Depends(get_rent_lookup_service),
) -> RentRecord:
    record = await service.lookup_by_insee_code(code_insee)
    if record is None:
        raise RentRecordNotFound(code_insee)
    return record


@router.get("/commune", response_model=RentRecord)
async def get_loyer_par_commune(
    nom: str = Query(..., min_length=1, description="Nom de la commune"),
    service: RentLookupService = Depends(get_rent_lookup_service),
) -> RentRecord:
    record = await service.lookup_by_commune_name(nom)
    if record is None:
        raise RentRecordNotFound(nom)
    return record


@router.get("/estimation", response_model=RentEstimateResponse)
async def estimer_loyer(
    code_insee: Optional[str] = None,
    ville: Optional[str] = None,
    type_bien: TypeBien = "appartement",
    surface: float = Query(0, ge=0, description="Surface habitable en m²"),
    service: RentLookupService = Depends(get_rent_lookup_service),
) -> RentEstimateResponse:
    """Loyer mensuel estimé : code INSEE prioritaire, nom de commune sinon."""
    record = await find_rent_record(service, code_insee, ville)
    if record is None:
        raise RentRecordNotFound(code_insee or ville or "")
    return build_estimate(record, type_bien, surface)
