# carte_loyers/api/routes/geocodage.py
from fastapi import APIRouter, Depends, Query

from carte_loyers.api.dependencies.services import get_geocode_resolver
from carte_loyers.api.models.schemas import GeocodeResponse
from carte_loyers.api.utils.geocoding import GeocodeResolver

router = APIRouter()


@router.get("/insee", response_model=GeocodeResponse)
async def get_code_insee(
    nom: str = Query(..., min_length=1),
    code_postal: str = Query(""),
    resolver: GeocodeResolver = Depends(get_geocode_resolver),
) -> GeocodeResponse:
    code = await resolver.resolve_insee_code(nom, code_postal)
    return GeocodeResponse(
        nom=nom, code_postal=code_postal, code_insee=code, trouve=code is not None
    )
