# carte_loyers/api/routes/health.py
from typing import Dict

from fastapi import APIRouter, Depends

from carte_loyers.api.cache.store import CacheStore
from carte_loyers.api.dependencies.services import (get_cache_store,
                                                    get_rent_lookup_service)
from carte_loyers.api.services.rent_lookup import RentLookupService

router = APIRouter()


@router.get("", summary="Health simple", tags=["Health"])
async def health_check() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/detailed", summary="Health détaillé", tags=["Health"])
async def health_check_detailed(
    service: RentLookupService = Depends(get_rent_lookup_service),
    store: CacheStore = Depends(get_cache_store),
) -> Dict[str, object]:
    cache_ok = store.ping()
    # L'index est construit à la première recherche : "not_loaded" est normal
    index = {"status": "healthy" if service.is_loaded else "not_loaded"}
    cache = {
        "status": "healthy" if cache_ok else "unhealthy",
        "backend": type(store).__name__,
    }
    return {
        "status": "healthy" if cache_ok else "degraded",
        "components": {"rent_index": index, "geocode_cache": cache},
    }
