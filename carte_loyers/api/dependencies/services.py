# carte_loyers/api/dependencies/services.py
"""Instances partagées des services, injectées dans les routes via Depends."""

from functools import lru_cache

from carte_loyers.api.cache.store import (CacheStore, GeocodeCache,
                                          create_cache_store)
from carte_loyers.api.services.dataset_resolver import DatasetResolver
from carte_loyers.api.services.fetcher import ResilientFetcher
from carte_loyers.api.services.rent_index import RentIndexBuilder
from carte_loyers.api.services.rent_lookup import RentLookupService
from carte_loyers.api.utils.geocoding import GeocodeResolver


@lru_cache
def get_fetcher() -> ResilientFetcher:
    return ResilientFetcher()


@lru_cache
def get_cache_store() -> CacheStore:
    return create_cache_store()


@lru_cache
def get_rent_lookup_service() -> RentLookupService:
    fetcher = get_fetcher()
    return RentLookupService(RentIndexBuilder(DatasetResolver(fetcher), fetcher))


@lru_cache
def get_geocode_resolver() -> GeocodeResolver:
    return GeocodeResolver(GeocodeCache(get_cache_store()), get_fetcher())
