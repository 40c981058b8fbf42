import os
import tempfile
from collections import Counter
from typing import Any, Callable, Dict

# Avant tout import de l'application : pas de fichiers écrits hors du tmp
_TMP = tempfile.mkdtemp(prefix="carte_loyers_tests_")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("CACHE_BACKEND", "memory")
os.environ.setdefault("LOG_DIR", os.path.join(_TMP, "logs"))
os.environ.setdefault("DATA_DIR", os.path.join(_TMP, "data"))

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from carte_loyers.api.cache.store import (GeocodeCache,  # noqa: E402
                                          InMemoryCacheStore)
from carte_loyers.api.config.settings import settings  # noqa: E402
from carte_loyers.api.dependencies.services import (  # noqa: E402
    get_cache_store, get_geocode_resolver, get_rent_lookup_service)
from carte_loyers.api.services.dataset_resolver import \
    DatasetResolver  # noqa: E402
from carte_loyers.api.services.fetcher import ResilientFetcher  # noqa: E402
from carte_loyers.api.services.rent_index import \
    RentIndexBuilder  # noqa: E402
from carte_loyers.api.services.rent_lookup import \
    RentLookupService  # noqa: E402
from carte_loyers.api.utils.geocoding import GeocodeResolver  # noqa: E402

DATASET_URL = settings.dataset_url
CSV_URL = settings.resource_download_url("res-2024")
GEO_URL = settings.GEO_API_URL

SAMPLE_CSV = (
    "id_zone;INSEE_C;LIBGEO;EPCI;DEP;REG;loypredm2;lwr.IPm2;upr.IPm2;TYPPRED;"
    "nbobs_com;nbobs_mail;R2_adj;loypredm2_maison;loypredm2_appartement\n"
    "1;69123;Lyon;200046977;69;84;15,2;12,1;19,0;commune;2500;3000;0,71;0;15,8\n"
    "2;42218;Saint-Étienne;244200770;42;84;9,1;7,2;11,5;commune;900;1000;0,65;10,4;\n"
    "3;01001;L'Abergement-Clémenciat;200069193;01;84;n.d.;8,0;12,3;maille;;12;0,5;;\n"
    "4;;;;;;;;;;;;;;\n"
    "\n"
    "5;75056;Paris;200054781;75;11;30,5;25,0;37,2;commune;15000;16000;0,8;;31,0\n"
)

DATASET_META: Dict[str, Any] = {
    "id": "carte-des-loyers",
    "resources": [
        {
            "id": "notice",
            "format": "pdf",
            "title": "Notice méthodologique",
            "last_modified": "2025-02-01T00:00:00",
        },
        {
            "id": "res-2023",
            "format": "csv",
            "title": "Indicateurs de loyers 2023",
            "last_modified": "2023-05-01T00:00:00",
        },
        {
            "id": "res-2024",
            "format": "CSV",
            "title": "Indicateurs de loyers 2024",
            "last_modified": "2024-12-01T10:00:00+00:00",
        },
        {
            "id": "dico",
            "format": "csv",
            "title": "Dictionnaire des variables",
            "last_modified": "2025-01-01T00:00:00",
        },
    ],
}


class FakeUpstream:
    """Services distants simulés (data.gouv, geo.api) avec compteur d'appels."""

    def __init__(self):
        self.calls: Counter = Counter()
        self.routes: Dict[str, Callable[[httpx.Request], Any]] = {}

    def route(self, url: str, handler: Callable[[httpx.Request], Any]) -> None:
        self.routes[url] = handler

    def json(self, url: str, payload: Any, status_code: int = 200) -> None:
        self.route(url, lambda request: httpx.Response(status_code, json=payload))

    def text(self, url: str, body: str, status_code: int = 200) -> None:
        self.route(url, lambda request: httpx.Response(status_code, text=body))

    def handler(self, request: httpx.Request):
        url = str(request.url).split("?", 1)[0]
        self.calls[url] += 1
        handler = self.routes.get(url)
        if handler is None:
            return httpx.Response(404, json={"message": "Not Found"})
        return handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(self.handler), follow_redirects=True
        )


@pytest.fixture
def upstream() -> FakeUpstream:
    fake = FakeUpstream()
    fake.json(DATASET_URL, DATASET_META)
    fake.text(CSV_URL, SAMPLE_CSV)
    return fake


@pytest.fixture
def fetcher(upstream) -> ResilientFetcher:
    return ResilientFetcher(
        client=upstream.client(), retries=2, timeout_ms=2000, backoff_ms=0
    )


@pytest.fixture
def rent_service(fetcher) -> RentLookupService:
    return RentLookupService(RentIndexBuilder(DatasetResolver(fetcher), fetcher))


@pytest.fixture
def memory_store() -> InMemoryCacheStore:
    return InMemoryCacheStore("test.geocode_cache")


@pytest.fixture
def geocoder(memory_store, fetcher) -> GeocodeResolver:
    return GeocodeResolver(GeocodeCache(memory_store), fetcher, seeds=[])


@pytest.fixture
def client(rent_service, memory_store, geocoder):
    """Client de test FastAPI branché sur les services simulés."""
    from carte_loyers.api.main import app

    app.dependency_overrides[get_rent_lookup_service] = lambda: rent_service
    app.dependency_overrides[get_cache_store] = lambda: memory_store
    app.dependency_overrides[get_geocode_resolver] = lambda: geocoder
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
