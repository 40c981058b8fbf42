import asyncio

import httpx
import pytest

from carte_loyers.api.tests.conftest import (CSV_URL, DATASET_META, DATASET_URL,
                                            SAMPLE_CSV)
from carte_loyers.api.utils.exceptions import UpstreamStatusFailure


@pytest.mark.asyncio
async def test_lookup_by_insee_code_trims_input(rent_service):
    record = await rent_service.lookup_by_insee_code("  69123 ")

    assert record is not None
    assert record.commune == "Lyon"


@pytest.mark.asyncio
async def test_lookup_by_insee_code_unknown(rent_service):
    assert await rent_service.lookup_by_insee_code("99999") is None


@pytest.mark.asyncio
async def test_accents_and_hyphens_do_not_affect_name_lookup(rent_service):
    accented = await rent_service.lookup_by_commune_name("Saint-Étienne")
    plain = await rent_service.lookup_by_commune_name("saint etienne")

    assert accented is not None
    assert accented is plain
    assert accented.code_insee == "42218"


@pytest.mark.asyncio
async def test_lookup_by_commune_name_unknown(rent_service):
    assert await rent_service.lookup_by_commune_name("Atlantis") is None


@pytest.mark.asyncio
async def test_concurrent_first_lookups_share_one_download(rent_service, upstream):
    assert not rent_service.is_loaded

    lyon, paris, etienne = await asyncio.gather(
        rent_service.lookup_by_insee_code("69123"),
        rent_service.lookup_by_commune_name("Paris"),
        rent_service.lookup_by_commune_name("SAINT-ÉTIENNE"),
    )

    assert lyon.commune == "Lyon"
    assert paris.code_insee == "75056"
    assert etienne.code_insee == "42218"
    assert upstream.calls[DATASET_URL] == 1
    assert upstream.calls[CSV_URL] == 1
    assert rent_service.is_loaded


@pytest.mark.asyncio
async def test_failed_build_is_retried_on_next_lookup(rent_service, upstream):
    upstream.json(DATASET_URL, {}, status_code=500)

    with pytest.raises(UpstreamStatusFailure):
        await rent_service.lookup_by_insee_code("69123")
    assert not rent_service.is_loaded

    upstream.json(DATASET_URL, DATASET_META)
    record = await rent_service.lookup_by_insee_code("69123")

    assert record.commune == "Lyon"
    assert upstream.calls[CSV_URL] == 1


def slow_csv_route(upstream, release: asyncio.Event) -> None:
    async def handler(request):
        await release.wait()
        return httpx.Response(200, text=SAMPLE_CSV)

    upstream.route(CSV_URL, handler)


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_shared_build(rent_service, upstream):
    release = asyncio.Event()
    slow_csv_route(upstream, release)

    impatient = asyncio.ensure_future(rent_service.lookup_by_insee_code("69123"))
    patient = asyncio.ensure_future(rent_service.lookup_by_commune_name("Saint-Étienne"))
    await asyncio.sleep(0.05)
    impatient.cancel()
    release.set()

    record = await patient
    assert record.code_insee == "42218"
    with pytest.raises(asyncio.CancelledError):
        await impatient

    later = await rent_service.lookup_by_insee_code("75056")
    assert later.commune == "Paris"
    assert upstream.calls[CSV_URL] == 1
    assert rent_service.is_loaded


@pytest.mark.asyncio
async def test_cancelled_build_is_retried_on_next_lookup(rent_service, upstream):
    release = asyncio.Event()
    slow_csv_route(upstream, release)

    first = asyncio.ensure_future(rent_service.lookup_by_insee_code("69123"))
    await asyncio.sleep(0.05)
    rent_service.builder._build_task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await first
    assert not rent_service.is_loaded

    release.set()
    record = await rent_service.lookup_by_insee_code("69123")

    assert record.commune == "Lyon"
    assert upstream.calls[CSV_URL] == 2
