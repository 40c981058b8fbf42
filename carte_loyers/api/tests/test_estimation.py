import pytest

from carte_loyers.api.models.schemas import RentRecord
from carte_loyers.api.services.estimation_service import (build_estimate,
                                                          estimate_monthly_rent,
                                                          find_rent_record,
                                                          select_rent_per_sqm)

RECORD = RentRecord(
    code_insee="42218",
    commune="Saint-Étienne",
    loyer_m2=9.1,
    loyer_m2_maison=10.4,
)


def test_select_rent_per_sqm_by_property_type():
    assert select_rent_per_sqm(RECORD, "maison") == 10.4
    # Pas d'indicateur appartement : loyer général
    assert select_rent_per_sqm(RECORD, "appartement") == 9.1
    assert select_rent_per_sqm(RECORD, "autre") == 9.1


def test_estimate_monthly_rent():
    assert estimate_monthly_rent(15.8, 45.5) == 719
    assert estimate_monthly_rent(None, 45) is None
    assert estimate_monthly_rent(12.0, 0) is None


def test_build_estimate():
    estimate = build_estimate(RECORD, "maison", 50)

    assert estimate.loyer_m2 == 10.4
    assert estimate.loyer_mensuel == 520
    assert estimate.commune == "Saint-Étienne"


@pytest.mark.asyncio
async def test_find_rent_record_prefers_insee(rent_service):
    record = await find_rent_record(rent_service, code_insee="75056", ville="Lyon")
    assert record.commune == "Paris"


@pytest.mark.asyncio
async def test_find_rent_record_falls_back_to_name(rent_service):
    record = await find_rent_record(rent_service, code_insee="00000", ville="lyon")
    assert record.code_insee == "69123"


@pytest.mark.asyncio
async def test_find_rent_record_without_inputs(rent_service):
    assert await find_rent_record(rent_service, code_insee=" ", ville=None) is None
