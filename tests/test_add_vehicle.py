from __future__ import annotations

import pytest

from pygarage.client import GarageClient
from pygarage.config import GarageConfig
from pygarage.exceptions import (
    GarageLinkInsertError,
    GarageUnauthenticatedError,
    GarageUnexpectedError,
    GarageVehicleInsertError,
)
from pygarage.models.draft import FormDraft
from pygarage.models.vehicle import VehicleCondition

from conftest import FakeGarageBackend


def _draft() -> FormDraft:
    return FormDraft(
        make="Honda",
        model="Civic",
        year="2020",
        mileage="15000",
        color="Blue",
        vin="1HGCM82633A004352",
        nickname="Blue Bolt",
        condition="good",
    )


@pytest.mark.asyncio
async def test_missing_owner_fails_without_any_write(config: GarageConfig, backend: FakeGarageBackend) -> None:
    async with GarageClient(config) as client:
        with pytest.raises(GarageUnauthenticatedError, match="not authenticated"):
            await client.add_vehicle(_draft(), None)

    assert [c for c in backend.calls if c.method != "GET"] == []
    assert backend.vehicles == []


@pytest.mark.asyncio
async def test_inserts_vehicle_then_link(config: GarageConfig, backend: FakeGarageBackend) -> None:
    async with GarageClient(config) as client:
        vehicle = await client.add_vehicle(_draft(), "user-42")

    assert vehicle.id == 7
    assert vehicle.make == "Honda"
    assert vehicle.year == 2020
    assert vehicle.condition is VehicleCondition.GOOD

    insert_call = backend.calls_to("POST", "/rest/v1/vehicles")[0]
    assert insert_call.body == [_draft().to_row()]
    assert insert_call.headers["prefer"] == "return=representation"
    assert backend.links == [{"user_id": "user-42", "vehicle_id": 7}]


@pytest.mark.asyncio
async def test_draft_values_are_sent_verbatim(config: GarageConfig, backend: FakeGarageBackend) -> None:
    draft = _draft()
    draft.year = "twenty-twenty"

    async with GarageClient(config) as client:
        vehicle = await client.add_vehicle(draft, "user-42")

    assert backend.calls_to("POST", "/rest/v1/vehicles")[0].body[0]["year"] == "twenty-twenty"
    assert vehicle.year is None


@pytest.mark.asyncio
async def test_vehicle_insert_failure(config: GarageConfig, backend: FakeGarageBackend) -> None:
    backend.fail("POST", "/rest/v1/vehicles", 'null value in column "make" violates not-null constraint', "23502")

    async with GarageClient(config) as client:
        with pytest.raises(GarageVehicleInsertError) as exc_info:
            await client.add_vehicle(_draft(), "user-42")

    assert str(exc_info.value).startswith("Error adding vehicle: null value")
    assert backend.calls_to("POST", "/rest/v1/users_vehicles") == []


@pytest.mark.asyncio
async def test_empty_insert_representation_is_an_insert_failure(
    config: GarageConfig, backend: FakeGarageBackend
) -> None:
    backend.return_empty_insert = True

    async with GarageClient(config) as client:
        with pytest.raises(GarageVehicleInsertError):
            await client.add_vehicle(_draft(), "user-42")

    assert backend.calls_to("POST", "/rest/v1/users_vehicles") == []


@pytest.mark.asyncio
async def test_link_failure_leaves_orphaned_vehicle(config: GarageConfig, backend: FakeGarageBackend) -> None:
    backend.fail("POST", "/rest/v1/users_vehicles", "new row violates row-level security policy")

    async with GarageClient(config) as client:
        with pytest.raises(GarageLinkInsertError) as exc_info:
            await client.add_vehicle(_draft(), "user-42")

    assert str(exc_info.value) == "Error linking vehicle to user: new row violates row-level security policy"
    assert exc_info.value.vehicle.id == 7
    assert [v["id"] for v in backend.vehicles] == [7]
    assert backend.calls_to("DELETE", "/rest/v1/vehicles") == []


@pytest.mark.asyncio
async def test_link_failure_deletes_vehicle_when_compensation_enabled(
    config: GarageConfig, backend: FakeGarageBackend
) -> None:
    backend.fail("POST", "/rest/v1/users_vehicles", "new row violates row-level security policy")
    compensating = GarageConfig(
        url=config.url,
        anon_key=config.anon_key,
        compensate_orphaned_vehicles=True,
    )

    async with GarageClient(compensating) as client:
        with pytest.raises(GarageLinkInsertError):
            await client.add_vehicle(_draft(), "user-42")

    assert backend.vehicles == []
    assert backend.calls_to("DELETE", "/rest/v1/vehicles")[0].params == {"id": "eq.7"}


@pytest.mark.asyncio
async def test_failed_compensation_still_raises_link_error(config: GarageConfig, backend: FakeGarageBackend) -> None:
    backend.fail("POST", "/rest/v1/users_vehicles", "link rejected")
    backend.fail("DELETE", "/rest/v1/vehicles", "delete rejected")
    compensating = GarageConfig(url=config.url, anon_key=config.anon_key, compensate_orphaned_vehicles=True)

    async with GarageClient(compensating) as client:
        with pytest.raises(GarageLinkInsertError):
            await client.add_vehicle(_draft(), "user-42")

    assert [v["id"] for v in backend.vehicles] == [7]


@pytest.mark.asyncio
async def test_errors_outside_backend_channel_are_unexpected(
    config: GarageConfig, backend: FakeGarageBackend, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def broken_insert(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr("pygarage._api.vehicles.insert_vehicle", broken_insert)

    async with GarageClient(config) as client:
        with pytest.raises(GarageUnexpectedError, match="unexpected error") as exc_info:
            await client.add_vehicle(_draft(), "user-42")

    assert isinstance(exc_info.value.__cause__, RuntimeError)
