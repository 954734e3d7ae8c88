"""Vehicle and ownership-link table endpoints.

Tables:
  - users_vehicles {user_id, vehicle_id}
  - vehicles {id, make, model, year, mileage, color, vin, nickname, condition, image_uri}
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pygarage._api._common import delete_rows, eq, in_, insert_rows, select_rows
from pygarage._transport import Transport
from pygarage.config import GarageConfig
from pygarage.models.draft import FormDraft
from pygarage.models.vehicle import UserVehicleLink, Vehicle

_logger = logging.getLogger(__name__)


async def fetch_linked_vehicle_ids(
    config: GarageConfig,
    transport: Transport,
    user_id: str,
) -> list[int | str]:
    """Return the ids of the vehicles linked to *user_id*, in backend order."""
    rows = await select_rows(
        transport,
        config.links_table,
        columns="vehicle_id",
        filters={"user_id": eq(user_id)},
    )
    ids: list[int | str] = []
    seen: set[int | str] = set()
    for row in rows:
        vehicle_id = row.get("vehicle_id")
        if vehicle_id is None or vehicle_id in seen:
            continue
        seen.add(vehicle_id)
        ids.append(vehicle_id)
    return ids


async def fetch_vehicles_by_id(
    config: GarageConfig,
    transport: Transport,
    vehicle_ids: Sequence[int | str],
) -> list[Vehicle]:
    """Fetch the vehicle records whose id is in *vehicle_ids*.

    Callers must not pass an empty sequence; an empty ``in.()`` filter is
    never sent.
    """
    if not vehicle_ids:
        raise ValueError("vehicle_ids must not be empty")
    rows = await select_rows(
        transport,
        config.vehicles_table,
        filters={"id": in_(vehicle_ids)},
    )
    return [Vehicle.model_validate(row) for row in rows]


async def insert_vehicle(
    config: GarageConfig,
    transport: Transport,
    draft: FormDraft,
) -> Vehicle | None:
    """Insert a vehicle built from *draft*; ``None`` when no row comes back."""
    rows = await insert_rows(transport, config.vehicles_table, [draft.to_row()])
    if not rows:
        return None
    if len(rows) > 1:
        _logger.warning("Vehicle insert returned %d rows; using the first", len(rows))
    return Vehicle.model_validate(rows[0])


async def insert_vehicle_link(
    config: GarageConfig,
    transport: Transport,
    link: UserVehicleLink,
) -> None:
    """Record that ``link.user_id`` owns ``link.vehicle_id``."""
    await insert_rows(transport, config.links_table, [link.to_row()], returning=False)


async def delete_vehicle(
    config: GarageConfig,
    transport: Transport,
    vehicle_id: int | str,
) -> None:
    await delete_rows(transport, config.vehicles_table, filters={"id": eq(vehicle_id)})
