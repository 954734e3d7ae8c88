"""Card view-model for rendering a vehicle in the garage mosaic."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from pygarage._constants import DEFAULT_IMAGE_URI
from pygarage.models.vehicle import Vehicle, VehicleCondition

_UNKNOWN = "Unknown"


class VehicleCard(BaseModel):
    """Display values for one vehicle, with fallbacks already applied."""

    model_config = ConfigDict(frozen=True)

    key: str
    image_src: str
    image_alt: str
    title: str
    nickname: str
    color: str
    mileage: str
    condition: str

    @property
    def mileage_label(self) -> str:
        return f"{self.mileage} miles"

    @classmethod
    def from_vehicle(cls, vehicle: Vehicle) -> VehicleCard:
        condition = vehicle.condition
        return cls(
            key=str(vehicle.id),
            image_src=vehicle.image_uri or DEFAULT_IMAGE_URI,
            image_alt=f"{vehicle.make} {vehicle.model}",
            title=vehicle.display_name,
            nickname=vehicle.nickname or "N/A",
            color=vehicle.color or _UNKNOWN,
            # A zero reading is shown as unknown, like an empty one.
            mileage=str(vehicle.mileage) if vehicle.mileage else _UNKNOWN,
            condition=_UNKNOWN if condition is VehicleCondition.UNKNOWN else condition.value,
        )
