"""Vehicle and ownership-link models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from pygarage.models._base import GarageBaseModel, GarageEnum, safe_int, safe_str


class VehicleCondition(GarageEnum):
    """Self-reported vehicle condition."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    UNKNOWN = "unknown"


class Vehicle(GarageBaseModel):
    """A vehicle record from the ``vehicles`` table.

    ``id`` is assigned by the backend on insert.  ``year`` and ``mileage``
    are stored as whatever the form submitted, so they are coerced
    leniently and become ``None`` when the stored value is not numeric.
    """

    id: int | str
    make: str = ""
    model: str = ""
    year: int | None = None
    mileage: int | None = None
    color: str = ""
    vin: str = ""
    nickname: str = ""
    condition: VehicleCondition = VehicleCondition.UNKNOWN
    image_uri: str | None = None

    @property
    def display_name(self) -> str:
        """``"<year> <make> <model>"`` with missing parts left out."""
        parts = [str(self.year) if self.year is not None else "", self.make, self.model]
        return " ".join(part for part in parts if part)

    @field_validator("make", "model", "color", "vin", "nickname", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return safe_str(value)

    @field_validator("year", "mileage", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("condition", mode="before")
    @classmethod
    def _coerce_condition(cls, value: Any) -> VehicleCondition:
        if value is None:
            return VehicleCondition.UNKNOWN
        return VehicleCondition(str(value))

    @field_validator("image_uri", mode="before")
    @classmethod
    def _blank_image_is_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class UserVehicleLink(BaseModel):
    """A row of the ``users_vehicles`` join table."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    user_id: str
    vehicle_id: int | str

    def to_row(self) -> dict[str, Any]:
        return self.model_dump()
