"""Form draft for a vehicle that has not been submitted yet."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from pygarage.models.vehicle import VehicleCondition


class FormDraft(BaseModel):
    """Mutable form state mirroring the editable vehicle fields.

    Values are kept as the text the user entered and are submitted
    verbatim; ``year`` and ``mileage`` are not checked for being numeric.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        coerce_numbers_to_str=True,
    )

    make: str = ""
    model: str = ""
    year: str = ""
    mileage: str = ""
    color: str = ""
    vin: str = ""
    nickname: str = ""
    condition: str = VehicleCondition.EXCELLENT.value

    def update(self, name: str, value: Any) -> None:
        """Set a single field, as an input change event would."""
        if name not in type(self).model_fields:
            raise KeyError(f"unknown draft field: {name}")
        setattr(self, name, "" if value is None else value)

    def reset(self) -> None:
        """Restore every field to its default."""
        for name, field in type(self).model_fields.items():
            setattr(self, name, field.default)

    def to_row(self) -> dict[str, str]:
        """Column values for the ``vehicles`` insert."""
        return self.model_dump()
