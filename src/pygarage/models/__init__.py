"""Data models for garage rows, drafts and auth grants."""

from pygarage.models._base import GarageBaseModel, GarageEnum, safe_float, safe_int
from pygarage.models.card import VehicleCard
from pygarage.models.draft import FormDraft
from pygarage.models.token import AuthToken
from pygarage.models.vehicle import UserVehicleLink, Vehicle, VehicleCondition

__all__ = [
    "AuthToken",
    "FormDraft",
    "GarageBaseModel",
    "GarageEnum",
    "UserVehicleLink",
    "Vehicle",
    "VehicleCard",
    "VehicleCondition",
    "safe_float",
    "safe_int",
]
