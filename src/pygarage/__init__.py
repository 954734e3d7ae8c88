"""pygarage - Async Python client for the vehicle garage backend."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pygarage")
except PackageNotFoundError:
    __version__ = "0+local"
from pygarage.client import GarageClient
from pygarage.config import GarageConfig
from pygarage.exceptions import (
    GarageApiError,
    GarageAuthenticationError,
    GarageConfigError,
    GarageError,
    GarageLinkInsertError,
    GarageLoadError,
    GarageSessionUnavailableError,
    GarageSubmitError,
    GarageTransportError,
    GarageUnauthenticatedError,
    GarageUnexpectedError,
    GarageVehicleInsertError,
    LoadStage,
)
from pygarage.garage import GaragePage, SubmitState
from pygarage.models import (
    AuthToken,
    FormDraft,
    UserVehicleLink,
    Vehicle,
    VehicleCard,
    VehicleCondition,
)
from pygarage.session import Session

__all__ = [
    "__version__",
    "AuthToken",
    "FormDraft",
    "GarageApiError",
    "GarageAuthenticationError",
    "GarageClient",
    "GarageConfig",
    "GarageConfigError",
    "GarageError",
    "GarageLinkInsertError",
    "GarageLoadError",
    "GaragePage",
    "GarageSessionUnavailableError",
    "GarageSubmitError",
    "GarageTransportError",
    "GarageUnauthenticatedError",
    "GarageUnexpectedError",
    "GarageVehicleInsertError",
    "LoadStage",
    "Session",
    "SubmitState",
    "UserVehicleLink",
    "Vehicle",
    "VehicleCard",
    "VehicleCondition",
]
