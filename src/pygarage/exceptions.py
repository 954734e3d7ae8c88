"""Custom exception hierarchy for pygarage."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pygarage.models.vehicle import Vehicle


class GarageError(Exception):
    """Base exception for all pygarage errors."""


class GarageConfigError(GarageError):
    """Invalid or missing configuration."""


class GarageTransportError(GarageError):
    """HTTP-level failure (network, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class GarageApiError(GarageError):
    """Backend returned an error body (application-level error).

    ``message`` is the backend's own human-readable message so it can be
    shown to the user verbatim.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
        status_code: int | None = None,
        details: Any = None,
        hint: Any = None,
    ) -> None:
        self.message = message
        self.code = code
        self.endpoint = endpoint
        self.status_code = status_code
        self.details = details
        self.hint = hint
        super().__init__(message)


class GarageAuthenticationError(GarageApiError):
    """Login, refresh or user lookup rejected by the auth service."""


class GarageSessionUnavailableError(GarageError):
    """No usable session could be obtained from the auth service."""


class LoadStage(enum.StrEnum):
    """Which query of the two-step vehicle join failed."""

    LINK_QUERY = "link_query_failed"
    VEHICLE_QUERY = "vehicle_query_failed"


class GarageLoadError(GarageError):
    """Loading the user's vehicles failed."""

    def __init__(self, message: str, *, stage: LoadStage) -> None:
        self.stage = stage
        super().__init__(message)


class GarageSubmitError(GarageError):
    """Base for failures of the add-vehicle form submission.

    ``str(exc)`` is the inline text shown next to the form.
    """


class GarageUnauthenticatedError(GarageSubmitError):
    """Submission attempted without a signed-in owner."""


class GarageVehicleInsertError(GarageSubmitError):
    """The vehicle row could not be inserted."""


class GarageLinkInsertError(GarageSubmitError):
    """The vehicle was inserted but linking it to the owner failed.

    The inserted vehicle is kept on ``vehicle``; unless compensation is
    enabled it still exists in the backend without an owner.
    """

    def __init__(self, message: str, *, vehicle: Vehicle) -> None:
        self.vehicle = vehicle
        super().__init__(message)


class GarageUnexpectedError(GarageSubmitError):
    """Failure raised outside the backend's error channel."""
