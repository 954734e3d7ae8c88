"""Garage page controller.

A :class:`GaragePage` owns the state of one view of the garage page: the
signed-in user, the vehicle list, the add-vehicle draft and the inline
error text.  Build one per page view and drop it afterwards.

Session and load failures are logged and swallowed so the page can always
render (possibly with an empty or stale list).  Submission failures are
kept on :attr:`GaragePage.error` and leave the draft untouched so the user
can retry.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from typing import Any

from pygarage._constants import VEHICLE_ADDED_MESSAGE
from pygarage.client import GarageClient
from pygarage.exceptions import GarageError, GarageSubmitError
from pygarage.models.card import VehicleCard
from pygarage.models.draft import FormDraft
from pygarage.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)

VehicleAddedCallback = Callable[[Vehicle, str], None]


class SubmitState(enum.StrEnum):
    IDLE = "idle"
    SUBMITTING = "submitting"


class GaragePage:
    """State and actions of the garage page."""

    def __init__(
        self,
        client: GarageClient,
        *,
        on_vehicle_added: VehicleAddedCallback | None = None,
    ) -> None:
        self._client = client
        self._on_vehicle_added = on_vehicle_added
        self.user_id: str | None = None
        self.vehicles: list[Vehicle] = []
        self.draft = FormDraft()
        self.error: str | None = None
        self.form_visible = False
        self.state = SubmitState.IDLE

    @property
    def cards(self) -> list[VehicleCard]:
        return [VehicleCard.from_vehicle(vehicle) for vehicle in self.vehicles]

    async def open(self) -> None:
        """Resolve the session and load the user's vehicles."""
        user_id = await self.resolve_session()
        if user_id is None:
            return
        await self.load_vehicles(user_id)

    async def resolve_session(self) -> str | None:
        """Return the signed-in user's id, or ``None``.

        Never raises; failures and a missing session are only logged.
        """
        try:
            session = await self._client.get_session()
        except GarageError as exc:
            _logger.error("Error fetching session: %s", exc)
            return None
        if session is None:
            _logger.warning("No active session found.")
            return None
        self.user_id = session.user_id
        return session.user_id

    async def load_vehicles(self, user_id: str) -> list[Vehicle]:
        """Replace the vehicle list with the vehicles owned by *user_id*.

        On failure the list keeps its previous value and is returned as is.
        """
        try:
            vehicles = await self._client.load_vehicles(user_id)
        except GarageError as exc:
            _logger.error("%s", exc)
            return self.vehicles
        except Exception:
            _logger.exception("Unexpected error fetching vehicles")
            return self.vehicles
        if not vehicles:
            _logger.info("No vehicles found for the user.")
        self.vehicles = list(vehicles)
        return self.vehicles

    def toggle_form(self) -> bool:
        """Show or hide the add-vehicle form; returns the new visibility."""
        self.form_visible = not self.form_visible
        return self.form_visible

    def update_draft(self, name: str, value: Any) -> None:
        self.draft.update(name, value)

    async def submit(self) -> Vehicle | None:
        """Submit the draft as a new vehicle owned by the current user.

        Returns the inserted vehicle, or ``None`` with :attr:`error` set.
        Overlapping calls are not prevented.
        """
        self.error = None
        self.state = SubmitState.SUBMITTING
        try:
            vehicle = await self._client.add_vehicle(self.draft, self.user_id)
        except GarageSubmitError as exc:
            self.error = str(exc)
            return None
        finally:
            self.state = SubmitState.IDLE

        self.vehicles.append(vehicle)
        self.draft.reset()
        self.form_visible = False
        if self._on_vehicle_added is not None:
            self._on_vehicle_added(vehicle, VEHICLE_ADDED_MESSAGE)
        return vehicle
