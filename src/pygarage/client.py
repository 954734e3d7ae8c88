"""High-level async client for the garage backend."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pygarage._api import auth as _auth_api
from pygarage._api import vehicles as _vehicles_api
from pygarage._transport import HttpTransport
from pygarage.config import GarageConfig
from pygarage.exceptions import (
    GarageApiError,
    GarageAuthenticationError,
    GarageError,
    GarageLinkInsertError,
    GarageLoadError,
    GarageSessionUnavailableError,
    GarageTransportError,
    GarageUnauthenticatedError,
    GarageUnexpectedError,
    GarageVehicleInsertError,
    LoadStage,
)
from pygarage.models.draft import FormDraft
from pygarage.models.token import AuthToken
from pygarage.models.vehicle import UserVehicleLink, Vehicle
from pygarage.session import Session

_logger = logging.getLogger(__name__)

_BACKEND_ERRORS = (GarageApiError, GarageTransportError)


def _backend_message(exc: GarageError) -> str:
    if isinstance(exc, GarageApiError):
        return exc.message
    return str(exc)


class GarageClient:
    """Async client for the garage tables and the auth service.

    Usage::

        async with GarageClient(config) as client:
            session = await client.login()
            vehicles = await client.load_vehicles(session.user_id)
    """

    def __init__(
        self,
        config: GarageConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None
        self._session: Session | None = None

    @property
    def config(self) -> GarageConfig:
        return self._config

    @property
    def session(self) -> Session | None:
        """The currently held session, without checking expiry."""
        return self._session

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> GarageClient:
        self._config.validate()
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        if self._config.access_token:
            try:
                await self.restore_session(self._config.access_token, self._config.refresh_token)
            except GarageError:
                _logger.warning("Configured access token could not be restored", exc_info=True)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._session = None

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise GarageError("Client not initialized. Use 'async with GarageClient(...) as client:'")
        return self._transport

    def _set_session(self, session: Session | None) -> None:
        self._session = session
        if self._transport is not None:
            self._transport.set_access_token(session.access_token if session is not None else None)

    @staticmethod
    def _session_from_token(token: AuthToken) -> Session:
        ttl = token.expires_in if token.expires_in and token.expires_in > 0 else float("inf")
        return Session(
            user_id=token.user_id,
            access_token=token.access_token,
            refresh_token=token.refresh_token,
            token_type=token.token_type,
            ttl=ttl,
        )

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self, email: str | None = None, password: str | None = None) -> Session:
        """Sign in with email and password (defaults from config)."""
        transport = self._require_transport()
        email = email if email is not None else self._config.email
        password = password if password is not None else self._config.password
        if not email or not password:
            raise GarageAuthenticationError("Email and password are required to log in", code="missing_credentials")
        token = await _auth_api.sign_in_with_password(transport, email, password)
        session = self._session_from_token(token)
        self._set_session(session)
        _logger.debug("Logged in as user %s", session.user_id)
        return session

    async def restore_session(self, access_token: str, refresh_token: str | None = None) -> Session:
        """Adopt an existing access token after checking it with the auth service."""
        transport = self._require_transport()
        user = await _auth_api.fetch_user(transport, access_token)
        session = Session(
            user_id=str(user["id"]),
            access_token=access_token,
            refresh_token=refresh_token,
        )
        self._set_session(session)
        return session

    async def refresh_session(self) -> Session:
        """Exchange the held refresh token for a new session.

        Raises
        ------
        GarageSessionUnavailableError
            If there is no refresh token or the auth service rejects it.
        """
        transport = self._require_transport()
        current = self._session
        if current is None or not current.refresh_token:
            raise GarageSessionUnavailableError("No refresh token available")
        try:
            token = await _auth_api.refresh_grant(transport, current.refresh_token)
        except (GarageAuthenticationError, GarageTransportError) as exc:
            self._set_session(None)
            raise GarageSessionUnavailableError(f"Session refresh failed: {exc}") from exc
        session = self._session_from_token(token)
        self._set_session(session)
        return session

    async def get_session(self) -> Session | None:
        """Return the current session, refreshing it once if it has expired.

        ``None`` means nobody is signed in.  An expired session without a
        refresh token is dropped.
        """
        self._require_transport()
        session = self._session
        if session is None:
            return None
        if not session.is_expired:
            return session
        if not session.can_refresh:
            _logger.debug("Session expired and cannot be refreshed")
            self._set_session(None)
            return None
        return await self.refresh_session()

    async def logout(self) -> None:
        """Revoke the current session (best effort) and forget it locally."""
        transport = self._require_transport()
        session = self._session
        self._set_session(None)
        if session is None:
            return
        try:
            await _auth_api.sign_out(transport, session.access_token)
        except _BACKEND_ERRORS:
            _logger.debug("Remote sign-out failed", exc_info=True)

    # ------------------------------------------------------------------
    # Vehicles
    # ------------------------------------------------------------------

    async def load_vehicles(self, user_id: str) -> list[Vehicle]:
        """Return the vehicles linked to *user_id*.

        Looks up the user's vehicle ids in the link table first; the vehicle
        table is only queried when at least one id was found.

        Raises
        ------
        GarageLoadError
            With ``stage`` telling which of the two queries failed.
        """
        transport = self._require_transport()
        try:
            vehicle_ids = await _vehicles_api.fetch_linked_vehicle_ids(self._config, transport, user_id)
        except _BACKEND_ERRORS as exc:
            raise GarageLoadError(
                f"Error fetching user vehicle mappings: {_backend_message(exc)}",
                stage=LoadStage.LINK_QUERY,
            ) from exc

        if not vehicle_ids:
            _logger.debug("No vehicles linked to user %s", user_id)
            return []

        try:
            return await _vehicles_api.fetch_vehicles_by_id(self._config, transport, vehicle_ids)
        except _BACKEND_ERRORS as exc:
            raise GarageLoadError(
                f"Error fetching vehicles: {_backend_message(exc)}",
                stage=LoadStage.VEHICLE_QUERY,
            ) from exc

    async def add_vehicle(self, draft: FormDraft, owner: str | None) -> Vehicle:
        """Insert a vehicle from *draft* and link it to *owner*.

        The two inserts are not transactional.  When the link insert fails
        the vehicle row stays behind unless
        ``config.compensate_orphaned_vehicles`` is set.

        Raises
        ------
        GarageUnauthenticatedError
            *owner* is ``None``; nothing is written.
        GarageVehicleInsertError
            The vehicle insert failed or returned no row.
        GarageLinkInsertError
            The vehicle was inserted but the link insert failed.
        GarageUnexpectedError
            Any other failure.
        """
        if not owner:
            raise GarageUnauthenticatedError("User not authenticated. Please log in.")

        try:
            transport = self._require_transport()
            try:
                vehicle = await _vehicles_api.insert_vehicle(self._config, transport, draft)
            except _BACKEND_ERRORS as exc:
                raise GarageVehicleInsertError(f"Error adding vehicle: {_backend_message(exc)}") from exc
            if vehicle is None:
                raise GarageVehicleInsertError("Error adding vehicle: no record was returned")

            link = UserVehicleLink(user_id=owner, vehicle_id=vehicle.id)
            try:
                await _vehicles_api.insert_vehicle_link(self._config, transport, link)
            except _BACKEND_ERRORS as exc:
                _logger.error("Vehicle %s inserted but not linked to user %s", vehicle.id, owner)
                if self._config.compensate_orphaned_vehicles:
                    await self._delete_orphan(vehicle)
                raise GarageLinkInsertError(
                    f"Error linking vehicle to user: {_backend_message(exc)}",
                    vehicle=vehicle,
                ) from exc
        except (GarageVehicleInsertError, GarageLinkInsertError):
            raise
        except Exception as exc:
            _logger.exception("Unexpected error adding vehicle")
            raise GarageUnexpectedError("An unexpected error occurred.") from exc

        return vehicle

    async def _delete_orphan(self, vehicle: Vehicle) -> None:
        transport = self._require_transport()
        try:
            await _vehicles_api.delete_vehicle(self._config, transport, vehicle.id)
        except _BACKEND_ERRORS:
            _logger.warning("Could not delete orphaned vehicle %s", vehicle.id, exc_info=True)
        else:
            _logger.info("Deleted orphaned vehicle %s", vehicle.id)
