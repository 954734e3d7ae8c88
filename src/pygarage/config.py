"""Client configuration for pygarage."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pygarage._constants import LINKS_TABLE, VEHICLES_TABLE
from pygarage.exceptions import GarageConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_first(env: Mapping[str, str], *keys: str) -> str | None:
    for key in keys:
        value = env.get(key)
        if value is not None:
            return value
    return None


@dataclasses.dataclass(frozen=True)
class GarageConfig:
    """Client configuration.

    Parameters
    ----------
    url : str
        Project base URL of the hosted backend
        (e.g. ``"https://abcd.supabase.co"``).
    anon_key : str
        Public (anon) API key sent as ``apikey`` on every request.
    email : str or None
        Account email used by :meth:`GarageClient.login` when no explicit
        credentials are passed.
    password : str or None
        Account password used together with ``email``.
    access_token : str or None
        Existing access token to restore a session from instead of logging in.
    refresh_token : str or None
        Refresh token paired with ``access_token``.
    schema : str
        Database schema exposed by the table API.
    vehicles_table : str
        Table holding vehicle records.
    links_table : str
        Join table recording vehicle ownership.
    compensate_orphaned_vehicles : bool
        Delete a freshly inserted vehicle again when linking it to the owner
        fails.  Off by default; the orphaned row is then left in place.
    api_trace_enabled : bool
        Log redacted request and response bodies at DEBUG level.
    """

    url: str
    anon_key: str
    email: str | None = None
    password: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    schema: str = "public"
    vehicles_table: str = VEHICLES_TABLE
    links_table: str = LINKS_TABLE
    compensate_orphaned_vehicles: bool = False
    api_trace_enabled: bool = False

    @property
    def base_url(self) -> str:
        """Project URL without a trailing slash."""
        return self.url.rstrip("/")

    def validate(self) -> None:
        """Raise :class:`GarageConfigError` when required fields are missing."""
        if not self.url or not self.url.strip():
            raise GarageConfigError("url is required (set GARAGE_URL or SUPABASE_URL)")
        if not self.url.startswith(("http://", "https://")):
            raise GarageConfigError(f"url must be an http(s) URL, got {self.url!r}")
        if not self.anon_key or not self.anon_key.strip():
            raise GarageConfigError("anon_key is required (set GARAGE_ANON_KEY or SUPABASE_ANON_KEY)")

    @classmethod
    def from_env(cls, **overrides: Any) -> GarageConfig:
        """Create configuration from environment variables.

        Reads ``GARAGE_URL`` and ``GARAGE_ANON_KEY`` (falling back to the
        ``SUPABASE_URL`` / ``SUPABASE_ANON_KEY`` names) plus optional
        ``GARAGE_*`` variables. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        GarageConfig
            Populated configuration.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {
            "url": _env_first(env, "GARAGE_URL", "SUPABASE_URL") or "",
            "anon_key": _env_first(env, "GARAGE_ANON_KEY", "SUPABASE_ANON_KEY") or "",
        }

        _ENV_CONFIG_MAP = {
            "GARAGE_EMAIL": "email",
            "GARAGE_PASSWORD": "password",
            "GARAGE_ACCESS_TOKEN": "access_token",
            "GARAGE_REFRESH_TOKEN": "refresh_token",
            "GARAGE_SCHEMA": "schema",
            "GARAGE_VEHICLES_TABLE": "vehicles_table",
            "GARAGE_LINKS_TABLE": "links_table",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "compensate_orphaned_vehicles" not in overrides:
            config_kwargs["compensate_orphaned_vehicles"] = _env_bool(
                env.get("GARAGE_COMPENSATE_ORPHANS"),
                False,
            )

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("GARAGE_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
