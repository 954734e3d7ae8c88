"""Session state for authenticated API calls."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

#: Seconds before the reported expiry at which a session is treated as expired,
#: so a token is never sent in its last moments of validity.
EXPIRY_MARGIN: float = 10.0


class Session(BaseModel):
    """Session state after a successful login, refresh or restore.

    Parameters
    ----------
    user_id : str
        The authenticated user's ID.
    access_token : str
        Bearer token sent with table requests.
    refresh_token : str or None
        Token exchanged for a new session once ``access_token`` expires.
    token_type : str
        Token type reported by the auth service.
    created_at : float
        Monotonic timestamp (``time.monotonic()``) when the session
        was created.  Defaults to *now* if not provided.
    ttl : float
        Time-to-live in seconds (the auth service's ``expires_in``).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    user_id: str
    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    created_at: float = Field(default_factory=time.monotonic)
    ttl: float = float("inf")

    @property
    def is_expired(self) -> bool:
        """Whether the session has exceeded its TTL (minus a small margin)."""
        return (time.monotonic() - self.created_at) >= self.ttl - EXPIRY_MARGIN

    @property
    def can_refresh(self) -> bool:
        return bool(self.refresh_token)

    @property
    def age(self) -> float:
        """Seconds since the session was created."""
        return time.monotonic() - self.created_at
