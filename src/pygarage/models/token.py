"""Authentication token model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AuthToken(BaseModel):
    """Token grant returned by the auth service.

    Parameters
    ----------
    access_token : str
        Bearer token for table requests.
    refresh_token : str or None
        Token used to obtain a new grant.
    token_type : str
        Usually ``"bearer"``.
    expires_in : float or None
        Lifetime of ``access_token`` in seconds.
    user_id : str
        ID of the authenticated user (``user.id`` in the grant).
    raw : dict
        Full decoded grant for access to additional fields.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: float | None = None
    user_id: str
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    @model_validator(mode="before")
    @classmethod
    def _flatten_user(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        user = values.get("user")
        if "user_id" not in merged and isinstance(user, dict) and user.get("id") is not None:
            merged["user_id"] = str(user["id"])
        merged.setdefault("raw", dict(values))
        return merged
