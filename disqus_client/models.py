"""Data models for credentials, identities and API results."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
)

from disqus_client.exceptions import DisqusError


# Snake-case keys used by the OAuth endpoints, mapped to the stored camel-case keys.
_IDENTITY_KEY_ALIASES = {
    "user_id": "userID",
    "access_token": "accessToken",
    "refresh_token": "refreshToken",
}

# Envelope fields of an API response that never belong to the identity.
_ENVELOPE_KEYS = frozenset({"code"})


class HTTPMethod(str, Enum):
    """HTTP methods understood by the transport."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"
    PATCH = "PATCH"
    PUT = "PUT"


class Credentials(BaseModel):
    """API application credentials."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    public_key: str = Field(..., alias="publicKey", min_length=1)
    secret_key: SecretStr = Field(..., alias="secretKey")
    redirect_uri: str = Field(..., alias="redirectURI", min_length=1)

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: SecretStr) -> SecretStr:
        """Reject empty secret keys."""
        if not v.get_secret_value():
            raise ValueError("secret_key must not be empty")
        return v


class Identity(BaseModel):
    """Authenticated user as returned by the token endpoint.

    Fields beyond the three known ones are kept as extras so the complete
    profile survives a round trip through storage.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    user_id: str = Field(
        ...,
        validation_alias=AliasChoices("userID", "user_id"),
        serialization_alias="userID",
    )
    access_token: str = Field(
        ...,
        validation_alias=AliasChoices("accessToken", "access_token"),
        serialization_alias="accessToken",
    )
    refresh_token: str | None = Field(
        None,
        validation_alias=AliasChoices("refreshToken", "refresh_token"),
        serialization_alias="refreshToken",
    )

    @field_validator("user_id", mode="before")
    @classmethod
    def coerce_user_id(cls, v: Any) -> Any:
        """Accept numeric user ids."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "Identity":
        """Build an identity from a token endpoint response."""
        return cls.model_validate(_normalize_identity_keys(data))

    def merged_with(self, data: dict[str, Any]) -> "Identity":
        """Return a copy updated with the fields of a refresh response."""
        current = self.to_storage()
        current.update(_normalize_identity_keys(data))
        return type(self).model_validate(current)

    def to_storage(self) -> dict[str, Any]:
        """Serialize for persistence."""
        return self.model_dump(by_alias=True, exclude_none=True)


def _normalize_identity_keys(data: dict[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        if key in _ENVELOPE_KEYS:
            continue
        normalized[_IDENTITY_KEY_ALIASES.get(key, key)] = value
    return normalized


@dataclass(frozen=True)
class APIResult:
    """Outcome of a single API call.

    ``success`` is True only when the transport succeeded and the decoded
    body carries ``code == 0``. ``error`` tells transport, parse and API
    failures apart for callers that need it.
    """

    data: dict[str, Any] | None
    success: bool
    error: DisqusError | None = None

    @property
    def response(self) -> Any:
        """The ``response`` payload of a successful call, if any."""
        if self.data is None:
            return None
        return self.data.get("response")

    def raise_for_error(self) -> None:
        """Re-raise the captured error, if the call failed."""
        if self.error is not None:
            raise self.error
