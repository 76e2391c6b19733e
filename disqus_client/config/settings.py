import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from disqus_client.config.logging import LoggingSettings
from disqus_client.exceptions import CredentialsNotConfiguredError
from disqus_client.models import Credentials
from disqus_client.utils.xdg import get_disqus_config_dir


__all__ = ["DisqusSettings", "ConfigurationError", "get_settings"]

DEFAULT_AUTH_BASE_URL = "https://disqus.com/api/oauth/2.0/"
DEFAULT_API_BASE_URL = "https://disqus.com/api/3.0/"
IDENTITY_STORAGE_KEY = "disqusLoggedUser"


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


class HTTPSettings(BaseModel):
    """HTTP client configuration."""

    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds",
    )

    verify: bool = Field(
        default=True,
        description="Verify TLS certificates",
    )


class StorageSettings(BaseModel):
    """Where the authenticated identity is persisted."""

    backend: Literal["file", "keyring", "memory"] = Field(
        default="file",
        description="Identity storage backend",
    )

    path: Path = Field(
        default_factory=lambda: get_disqus_config_dir() / f"{IDENTITY_STORAGE_KEY}.json",
        description="Identity file used by the 'file' backend",
    )

    keyring_service: str = Field(
        default="disqus-client",
        description="Keyring service name used by the 'keyring' backend",
    )


class DisqusSettings(BaseSettings):
    """
    Configuration settings for the Disqus client.

    Settings are loaded from environment variables prefixed with ``DISQUS_``,
    a ``.env`` file, and optionally a TOML file passed to ``from_config``.
    Values passed explicitly take precedence over the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="DISQUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    public_key: str | None = Field(
        default=None,
        description="Application public key (api_key)",
    )

    secret_key: SecretStr | None = Field(
        default=None,
        description="Application secret key (api_secret)",
    )

    redirect_uri: str | None = Field(
        default=None,
        description="Redirect URI registered for the application",
    )

    auth_base_url: str = Field(
        default=DEFAULT_AUTH_BASE_URL,
        description="Base URL of the OAuth 2.0 endpoints",
    )

    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        description="Base URL of the REST API",
    )

    callback_timeout: float = Field(
        default=300.0,
        gt=0,
        description="Seconds to wait for the authorization redirect",
    )

    http: HTTPSettings = Field(
        default_factory=HTTPSettings,
        description="HTTP client configuration settings",
    )

    storage: StorageSettings = Field(
        default_factory=StorageSettings,
        description="Identity storage settings",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    @property
    def has_credentials(self) -> bool:
        return bool(self.public_key and self.secret_key and self.redirect_uri)

    def credentials(self) -> Credentials:
        """Build the application credentials.

        Raises:
            CredentialsNotConfiguredError: If any of the three values is missing
        """
        if (
            not self.public_key
            or self.secret_key is None
            or not self.secret_key.get_secret_value()
            or not self.redirect_uri
        ):
            raise CredentialsNotConfiguredError(
                "DISQUS_PUBLIC_KEY, DISQUS_SECRET_KEY and DISQUS_REDIRECT_URI must be set"
            )
        return Credentials(
            public_key=self.public_key,
            secret_key=self.secret_key,
            redirect_uri=self.redirect_uri,
        )

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file."""
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read TOML config file {toml_path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def from_config(
        cls, config_path: Path | str | None = None, **kwargs: Any
    ) -> "DisqusSettings":
        """Create settings from an optional TOML file plus overrides."""
        config_data: dict[str, Any] = {}
        if config_path is not None:
            config_data = cls.load_toml_config(Path(config_path))
        config_data.update(kwargs)
        return cls(**config_data)


@lru_cache
def get_settings() -> DisqusSettings:
    """Get the process-wide settings, loaded from the environment once."""
    return DisqusSettings()
