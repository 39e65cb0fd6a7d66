"""
Configuration settings for sparkcli.

Two models live here:

* ``Configuration`` is the persistent record stored in ``sparkcli.toml``.
  Its TOML keys are the PascalCase aliases (``BaseUrl``, ``ClientId``, ...).
* ``CliSettings`` holds process-level options (log level, timeout, an
  explicit config path) loaded from ``SPARKCLI_*`` environment variables.
"""

import time
from typing import Any, Dict, Optional
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BASE_URL = "https://api.ciscospark.com/v1"
DEFAULT_REDIRECT_URI = "http://files.ducbase.com/code.html"
DEFAULT_SCOPE = (
    "spark:people_read spark:rooms_read spark:rooms_write "
    "spark:messages_read spark:messages_write spark:memberships_read "
    "spark:memberships_write"
)


class Configuration(BaseModel):
    """
    Persistent client configuration.

    Holds the API endpoint, the OAuth application credentials, the pasted
    authorization code, the current token set and the default room.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )

    # Endpoint
    base_url: str = Field(default=DEFAULT_BASE_URL, alias="BaseUrl")

    # OAuth application
    client_id: str = Field(default="", alias="ClientId")
    client_secret: str = Field(default="", alias="ClientSecret")
    auth_code: str = Field(default="", alias="AuthCode")
    redirect_uri: str = Field(default=DEFAULT_REDIRECT_URI, alias="RedirectUri")
    scope: str = Field(default=DEFAULT_SCOPE, alias="Scope")

    # Token set, only written by the login coordinator
    access_token: str = Field(default="", alias="AccessToken")
    access_expires: float = Field(default=0.0, alias="AccessExpires")
    refresh_token: str = Field(default="", alias="RefreshToken")
    refresh_expires: float = Field(default=0.0, alias="RefreshExpires")

    # Convenience pointer used for the "-" room sentinel
    default_room_id: str = Field(default="", alias="DefaultRoomId")

    def apply_defaults(self) -> None:
        """Fill BaseUrl, RedirectUri and Scope when they are empty."""
        if not self.base_url:
            self.base_url = DEFAULT_BASE_URL
        if not self.redirect_uri:
            self.redirect_uri = DEFAULT_REDIRECT_URI
        if not self.scope:
            self.scope = DEFAULT_SCOPE

    def has_client_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def has_access_token(self) -> bool:
        return bool(self.access_token)

    def access_token_usable(self, now: Optional[float] = None) -> bool:
        """True if an access token is present and its expiry lies strictly in the future."""
        if now is None:
            now = time.time()
        return self.has_access_token() and self.access_expires > now

    def refresh_token_usable(self, now: Optional[float] = None) -> bool:
        if now is None:
            now = time.time()
        return bool(self.refresh_token) and self.refresh_expires > now

    def to_toml_dict(self) -> Dict[str, Any]:
        """Serialize to the TOML key layout."""
        return self.model_dump(by_alias=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, masking secrets."""
        data = self.to_toml_dict()
        for key in ("ClientSecret", "AuthCode", "AccessToken", "RefreshToken"):
            if data.get(key):
                data[key] = "***masked***"
        return data


class CliSettings(BaseSettings):
    """
    Process-level settings for the sparkcli command.

    Settings are loaded from multiple sources in order of preference:
    1. Command-line options (applied by the CLI)
    2. Environment variables (prefixed with SPARKCLI_)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="SPARKCLI_",
        case_sensitive=False,
        extra="ignore",
    )

    config_file: Optional[Path] = Field(
        default=None,
        description="Explicit configuration file, bypasses the search path"
    )

    json_output: bool = Field(
        default=False,
        description="Print results as JSON"
    )

    timeout: float = Field(
        default=30.0,
        description="HTTP request timeout in seconds",
        gt=0
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level '{v}'. Valid levels: {', '.join(sorted(valid_levels))}")
        return v_upper


def get_settings(**overrides: Any) -> CliSettings:
    """Get CLI settings, with explicit values taking precedence over the environment."""
    return CliSettings(**{key: value for key, value in overrides.items() if value is not None})
