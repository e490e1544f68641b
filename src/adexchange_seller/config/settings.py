"""Configuration settings for the Ad Exchange Seller client.

Settings are loaded from environment variables and ``.env`` files. The
access token is only read here to build a default credential; token
acquisition and refresh belong to the caller's identity provider.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://www.googleapis.com/adexchangeseller/v1/"

# OAuth2 scopes used by this API
READWRITE_SCOPE = "https://www.googleapis.com/auth/adexchange.seller"
READONLY_SCOPE = "https://www.googleapis.com/auth/adexchange.seller.readonly"

SCOPES = {
    "readwrite": READWRITE_SCOPE,
    "readonly": READONLY_SCOPE,
}


class Settings(BaseSettings):
    """Client settings loaded from environment variables.

    :param base_url: API endpoint base URL, always ending with ``/``
    :type base_url: str
    :param access_token: Bearer credential attached to every request
    :type access_token: Optional[SecretStr]
    :param scope: Capability level the credential was issued for
    :type scope: Literal["readwrite", "readonly"]
    :param user_agent: Extra User-Agent fragment appended to the library token
    :type user_agent: Optional[str]
    :param timeout: Default per-call timeout in seconds
    :type timeout: float
    :param download_dir: Directory for saved report downloads
    :type download_dir: Optional[str]
    :param log_level: Logging level for the application
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",  # Ignore extra fields in .env file
    )

    base_url: str = Field(
        DEFAULT_BASE_URL,
        alias="ADX_SELLER_BASE_URL",
        description="Ad Exchange Seller API base URL",
    )
    access_token: Optional[SecretStr] = Field(
        None,
        alias="ADX_SELLER_ACCESS_TOKEN",
        description="OAuth2 bearer token",
    )
    scope: Literal["readwrite", "readonly"] = Field(
        "readonly",
        alias="ADX_SELLER_SCOPE",
        description="Capability level of the credential",
    )
    user_agent: Optional[str] = Field(
        None,
        alias="ADX_SELLER_USER_AGENT",
        description="Additional User-Agent fragment",
    )
    timeout: float = Field(
        30.0,
        alias="ADX_SELLER_TIMEOUT",
        gt=0,
        description="Default per-call timeout in seconds",
    )
    download_dir: Optional[str] = Field(
        None,
        alias="ADX_SELLER_DOWNLOAD_DIR",
        description="Directory for saved report downloads",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", alias="LOG_LEVEL", description="Logging level"
    )

    @field_validator("base_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Normalise the base URL so relative paths resolve under it.

        :param v: The configured base URL
        :type v: str
        :return: Base URL ending with a slash
        :rtype: str
        """
        return v if v.endswith("/") else v + "/"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @property
    def oauth_scope(self) -> str:
        """Return the OAuth2 scope URL for the configured capability level.

        :return: Scope URL
        :rtype: str
        """
        return SCOPES[self.scope]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance.

    Loaded lazily so that importing the package never reads the
    environment.

    :return: Settings loaded from the environment
    :rtype: Settings
    """
    return Settings()
