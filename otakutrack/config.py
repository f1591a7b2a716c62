"""Application settings loaded with pydantic-settings."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from otakutrack.paths import ENV_FILE


class AppSettings(BaseSettings):
    """Configuration for the OtakuTrack service.

    All settings are loaded from environment variables with the OTAKU_ prefix.

    :param database_url: Full SQLAlchemy URL. Overrides the individual parts when set.
    :param database_host: PostgreSQL host.
    :param database_port: PostgreSQL port.
    :param database_name: Database name.
    :param database_user: Database user.
    :param database_password: Database password.
    :param jwt_secret: Secret used to sign access tokens.
    :param jwt_algorithm: JWT signing algorithm.
    :param token_expiry_days: Lifetime of an access token in days.
    :param cors_origins: Comma-separated list of allowed frontend origins.
    :param smtp_host: SMTP server for reminder emails.
    :param smtp_port: SMTP port (STARTTLS).
    :param smtp_user: SMTP login; email delivery is skipped when unset.
    :param smtp_password: SMTP password.
    :param smtp_from: From address for reminder emails.
    :param api_version: Version reported by the API and health check.
    """

    model_config = SettingsConfigDict(
        env_prefix="OTAKU_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str | None = Field(default=None, description="Full database URL")
    database_host: str = Field(default="localhost", description="Database host")
    database_port: int = Field(default=5432, description="Database port")
    database_name: str = Field(default="otakutrack", description="Database name")
    database_user: str = Field(default="otakutrack", description="Database user")
    database_password: str = Field(default="", description="Database password")

    jwt_secret: str | None = Field(default=None, description="JWT signing secret")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    token_expiry_days: int = Field(default=30, ge=1, le=365, description="Token lifetime")

    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed origins",
    )

    smtp_host: str = Field(default="smtp.gmail.com", description="SMTP host")
    smtp_port: int = Field(default=587, description="SMTP port")
    smtp_user: str | None = Field(default=None, description="SMTP user")
    smtp_password: str | None = Field(default=None, description="SMTP password")
    smtp_from: str | None = Field(default=None, description="From address")

    api_version: str = Field(default="1.0.0", description="Version reported by the API")

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: str) -> str:
        """Strip whitespace around each configured origin.

        :param v: Raw comma-separated string from environment.
        :returns: The normalised string.
        """
        return ",".join(origin.strip() for origin in v.split(",") if origin.strip())

    @property
    def cors_origin_list(self) -> list[str]:
        """Get the allowed origins as a list."""
        return [origin for origin in self.cors_origins.split(",") if origin]

    @property
    def sqlalchemy_url(self) -> str:
        """Build the database URL from the configured parts."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings.

    Settings are loaded once and cached for the lifetime of the process.

    :returns: Configured AppSettings instance.
    """
    return AppSettings()
