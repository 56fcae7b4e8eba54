"""
Centralized Configuration Management for the Customer Data-Access Layer.

This module is the single source of truth for configuration. It leverages
Pydantic's `BaseSettings` to create a type-safe, testable configuration
system that decouples the persistence code from where its settings come from,
whether that be environment variables or a `.env` file.

Core Features:
- **Type Safety**: All configuration parameters are strongly typed.
- **Environment Variable Loading**: Configuration is loaded primarily from
  environment variables, following the 12-Factor App methodology.
- **`.env` File Support**: For local development a `.env` file in the working
  directory is read as well.
- **Validation**: Pydantic validates every value, and this module adds custom
  validators for ranges and cross-field rules.
- **Singleton Access**: `get_config` returns a lazily created, process-wide
  instance; `reset_config` drops it so tests can reload from a new environment.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CustomerDataConfig(BaseSettings):
    """
    Defines the complete configuration schema for the data-access layer.

    Each attribute corresponds to a configuration parameter that can be set
    via an environment variable named by its `alias`.

    The class is organized into logical sections:
    - Runtime Environment: General application settings.
    - Database Connection: Either a full `DATABASE_URL` or the individual
      PostgreSQL components it is composed from.
    - Engine Tunables: Pool sizing and SQL echo.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # --- Runtime Environment ---
    environment: Literal["local", "test", "dev", "staging", "prod"] = Field(
        default="local",
        alias="CUSTOMER_DATA_ENV",
        description="Deployment environment; tags log lines and gates unsafe settings.",
    )
    version: str = Field(
        default="0.0.0",
        alias="VERSION",
        description="Semantic version of the running service, injected at deploy time.",
    )

    # --- Database Connection ---
    database_url: str | None = Field(
        default=None,
        alias="DATABASE_URL",
        description=(
            "Full SQLAlchemy database URL. When set it takes precedence over the "
            "individual PG* components, e.g. 'sqlite+pysqlite:///:memory:' for tests."
        ),
    )
    pghost: str = Field(
        default="localhost", alias="PGHOST", description="Hostname of the PostgreSQL database."
    )
    pgport: int = Field(
        default=5432, alias="PGPORT", description="Port of the PostgreSQL database."
    )
    pguser: str = Field(
        default="customers", alias="PGUSER", description="Username for the PostgreSQL database."
    )
    pgpassword: str = Field(
        default="customers",
        alias="PGPASSWORD",
        description="Password for the PostgreSQL database.",
    )
    pgdatabase: str = Field(
        default="customers", alias="PGDATABASE", description="Name of the PostgreSQL database."
    )

    # --- Engine Tunables ---
    db_echo: bool = Field(
        default=False, alias="DB_ECHO", description="Log every SQL statement the engine emits."
    )
    db_pool_size: int = Field(
        default=5, alias="DB_POOL_SIZE", description="Connections kept open in the pool."
    )
    db_max_overflow: int = Field(
        default=10,
        alias="DB_MAX_OVERFLOW",
        description="Extra connections that may be opened beyond the pool size.",
    )

    @field_validator("pgport")
    @classmethod
    def validate_pgport(cls, v: int) -> int:
        """
        Ensures that the provided PostgreSQL port is within the valid TCP/IP port range.

        Raises:
            ValueError: If the port is not between 1 and 65535.
        """
        if not (1 <= v <= 65535):
            raise ValueError(f"Invalid PostgreSQL port: {v} (must be 1-65535)")
        return v

    @field_validator("db_pool_size")
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        """Clamps the pool size to a reasonable range (1-50)."""
        return max(1, min(v, 50))

    @field_validator("db_max_overflow")
    @classmethod
    def validate_max_overflow(cls, v: int) -> int:
        """Clamps the pool overflow to a reasonable range (0-100)."""
        return max(0, min(v, 100))

    def model_post_init(self, __context: object) -> None:
        """
        Performs cross-field validation after the model has been loaded.

        Raises:
            ValueError: If a production environment is pointed at SQLite.
        """
        if self.environment == "prod" and self.get_database_url().startswith("sqlite"):
            raise ValueError(
                "SQLite is not allowed in production (CUSTOMER_DATA_ENV=prod). "
                "Configure DATABASE_URL or the PG* variables for PostgreSQL."
            )

    def get_database_url(self, driver: str = "postgresql+psycopg2") -> str:
        """
        Returns the SQLAlchemy database URL.

        `DATABASE_URL` wins when present; otherwise the URL is composed from the
        individual PostgreSQL components.

        Args:
            driver (str): The SQLAlchemy dialect+driver used when composing the URL.

        Returns:
            str: The complete database connection URL.
        """
        if self.database_url:
            return self.database_url
        return f"{driver}://{self.pguser}:{self.pgpassword}@{self.pghost}:{self.pgport}/{self.pgdatabase}"

    def log_summary(self, redact_secrets: bool = True) -> dict[str, str | int | bool]:
        """
        Generates a configuration summary suitable for logging at startup.

        Args:
            redact_secrets (bool): If True (the default), the password embedded in
                the database URL is replaced with '***'.

        Returns:
            dict[str, str | int | bool]: A dictionary of key configuration values.
        """
        url = self.get_database_url()
        return {
            "environment": self.environment,
            "version": self.version,
            "database_url": self._redact_url(url) if redact_secrets else url,
            "db_echo": self.db_echo,
            "db_pool_size": self.db_pool_size,
            "db_max_overflow": self.db_max_overflow,
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """
        Redacts the password from a URL string.

        Args:
            url (str): A URL that may carry `user:password@` credentials.

        Returns:
            str: The URL with the password part replaced by '***'.
        """
        if "@" in url and "://" in url:
            scheme, rest = url.split("://", 1)
            if "@" in rest:
                auth, host = rest.split("@", 1)
                if ":" in auth:
                    user, _ = auth.split(":", 1)
                    return f"{scheme}://{user}:***@{host}"
        return url


_config: CustomerDataConfig | None = None


def get_config() -> CustomerDataConfig:
    """
    Provides access to the global, singleton `CustomerDataConfig` instance.

    Returns:
        CustomerDataConfig: The single, application-wide configuration instance.

    Raises:
        pydantic.ValidationError: If the environment does not match the schema.
    """
    global _config
    if _config is None:
        _config = CustomerDataConfig()
    return _config


def reset_config() -> None:
    """
    Resets the global configuration singleton.

    Intended for tests that change environment variables and need the
    configuration to be reloaded.
    """
    global _config
    _config = None
