import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file if it exists
load_dotenv()

DEFAULT_SEARCH_LIMIT = 999999999999999999


class DatabaseConfig(BaseModel):
    """Configuration for database connections and gateway behaviour."""

    host: str = Field(
        default_factory=lambda: os.getenv("DB_HOST", "localhost"),
        description="Database server host name"
    )

    port: int = Field(
        default_factory=lambda: int(os.getenv("DB_PORT", "3306")),
        description="Database server port"
    )

    user: Optional[str] = Field(
        default_factory=lambda: os.getenv("DB_USER"),
        description="Database user name"
    )

    password: Optional[str] = Field(
        default_factory=lambda: os.getenv("DB_PASSWORD"),
        description="Database password"
    )

    database: Optional[str] = Field(
        default_factory=lambda: os.getenv("DB_NAME"),
        description="Database (schema) name"
    )

    charset: str = Field(
        default="utf8mb4",
        description="Connection character set"
    )

    # Local SQLite database file; ":memory:" for an in-process database
    sqlite_path: Optional[str] = Field(
        default_factory=lambda: os.getenv("DB_SQLITE_PATH"),
        description="Path to a SQLite database file"
    )

    connect_timeout_seconds: float = Field(
        default=30.0,
        description="Connection timeout in seconds"
    )

    # Table configuration
    table_prefix: str = Field(
        default_factory=lambda: os.getenv("DB_TABLE_PREFIX", ""),
        description="Prefix to add to all table names"
    )

    # Environment settings
    environment: str = Field(
        default_factory=lambda: os.getenv("ENVIRONMENT", "dev"),
        description="Current environment (dev, staging, prod, test)"
    )

    # Gateway settings
    default_search_limit: int = Field(
        default=DEFAULT_SEARCH_LIMIT,
        description="Row limit used by search() when the caller supplies none"
    )

    # Logging settings
    enable_debug_logging: bool = Field(
        default_factory=lambda: os.getenv("DB_DEBUG_LOGGING", "false").lower() == "true",
        description="Enable debug logging for gateway operations"
    )

    @field_validator('host')
    @classmethod
    def validate_host(cls, v):
        """Validate database host."""
        if not v:
            raise ValueError("Database host is required")
        return v

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        """Validate database port."""
        if not 0 < v < 65536:
            raise ValueError(f"Port must be between 1 and 65535, got {v}")
        return v

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        valid_environments = ['dev', 'staging', 'prod', 'test']
        if v not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v

    @field_validator('default_search_limit')
    @classmethod
    def validate_default_search_limit(cls, v):
        """Validate search limit."""
        if v <= 0:
            raise ValueError("default_search_limit must be positive")
        return v

    def get_table_name(self, base_name: str) -> str:
        """Get the full table name with prefix.

        Args:
            base_name: Base table name

        Returns:
            Table name with the configured prefix applied
        """
        if self.table_prefix:
            return f"{self.table_prefix}_{base_name}"
        return base_name

    def configure_logging(self) -> None:
        """Apply the debug logging switch to the package logger."""
        if self.enable_debug_logging:
            logging.getLogger("sql_gateway").setLevel(logging.DEBUG)

    @classmethod
    def from_env(cls) -> 'DatabaseConfig':
        """Create configuration from environment variables.

        Returns:
            DatabaseConfig instance
        """
        return cls()

    @classmethod
    def for_local_development(cls) -> 'DatabaseConfig':
        """Create configuration for a local MySQL server.

        Returns:
            DatabaseConfig instance configured for local development
        """
        return cls(
            host="localhost",
            port=3306,
            user="root",
            password="",
            database="dev",
            environment="dev",
            enable_debug_logging=True
        )

    @classmethod
    def for_sqlite(cls, path: str = ":memory:", **kwargs) -> 'DatabaseConfig':
        """Create configuration for a SQLite database.

        Args:
            path: Database file path, ":memory:" by default
            **kwargs: Additional configuration parameters

        Returns:
            DatabaseConfig instance pointing at the SQLite database
        """
        return cls(sqlite_path=path, **kwargs)

    model_config = ConfigDict(
        validate_assignment=True,
        use_enum_values=True
    )
