import logging
import os
from unittest.mock import patch

import pytest

from sql_gateway.config import DEFAULT_SEARCH_LIMIT, DatabaseConfig


class TestDatabaseConfig:
    """Test cases for DatabaseConfig."""

    def test_default_config(self):
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            config = DatabaseConfig()

            assert config.host == "localhost"
            assert config.port == 3306
            assert config.user is None
            assert config.charset == "utf8mb4"
            assert config.table_prefix == ""
            assert config.environment == "dev"
            assert config.default_search_limit == DEFAULT_SEARCH_LIMIT
            assert config.enable_debug_logging is False

    def test_config_from_env_vars(self):
        """Test configuration from environment variables."""
        env_vars = {
            "DB_HOST": "db.internal",
            "DB_PORT": "3307",
            "DB_USER": "app",
            "DB_PASSWORD": "secret",
            "DB_NAME": "inventory",
            "DB_TABLE_PREFIX": "test",
            "DB_DEBUG_LOGGING": "true",
            "ENVIRONMENT": "staging"
        }

        with patch.dict(os.environ, env_vars):
            config = DatabaseConfig.from_env()

            assert config.host == "db.internal"
            assert config.port == 3307
            assert config.user == "app"
            assert config.password == "secret"
            assert config.database == "inventory"
            assert config.table_prefix == "test"
            assert config.enable_debug_logging is True
            assert config.environment == "staging"

    def test_table_name_generation(self):
        """Test table name generation with prefix."""
        config = DatabaseConfig(table_prefix="myapp")
        assert config.get_table_name("users") == "myapp_users"

    def test_table_name_generation_no_prefix(self):
        """Test table name generation without prefix."""
        config = DatabaseConfig(table_prefix="")
        assert config.get_table_name("users") == "users"

    def test_local_development_config(self):
        """Test local development configuration."""
        config = DatabaseConfig.for_local_development()

        assert config.host == "localhost"
        assert config.user == "root"
        assert config.database == "dev"
        assert config.enable_debug_logging is True

    def test_sqlite_config(self):
        """Test SQLite configuration."""
        config = DatabaseConfig.for_sqlite("/tmp/app.db", environment="test")

        assert config.sqlite_path == "/tmp/app.db"
        assert config.environment == "test"

    def test_environment_validation(self):
        """Test environment validation."""
        with pytest.raises(ValueError, match="Environment must be one of"):
            DatabaseConfig(environment="invalid")

    def test_host_validation(self):
        """Test host validation."""
        with pytest.raises(ValueError, match="Database host is required"):
            DatabaseConfig(host="")

    def test_port_validation(self):
        """Test port validation."""
        with pytest.raises(ValueError, match="Port must be between"):
            DatabaseConfig(port=70000)

    def test_search_limit_validation(self):
        """Test default search limit validation."""
        with pytest.raises(ValueError, match="must be positive"):
            DatabaseConfig(default_search_limit=0)

    def test_debug_logging_switch(self):
        """Test that debug logging lowers the package log level."""
        package_logger = logging.getLogger("sql_gateway")
        previous = package_logger.level
        try:
            DatabaseConfig(enable_debug_logging=True).configure_logging()
            assert package_logger.level == logging.DEBUG
        finally:
            package_logger.setLevel(previous)
