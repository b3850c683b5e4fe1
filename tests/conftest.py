"""
Test configuration and fixtures for the SQL table gateway.

Provides an in-memory SQLite database with a sequential-key table and a
UUID-key table, plus gateways over both.
"""

import sys
from pathlib import Path

# Add parent directory to path so we can import sql_gateway
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from unittest.mock import Mock

from sql_gateway import DatabaseConfig, SQLiteDriver, TableGateway, UuidKeyCodec
from sql_gateway.drivers import DatabaseDriver, QueryResult
from tests.helpers import CountingDriver, Document, User


USERS_DDL = """
    CREATE TABLE `users` (
        `id` INTEGER PRIMARY KEY AUTOINCREMENT,
        `name` TEXT NOT NULL DEFAULT '',
        `status` TEXT,
        `score` INTEGER NOT NULL DEFAULT 0
    )
"""

DOCUMENTS_DDL = """
    CREATE TABLE `documents` (
        `uuid` BLOB PRIMARY KEY,
        `title` TEXT
    )
"""


@pytest.fixture
def sqlite_config():
    """Configuration for an in-memory SQLite database."""
    return DatabaseConfig.for_sqlite(":memory:", environment="test")


@pytest.fixture
def sqlite_driver(sqlite_config):
    """SQLite driver with the test tables created."""
    driver = SQLiteDriver.from_config(sqlite_config)
    driver.execute(USERS_DDL)
    driver.execute(DOCUMENTS_DDL)
    yield driver
    driver.close()


@pytest.fixture
def counting_driver(sqlite_driver):
    """SQLite driver that records executed statements."""
    return CountingDriver(sqlite_driver)


@pytest.fixture
def users(counting_driver):
    """Sequential-key gateway over the users table."""
    return TableGateway(counting_driver, "users", User)


@pytest.fixture
def documents(counting_driver):
    """UUID-key gateway over the documents table."""
    return TableGateway(counting_driver, "documents", Document, UuidKeyCodec())


@pytest.fixture
def mock_driver():
    """Mock driver with real SQLite escaping and backtick quoting."""
    escaper = SQLiteDriver()
    driver = Mock(spec=DatabaseDriver)
    driver.escape.side_effect = escaper.escape
    driver.quote_identifier.side_effect = escaper.quote_identifier
    driver.truncate_statement.side_effect = lambda table: f"TRUNCATE `{table}`"
    driver.insert_defaults_statement.side_effect = lambda table: f"INSERT INTO `{table}` () VALUES ()"
    driver.execute.return_value = QueryResult()
    return driver


# Sample Data Fixtures

@pytest.fixture
def sample_users():
    """Rows for the users table."""
    return [
        {"name": "alice", "status": "a", "score": 10},
        {"name": "bob", "status": "b", "score": 20},
        {"name": "carol", "status": "c", "score": 30},
    ]
