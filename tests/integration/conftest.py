import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from payslip.config.settings import Settings
from payslip.database.connection import apply_schema, close_pool, get_connection, init_pool

INTEGRATION_USER_ID = 990001


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "payslips_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        probe = psycopg.connect(
            host=test_settings.db_host,
            port=test_settings.db_port,
            dbname=test_settings.db_database,
            user=test_settings.db_username,
            password=test_settings.db_password,
            connect_timeout=3,
        )
        probe.close()
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    init_pool(test_settings)
    try:
        apply_schema()
        yield
    finally:
        close_pool()


@pytest.fixture(autouse=True)
def _db(integration_pool: None) -> None:
    return None


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def user_id() -> Generator[int, None, None]:
    yield INTEGRATION_USER_ID
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM payroll_data WHERE user_id = %s", (INTEGRATION_USER_ID,))
            cur.execute("DELETE FROM code_groups WHERE user_id = %s", (INTEGRATION_USER_ID,))
            cur.execute("DELETE FROM templates WHERE user_id = %s", (INTEGRATION_USER_ID,))
        conn.commit()
