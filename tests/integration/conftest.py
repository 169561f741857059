"""
Fixtures for tests that run against a real PostgreSQL server.

The server comes from TEST_DATABASE_URL when set, otherwise a throwaway
container is started with testcontainers. Without either, the tests skip.
"""

import os

import pytest

from db import connection
from db.init_db import create_tables, seed_reference_data

_AUDITED_TABLES = "salary_history, deletion_logs, transfer_history, employees"


def _start_container():
    from testcontainers.postgres import PostgresContainer

    container = PostgresContainer("postgres:16-alpine", driver=None)
    container.start()
    return container, container.get_connection_url()


@pytest.fixture(scope="session")
def database():
    container = None
    url = os.getenv("TEST_DATABASE_URL")
    if not url:
        try:
            container, url = _start_container()
        except Exception as e:
            pytest.skip(f"PostgreSQL not available: {e}")

    connection.init_pool(1, 3, dsn=url)
    create_tables()
    seed_reference_data()
    yield url

    connection.close_pool()
    if container is not None:
        container.stop()


@pytest.fixture(autouse=True)
def clean_tables(database):
    """Empty the employee and audit tables; ids start again at 100."""
    conn = connection.get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(f"TRUNCATE {_AUDITED_TABLES} RESTART IDENTITY CASCADE;")
        conn.commit()
    finally:
        connection.release_connection(conn)
    yield


@pytest.fixture
def query():
    """Run a read-only SQL statement and return all rows."""
    def _query(sql, params=None):
        conn = connection.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                rows = cur.fetchall()
            conn.rollback()
            return rows
        finally:
            connection.release_connection(conn)
    return _query


def pytest_collection_modifyitems(items):
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)
