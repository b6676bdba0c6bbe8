"""Integration fixtures: a real SQLAlchemy async engine on SQLite (aiosqlite).

Each test gets its own database file. Transactions start with
BEGIN IMMEDIATE so concurrent writers queue on the database lock instead of
failing on lock upgrade.
"""

import pytest_asyncio
from sqlalchemy import event

from src.infrastructure.persistence.database import Database
from src.infrastructure.rate_limit import PostgresAttemptStore


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'auth_attempts.db'}?timeout=30")

    @event.listens_for(db.engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(db.engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    await db.create_all()
    yield db
    await db.drop_all()
    await db.close()


@pytest_asyncio.fixture
async def sql_store(database, logger, clock):
    return PostgresAttemptStore(
        session_factory=database.async_session,
        logger=logger,
        clock=clock,
    )
