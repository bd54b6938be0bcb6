"""Pytest configuration and fixtures."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.api.deps import get_ledger
from app.core.security import create_access_token, hash_password
from app.db.base import Base
from app.db.models import ParkingLot, User
from app.db.session import get_db
from app.main import app
from app.services.ledger import SlotInventoryLedger


def _database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


def _configure_sqlite(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _configure_locking_sqlite(dbapi_connection, connection_record):
    # Let SQLAlchemy emit BEGIN itself, see _begin_immediate
    dbapi_connection.isolation_level = None
    _configure_sqlite(dbapi_connection, connection_record)


def _begin_immediate(conn):
    conn.exec_driver_sql("BEGIN IMMEDIATE")


@pytest.fixture(scope="function")
async def test_engine(tmp_path):
    """Create a fresh SQLite database for each test."""
    engine = create_async_engine(_database_url(tmp_path))
    event.listen(engine.sync_engine, "connect", _configure_sqlite)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session used by tests to arrange data."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="function")
def ledger(session_factory) -> SlotInventoryLedger:
    return SlotInventoryLedger(session_factory)


@pytest.fixture(scope="function")
async def locking_session_factory(tmp_path, test_engine) -> AsyncGenerator[async_sessionmaker, None]:
    """Sessions on a second engine whose transactions lock the database up front.

    SQLite ignores SELECT ... FOR UPDATE. BEGIN IMMEDIATE takes the write
    lock when the transaction starts, which gives independent ledgers on this
    engine the exclusion PostgreSQL row locks give separate processes.
    """
    engine = create_async_engine(_database_url(tmp_path))
    event.listen(engine.sync_engine, "connect", _configure_locking_sqlite)
    event.listen(engine.sync_engine, "begin", _begin_immediate)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@asynccontextmanager
async def _client_for(session_factory, ledger) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ledger] = lambda: ledger

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def async_client(session_factory, ledger) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client bound to the test database."""
    async with _client_for(session_factory, ledger) as ac:
        yield ac


@pytest.fixture(scope="function")
async def small_pool_client(tmp_path, test_engine) -> AsyncGenerator[AsyncClient, None]:
    """Client whose app shares a two-connection pool with a short checkout timeout."""
    engine = create_async_engine(
        _database_url(tmp_path),
        pool_size=2,
        max_overflow=0,
        pool_timeout=3,
    )
    event.listen(engine.sync_engine, "connect", _configure_sqlite)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with _client_for(factory, SlotInventoryLedger(factory)) as ac:
        yield ac
    await engine.dispose()


@pytest.fixture
def fetch_lot(session_factory):
    """Read a lot's committed state through a fresh session."""

    async def _fetch(lot_id) -> ParkingLot:
        async with session_factory() as session:
            return await session.get(ParkingLot, lot_id)

    return _fetch


@pytest.fixture
def make_lot(db_session: AsyncSession):
    async def _make(total: int = 10, available: int = None, name: str = "Central Garage") -> ParkingLot:
        lot = ParkingLot(
            name=name,
            location="1 Main Street",
            total_capacity=total,
            available_capacity=total if available is None else available,
        )
        db_session.add(lot)
        await db_session.commit()
        await db_session.refresh(lot)
        return lot

    return _make


async def _create_user(db_session: AsyncSession, email: str, role: str) -> User:
    user = User(
        name=email.split("@")[0].title(),
        email=email,
        password_hash=hash_password("secret123"),
        role=role,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def driver(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "driver@example.com", "driver")


@pytest.fixture
async def other_driver(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "other@example.com", "driver")


@pytest.fixture
async def admin(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "admin@example.com", "admin")


def _auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def driver_headers(driver: User) -> Dict[str, str]:
    return _auth_headers(driver)


@pytest.fixture
def other_driver_headers(other_driver: User) -> Dict[str, str]:
    return _auth_headers(other_driver)


@pytest.fixture
def admin_headers(admin: User) -> Dict[str, str]:
    return _auth_headers(admin)
