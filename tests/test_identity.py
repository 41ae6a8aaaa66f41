"""Tests for the SQL identity store on a temporary SQLite database."""

import pytest
from sqlalchemy import create_engine, text

from salonbot.errors import GatewayUnavailable
from salonbot.services.identity import IdentityStore

SCHEMA = [
    """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        tg_id BIGINT UNIQUE,
        name VARCHAR(255),
        phone VARCHAR(32),
        email VARCHAR(255),
        last_login TIMESTAMP
    )
    """,
    """
    CREATE TABLE admins (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username VARCHAR(64) UNIQUE,
        password_hash VARCHAR(255),
        role VARCHAR(32),
        chat_id VARCHAR(32)
    )
    """,
]


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'salon.db'}")
    with engine.begin() as conn:
        for statement in SCHEMA:
            conn.execute(text(statement))
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return IdentityStore(engine)


@pytest.mark.asyncio
async def test_register_then_lookup(store):
    assert await store.register_user(1001, "Мария") is True
    user = await store.get_user(1001)
    assert user["name"] == "Мария"
    assert user["phone"] is None
    assert await store.get_user(2002) is None


@pytest.mark.asyncio
async def test_repeat_start_refreshes_name_and_keeps_phone(store, engine):
    await store.register_user(1001, "Мария", "+79990000000")
    assert await store.register_user(1001, "Мария Иванова") is False
    user = await store.get_user(1001)
    assert user["name"] == "Мария Иванова"
    assert user["phone"] == "+79990000000"
    with engine.connect() as conn:
        last_login = conn.execute(text("SELECT last_login FROM users WHERE tg_id = 1001")).scalar()
    assert last_login is not None


@pytest.mark.asyncio
async def test_update_phone(store):
    assert await store.update_phone(1001, "+7000") is False
    await store.register_user(1001, "Мария")
    assert await store.update_phone(1001, "+7000") is True
    assert (await store.get_user(1001))["phone"] == "+7000"


@pytest.mark.asyncio
async def test_admin_roster(store, engine):
    with engine.begin() as conn:
        conn.execute(
            text(
                "INSERT INTO admins (username, password_hash, role, chat_id) VALUES "
                "('boss', 'x', 'admin', '500'), ('web', 'x', 'admin', NULL), ('empty', 'x', 'admin', '')"
            )
        )
    assert await store.admin_chat_ids() == [500]
    assert await store.is_admin_chat(500) is True
    assert await store.is_admin_chat(501) is False


@pytest.mark.asyncio
async def test_register_admin_is_idempotent(store):
    assert await store.register_admin(700, 111) is True
    assert await store.register_admin(700, 111) is False
    assert await store.admin_chat_ids() == [700]
    assert await store.is_admin_chat(700) is True


@pytest.mark.asyncio
async def test_register_admin_updates_existing_row(store, engine):
    with engine.begin() as conn:
        conn.execute(text("INSERT INTO admins (username, password_hash, role) VALUES ('admin_111', '', 'admin')"))
    assert await store.register_admin(700, 111) is True
    with engine.connect() as conn:
        count = conn.execute(text("SELECT COUNT(*) FROM admins")).scalar()
    assert count == 1
    assert await store.admin_chat_ids() == [700]


@pytest.mark.asyncio
async def test_database_errors_become_gateway_unavailable(tmp_path):
    store = IdentityStore(create_engine(f"sqlite:///{tmp_path / 'empty.db'}"))
    with pytest.raises(GatewayUnavailable):
        await store.get_user(1)
    with pytest.raises(GatewayUnavailable):
        await store.admin_chat_ids()
    store.dispose()
