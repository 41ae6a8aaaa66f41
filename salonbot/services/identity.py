import asyncio
from typing import Dict, List, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from salonbot.errors import GatewayUnavailable
from salonbot.logger import get_logger

log = get_logger(__name__)


def build_engine(url: str, connect_timeout: int = 10) -> Engine:
    connect_args = {"connect_timeout": connect_timeout} if url.startswith("mysql") else {}
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


class IdentityStore:
    """Пользователи и список администраторов в базе сайта.

    Драйвер блокирующий, поэтому запросы идут в отдельном потоке.
    Ошибки базы превращаются в GatewayUnavailable.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    async def _run(self, fn, *args):
        try:
            return await asyncio.to_thread(fn, *args)
        except SQLAlchemyError as exc:
            log.error("Identity store query %s failed: %s", fn.__name__, exc)
            raise GatewayUnavailable(f"identity store: {exc.__class__.__name__}") from exc

    # --- Пользователи ---
    def _get_user(self, tg_id: int) -> Optional[Dict]:
        with self.engine.connect() as conn:
            row = conn.execute(
                text("SELECT id, tg_id, name, phone, email FROM users WHERE tg_id = :tg_id"),
                {"tg_id": tg_id},
            ).mappings().first()
        return dict(row) if row else None

    def _register_user(self, tg_id: int, name: str, phone: Optional[str]) -> bool:
        with self.engine.begin() as conn:
            exists = conn.execute(
                text("SELECT id FROM users WHERE tg_id = :tg_id"), {"tg_id": tg_id}
            ).first()
            if exists:
                conn.execute(
                    text(
                        "UPDATE users SET name = :name, phone = COALESCE(:phone, phone), "
                        "last_login = CURRENT_TIMESTAMP WHERE tg_id = :tg_id"
                    ),
                    {"name": name, "phone": phone, "tg_id": tg_id},
                )
                return False
            conn.execute(
                text("INSERT INTO users (tg_id, phone, name, email) VALUES (:tg_id, :phone, :name, NULL)"),
                {"tg_id": tg_id, "phone": phone, "name": name},
            )
            return True

    def _update_phone(self, tg_id: int, phone: str) -> bool:
        with self.engine.begin() as conn:
            result = conn.execute(
                text("UPDATE users SET phone = :phone WHERE tg_id = :tg_id"),
                {"phone": phone, "tg_id": tg_id},
            )
            return result.rowcount > 0

    async def get_user(self, tg_id: int) -> Optional[Dict]:
        return await self._run(self._get_user, tg_id)

    async def register_user(self, tg_id: int, name: str, phone: Optional[str] = None) -> bool:
        """Создаёт пользователя или обновляет имя, телефон и время входа. True, если создан."""
        return await self._run(self._register_user, tg_id, name, phone)

    async def update_phone(self, tg_id: int, phone: str) -> bool:
        return await self._run(self._update_phone, tg_id, phone)

    # --- Администраторы ---
    def _admin_chat_ids(self) -> List[int]:
        with self.engine.connect() as conn:
            rows = conn.execute(
                text("SELECT chat_id FROM admins WHERE chat_id IS NOT NULL AND chat_id != ''")
            ).all()
        return [int(row.chat_id) for row in rows if str(row.chat_id).lstrip("-").isdigit()]

    def _is_admin_chat(self, chat_id: int) -> bool:
        with self.engine.connect() as conn:
            row = conn.execute(
                text("SELECT id FROM admins WHERE chat_id = :chat_id"), {"chat_id": str(chat_id)}
            ).first()
        return row is not None

    def _register_admin(self, chat_id: int, user_id: int) -> bool:
        username = f"admin_{user_id}"
        with self.engine.begin() as conn:
            if conn.execute(
                text("SELECT id FROM admins WHERE chat_id = :chat_id"), {"chat_id": str(chat_id)}
            ).first():
                return False
            row = conn.execute(
                text("SELECT id FROM admins WHERE username = :username"), {"username": username}
            ).first()
            if row:
                conn.execute(
                    text("UPDATE admins SET chat_id = :chat_id WHERE id = :id"),
                    {"chat_id": str(chat_id), "id": row.id},
                )
            else:
                conn.execute(
                    text(
                        "INSERT INTO admins (username, password_hash, role, chat_id) "
                        "VALUES (:username, '', 'admin', :chat_id)"
                    ),
                    {"username": username, "chat_id": str(chat_id)},
                )
            return True

    async def admin_chat_ids(self) -> List[int]:
        return await self._run(self._admin_chat_ids)

    async def is_admin_chat(self, chat_id: int) -> bool:
        return await self._run(self._is_admin_chat, chat_id)

    async def register_admin(self, chat_id: int, user_id: int) -> bool:
        """Привязывает чат к ростеру. False, если чат уже зарегистрирован."""
        return await self._run(self._register_admin, chat_id, user_id)

    def dispose(self) -> None:
        self.engine.dispose()
