from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from salonbot.storage import SessionStore


class ChatLockMiddleware(BaseMiddleware):
    """Обрабатывает события одного чата строго по очереди.

    Разные чаты не ждут друг друга. Заодно выбрасывает просроченные сессии.
    """

    def __init__(self, sessions: SessionStore) -> None:
        self.sessions = sessions

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        chat = data.get("event_chat")
        if chat is None:
            return await handler(event, data)
        self.sessions.purge_expired()
        async with self.sessions.locked(chat.id):
            return await handler(event, data)
