import asyncio
import time
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import AsyncIterator, Callable, Dict, Optional, Tuple

from salonbot.logger import get_logger
from salonbot.models import Session

log = get_logger(__name__)


class SessionStore:
    """Сессии в памяти по chat id: истекают при простое, у каждого чата свой lock.

    Запись всегда заменяет сессию целиком, изменить её в обход хранилища нельзя.
    """

    def __init__(self, ttl_seconds: float = 30 * 60, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: Dict[int, Session] = {}
        # chat_id -> (lock, сколько корутин держат или ждут его)
        self._locks: Dict[int, Tuple[asyncio.Lock, int]] = {}

    def _expired(self, session: Session) -> bool:
        return self.ttl_seconds > 0 and self._clock() - session.touched_at > self.ttl_seconds

    def get(self, chat_id: int) -> Optional[Session]:
        session = self._sessions.get(chat_id)
        if session is not None and self._expired(session):
            log.info("Session expired chat=%s step=%s", chat_id, session.step)
            del self._sessions[chat_id]
            return None
        return session

    def set(self, chat_id: int, session: Session) -> Session:
        session = replace(session, touched_at=self._clock())
        self._sessions[chat_id] = session
        return session

    def update(self, chat_id: int, fn: Callable[[Session], Session]) -> Optional[Session]:
        current = self.get(chat_id)
        if current is None:
            return None
        return self.set(chat_id, fn(current))

    def delete(self, chat_id: int) -> None:
        self._sessions.pop(chat_id, None)

    @asynccontextmanager
    async def locked(self, chat_id: int) -> AsyncIterator[None]:
        lock, users = self._locks.get(chat_id, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[chat_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[chat_id]
            if users <= 1:
                del self._locks[chat_id]
            else:
                self._locks[chat_id] = (lock, users - 1)

    def purge_expired(self) -> int:
        stale = [chat_id for chat_id, session in self._sessions.items() if self._expired(session)]
        for chat_id in stale:
            del self._sessions[chat_id]
        if stale:
            log.info("Purged %s idle sessions", len(stale))
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)
