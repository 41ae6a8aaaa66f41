from typing import Any, Iterable, List

from aiogram.exceptions import TelegramAPIError

from salonbot.errors import DeliveryFailure, GatewayUnavailable
from salonbot.logger import get_logger

log = get_logger(__name__)


async def deliver(bot: Any, chat_id: int, text: str, **kwargs: Any) -> None:
    try:
        await bot.send_message(chat_id, text, **kwargs)
    except TelegramAPIError as exc:
        raise DeliveryFailure(f"chat={chat_id}: {exc}") from exc


class Notifier:
    """Рассылка сообщений всем администраторам салона."""

    def __init__(self, bot: Any, identity: Any, fallback_ids: Iterable[int] = ()) -> None:
        self.bot = bot
        self.identity = identity
        self.fallback_ids = tuple(fallback_ids)

    async def recipients(self) -> List[int]:
        try:
            return await self.identity.admin_chat_ids()
        except GatewayUnavailable:
            log.warning("Admin roster unavailable, using TG_ADMIN_IDS %s", self.fallback_ids)
            return list(self.fallback_ids)

    async def notify_admins(self, text: str) -> int:
        sent = 0
        for chat_id in await self.recipients():
            try:
                await deliver(self.bot, chat_id, text)
            except DeliveryFailure as exc:
                log.error("Admin notification failed: %s", exc)
                continue
            sent += 1
        log.info("Admin notification delivered to %s recipients", sent)
        return sent
