from typing import Optional

from aiogram.exceptions import TelegramAPIError
from aiogram.types import CallbackQuery, Message

from salonbot.logger import get_logger
from salonbot.models import Reply

log = get_logger(__name__)


def full_name(user) -> str:
    name = " ".join(filter(None, [user.first_name, user.last_name])).strip()
    return name or user.username or "Пользователь"


async def send_reply(message: Optional[Message], reply: Optional[Reply]) -> bool:
    """Отправляет ответ; ошибка Telegram только логируется."""
    if message is None or reply is None:
        return False
    if reply.photo:
        try:
            await message.answer_photo(reply.photo, caption=reply.text, reply_markup=reply.markup)
            return True
        except TelegramAPIError as exc:
            log.warning("Photo reply to chat=%s failed, sending text: %s", message.chat.id, exc)
    try:
        await message.answer(reply.text, reply_markup=reply.markup)
    except TelegramAPIError as exc:
        log.error("Reply to chat=%s failed: %s", message.chat.id, exc)
        return False
    return True


async def ack(callback: CallbackQuery) -> None:
    try:
        await callback.answer()
    except TelegramAPIError as exc:
        log.warning("Callback answer failed user=%s: %s", callback.from_user.id, exc)
