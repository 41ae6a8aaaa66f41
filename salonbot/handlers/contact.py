from aiogram import F, Router
from aiogram.types import Message

from salonbot.errors import GatewayUnavailable
from salonbot.handlers.common import full_name, send_reply
from salonbot.logger import get_logger
from salonbot.models import Reply
from salonbot.services.identity import IdentityStore


contact_router = Router()
log = get_logger(__name__)


@contact_router.message(F.contact)
async def handle_contact(message: Message, identity: IdentityStore) -> None:
    contact = message.contact
    if contact.user_id and contact.user_id != message.from_user.id:
        await send_reply(message, Reply("Отправьте, пожалуйста, свой номер кнопкой в меню."))
        return
    try:
        if not await identity.update_phone(message.from_user.id, contact.phone_number):
            # /start ещё не было, заводим пользователя сразу с телефоном
            await identity.register_user(message.from_user.id, full_name(message.from_user), contact.phone_number)
    except GatewayUnavailable:
        await send_reply(message, Reply("Не удалось сохранить телефон. Попробуйте позже."))
        return
    log.info("Phone saved tg_id=%s", message.from_user.id)
    await send_reply(message, Reply("Спасибо! Телефон сохранён."))
