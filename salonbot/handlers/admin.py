from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from salonbot import texts
from salonbot.config import settings
from salonbot.errors import GatewayUnavailable, SalonBotError
from salonbot.handlers.common import send_reply
from salonbot.logger import get_logger
from salonbot.models import Reply
from salonbot.services.catalog import CatalogGateway
from salonbot.services.identity import IdentityStore
from salonbot.services.orchestrator import SalonFlow


admin_router = Router()
log = get_logger(__name__)


def is_super_admin(user_id: int) -> bool:
    return user_id in settings.ADMIN_IDS


async def is_admin(identity: IdentityStore, user_id: int, chat_id: int) -> bool:
    if is_super_admin(user_id):
        return True
    try:
        return await identity.is_admin_chat(chat_id)
    except GatewayUnavailable:
        return False


@admin_router.message(Command("register_admin"))
async def handle_register_admin(message: Message, flow: SalonFlow, identity: IdentityStore) -> None:
    flow.reset(message.chat.id)
    if not await is_admin(identity, message.from_user.id, message.chat.id):
        log.warning("Admin registration denied user=%s", message.from_user.id)
        await send_reply(message, Reply("❌ У вас нет прав для регистрации администратора."))
        return
    try:
        created = await identity.register_admin(message.chat.id, message.from_user.id)
    except GatewayUnavailable:
        await send_reply(message, Reply("❌ Ошибка регистрации. Обратитесь к разработчику."))
        return
    if not created:
        await send_reply(message, Reply("✅ Вы уже зарегистрированы как администратор."))
        return
    log.info("Admin registered user=%s chat=%s", message.from_user.id, message.chat.id)
    await send_reply(
        message,
        Reply(
            "✅ Вы успешно зарегистрированы как администратор!\n\n"
            "Теперь вы будете получать уведомления о новых записях и заказах."
        ),
    )


@admin_router.message(Command("list_bookings"))
async def handle_list_bookings(
    message: Message, flow: SalonFlow, identity: IdentityStore, catalog: CatalogGateway
) -> None:
    flow.reset(message.chat.id)
    if not await is_admin(identity, message.from_user.id, message.chat.id):
        await send_reply(message, Reply(texts.ACCESS_DENIED))
        return
    try:
        bookings = await catalog.list_bookings(status="pending")
    except SalonBotError:
        await send_reply(message, Reply("Ошибка загрузки записей."))
        return
    await send_reply(message, Reply(texts.pending_bookings_text(bookings)))
