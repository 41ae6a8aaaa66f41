from aiogram import F, Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from salonbot import texts
from salonbot.errors import GatewayUnavailable, SalonBotError
from salonbot.handlers.common import full_name, send_reply
from salonbot.keyboards.main import main_menu_keyboard
from salonbot.logger import get_logger
from salonbot.models import Reply
from salonbot.services.catalog import CatalogGateway
from salonbot.services.identity import IdentityStore
from salonbot.services.orchestrator import SalonFlow


start_router = Router()
log = get_logger(__name__)


@start_router.message(CommandStart())
async def handle_start(message: Message, flow: SalonFlow, identity: IdentityStore) -> None:
    flow.reset(message.chat.id)
    try:
        created = await identity.register_user(message.from_user.id, full_name(message.from_user))
        if created:
            log.info("New user registered tg_id=%s", message.from_user.id)
    except GatewayUnavailable:
        log.error("User registration skipped tg_id=%s", message.from_user.id)
    await send_reply(message, Reply(texts.start_text(), main_menu_keyboard()))


@start_router.message(Command("help", "помощь"))
@start_router.message(F.text.in_(texts.HELP_LABELS))
async def handle_help(message: Message, flow: SalonFlow) -> None:
    flow.reset(message.chat.id)
    await send_reply(message, Reply(texts.help_text()))


@start_router.message(F.text.in_(texts.CONTACTS_LABELS))
async def handle_contacts(message: Message, flow: SalonFlow) -> None:
    flow.reset(message.chat.id)
    await send_reply(message, Reply(texts.contacts_text()))


@start_router.message(F.text.in_(texts.MY_BOOKINGS_LABELS))
async def handle_my_bookings(
    message: Message, flow: SalonFlow, identity: IdentityStore, catalog: CatalogGateway
) -> None:
    flow.reset(message.chat.id)
    try:
        user = await identity.get_user(message.from_user.id)
        if user is None:
            await send_reply(message, Reply(texts.USER_NOT_FOUND))
            return
        bookings = await catalog.list_bookings(user_id=user["id"])
    except SalonBotError:
        await send_reply(message, Reply("Ошибка загрузки записей."))
        return
    await send_reply(message, Reply(texts.my_bookings_text(bookings)))


@start_router.message(F.text.startswith("/"))
async def handle_unknown_command(message: Message, flow: SalonFlow) -> None:
    flow.reset(message.chat.id)
    await send_reply(message, Reply("Неизвестная команда. Отправьте /help"))
