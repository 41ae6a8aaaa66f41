from aiogram import F, Router
from aiogram.types import CallbackQuery, Message

from salonbot import texts
from salonbot.callbacks import CategoryCB, MasterCB, ServiceCB
from salonbot.handlers.common import ack, send_reply
from salonbot.services.orchestrator import SalonFlow


booking_router = Router()


@booking_router.message(F.text.in_(texts.BOOK_LABELS))
async def handle_start_booking(message: Message, flow: SalonFlow) -> None:
    await send_reply(message, await flow.start_booking(message.chat.id))


@booking_router.callback_query(CategoryCB.filter())
async def handle_category(callback: CallbackQuery, callback_data: CategoryCB, flow: SalonFlow) -> None:
    await ack(callback)
    if callback.message is None:
        return
    await send_reply(callback.message, await flow.pick_category(callback.message.chat.id, callback_data.index))


@booking_router.callback_query(ServiceCB.filter())
async def handle_service(callback: CallbackQuery, callback_data: ServiceCB, flow: SalonFlow) -> None:
    await ack(callback)
    if callback.message is None:
        return
    await send_reply(callback.message, await flow.pick_service(callback.message.chat.id, callback_data.service_id))


@booking_router.callback_query(MasterCB.filter())
async def handle_master(callback: CallbackQuery, callback_data: MasterCB, flow: SalonFlow) -> None:
    await ack(callback)
    if callback.message is None:
        return
    await send_reply(callback.message, await flow.pick_master(callback.message.chat.id, callback_data.master_id))


@booking_router.message(F.text, ~F.text.startswith("/"))
async def handle_steps(message: Message, flow: SalonFlow) -> None:
    reply = await flow.handle_text(message.chat.id, message.from_user.id, message.text)
    await send_reply(message, reply)
