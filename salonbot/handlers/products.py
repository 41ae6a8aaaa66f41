from aiogram import F, Router
from aiogram.types import CallbackQuery, Message

from salonbot import texts
from salonbot.callbacks import BuyCB, PaymentCB, ProductCB
from salonbot.handlers.common import ack, send_reply
from salonbot.services.orchestrator import SalonFlow


products_router = Router()


@products_router.message(F.text.in_(texts.PRODUCTS_LABELS))
async def handle_catalog(message: Message, flow: SalonFlow) -> None:
    flow.reset(message.chat.id)
    await send_reply(message, await flow.show_catalog())


@products_router.callback_query(ProductCB.filter())
async def handle_product(callback: CallbackQuery, callback_data: ProductCB, flow: SalonFlow) -> None:
    await ack(callback)
    await send_reply(callback.message, await flow.show_product(callback_data.product_id))


@products_router.callback_query(BuyCB.filter())
async def handle_buy(callback: CallbackQuery, callback_data: BuyCB, flow: SalonFlow) -> None:
    await ack(callback)
    if callback.message is None:
        return
    reply = await flow.start_order(callback.message.chat.id, callback.from_user.id, callback_data.product_id)
    await send_reply(callback.message, reply)


@products_router.callback_query(PaymentCB.filter())
async def handle_payment(callback: CallbackQuery, callback_data: PaymentCB, flow: SalonFlow) -> None:
    await ack(callback)
    if callback.message is None:
        return
    reply = await flow.pay(
        callback.message.chat.id,
        callback.from_user.id,
        callback_data.product_id,
        callback_data.method,
    )
    await send_reply(callback.message, reply)
