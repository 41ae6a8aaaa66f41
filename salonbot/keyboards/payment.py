from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from salonbot.callbacks import PaymentCB
from salonbot.models import PaymentMethod


def payment_method_keyboard(product_id: int) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(
                    text="💳 Оплатить онлайн",
                    callback_data=PaymentCB(product_id=product_id, method=PaymentMethod.ONLINE).pack(),
                ),
                InlineKeyboardButton(
                    text="💵 Оплата при получении",
                    callback_data=PaymentCB(product_id=product_id, method=PaymentMethod.CASH).pack(),
                ),
            ]
        ]
    )
