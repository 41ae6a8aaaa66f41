from typing import Dict, List

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from salonbot.callbacks import BuyCB, ProductCB

PRODUCTS_LIMIT = 10


def catalog_keyboard(products: List[Dict]) -> InlineKeyboardMarkup:
    rows = [
        [
            InlineKeyboardButton(
                text=f"{product['title']} - {product['price']} руб.",
                callback_data=ProductCB(product_id=product["id"]).pack(),
            )
        ]
        for product in products[:PRODUCTS_LIMIT]
    ]
    return InlineKeyboardMarkup(inline_keyboard=rows)


def buy_keyboard(product_id: int) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[[InlineKeyboardButton(text="🛒 Купить", callback_data=BuyCB(product_id=product_id).pack())]]
    )
