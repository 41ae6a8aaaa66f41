from aiogram.types import KeyboardButton, ReplyKeyboardMarkup

from salonbot import texts


def main_menu_keyboard() -> ReplyKeyboardMarkup:
    keyboard = [
        [KeyboardButton(text=texts.MENU_BOOK), KeyboardButton(text=texts.MENU_MY_BOOKINGS)],
        [KeyboardButton(text=texts.MENU_PRODUCTS), KeyboardButton(text=texts.MENU_CONTACTS)],
        [KeyboardButton(text=texts.MENU_HELP), KeyboardButton(text=texts.MENU_SHARE_PHONE, request_contact=True)],
    ]
    return ReplyKeyboardMarkup(keyboard=keyboard, resize_keyboard=True)
