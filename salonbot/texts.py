from typing import Dict, List, Optional

from salonbot.models import PaymentMethod
from salonbot.services.booking import format_datetime, format_price, parse_stock

MENU_BOOK = "📅 Записаться"
MENU_MY_BOOKINGS = "📋 Мои записи"
MENU_PRODUCTS = "🛍️ Продукция"
MENU_CONTACTS = "ℹ️ Контакты"
MENU_HELP = "❓ Помощь"
MENU_SHARE_PHONE = "📞 Отправить телефон"

BOOK_LABELS = {MENU_BOOK, "Записаться"}
MY_BOOKINGS_LABELS = {MENU_MY_BOOKINGS, "Мои записи"}
PRODUCTS_LABELS = {MENU_PRODUCTS, "Продукция"}
CONTACTS_LABELS = {MENU_CONTACTS, "Контакты"}
HELP_LABELS = {MENU_HELP}

BOOKING_STATUS = {
    "pending": "⏳ Ожидает",
    "confirmed": "✅ Подтверждена",
    "completed": "✔️ Завершена",
    "cancelled": "❌ Отменена",
}

LIST_LIMIT = 10

GENERIC_ERROR = "Ошибка. Попробуйте позже."
USER_NOT_FOUND = "Пользователь не найден. Используйте /start"
ACCESS_DENIED = "Доступ запрещен."


def start_text() -> str:
    return "👋 Добро пожаловать в салон красоты Crazy!\n\nВыберите действие:"


def help_text() -> str:
    return (
        "📖 Доступные команды:\n\n"
        "/start - Главное меню\n"
        f"{MENU_BOOK} - Записаться на услугу\n"
        f"{MENU_MY_BOOKINGS} - Посмотреть свои записи\n"
        f"{MENU_PRODUCTS} - Каталог продукции\n"
        f"{MENU_CONTACTS} - Контактная информация\n\n"
        "По вопросам обращайтесь к администратору."
    )


def contacts_text() -> str:
    return (
        "ℹ️ Контакты салона красоты Crazy:\n\n"
        "📍 Адрес: г. Москва, ул. Примерная, д. 1\n"
        "📞 Телефон: +7 (999) 123-45-67\n"
        "🕐 Режим работы:\n"
        "Пн-Пт: 9:00 - 20:00\n"
        "Сб-Вс: 10:00 - 18:00\n\n"
        "💬 Telegram: @crazy_salon_bot"
    )


def ask_datetime_text() -> str:
    return "Введите желаемую дату и время в формате: ДД.ММ.ГГГГ ЧЧ:ММ\nНапример: 25.12.2024 14:00"


def ask_note_text() -> str:
    return 'Введите комментарий (или отправьте "-" чтобы пропустить):'


def booking_created_text() -> str:
    return "✅ Запись успешно создана!\n\nМы свяжемся с вами для подтверждения."


def product_card_text(product: Dict) -> str:
    text = f"🛍️ {product.get('title')}\n\n"
    if product.get("description"):
        text += f"{product['description']}\n\n"
    text += f"💰 Цена: {product.get('price')} руб.\n"
    text += f"📦 В наличии: {parse_stock(product.get('stock'))} шт.\n"
    return text


def order_summary_text(product: Dict, quantity: int, total: float) -> str:
    return (
        "Заказ:\n"
        f"Товар: {product.get('title')}\n"
        f"Количество: {quantity}\n"
        f"Сумма: {format_price(total)} руб.\n\n"
        "Выберите способ оплаты:"
    )


def order_created_text(method: PaymentMethod) -> str:
    if method is PaymentMethod.ONLINE:
        return (
            "✅ Заказ создан!\n\n"
            "Для оплаты перейдите по ссылке:\n"
            "(Здесь должна быть ссылка на платежную систему)\n\n"
            "После оплаты заказ будет обработан."
        )
    return (
        "✅ Заказ создан!\n\n"
        "Оплата при получении (самовывоз из салона).\n"
        "Мы свяжемся с вами, когда заказ будет готов."
    )


def admin_booking_text(user: Dict, service_title: str, master_name: str, date_time: str, note: Optional[str]) -> str:
    text = (
        "📅 Новая запись через бота:\n\n"
        f"Клиент: {user.get('name')}\n"
        f"Телефон: {user.get('phone') or '—'}\n"
        f"Услуга: {service_title}\n"
        f"Мастер: {master_name}\n"
        f"Дата: {format_datetime(date_time)}\n"
    )
    if note:
        text += f"Комментарий: {note}"
    return text


def admin_order_text(user: Dict, product_title: str, quantity: int, total: float, method: PaymentMethod) -> str:
    method_label = "Онлайн" if method is PaymentMethod.ONLINE else "Наличные"
    return (
        "🛍️ Новый заказ продукции:\n\n"
        f"Клиент: {user.get('name')}\n"
        f"Телефон: {user.get('phone') or '—'}\n"
        f"Товар: {product_title}\n"
        f"Количество: {quantity}\n"
        f"Сумма: {format_price(total)} руб.\n"
        f"Оплата: {method_label}"
    )


def my_bookings_text(bookings: List[Dict]) -> str:
    if not bookings:
        return "У вас пока нет записей."
    lines = ["📋 Ваши записи:\n"]
    for booking in bookings[:LIST_LIMIT]:
        status = BOOKING_STATUS.get(booking.get("status"), booking.get("status"))
        lines.append(f"📅 {booking.get('service_title') or 'Услуга'}")
        lines.append(f"Дата: {format_datetime(booking.get('date_time'))}")
        lines.append(f"Статус: {status}")
        if booking.get("master_name"):
            lines.append(f"Мастер: {booking['master_name']}")
        lines.append("")
    return "\n".join(lines).rstrip()


def pending_bookings_text(bookings: List[Dict]) -> str:
    if not bookings:
        return "Нет записей, ожидающих подтверждения."
    lines = ["📋 Записи, ожидающие подтверждения:\n"]
    for booking in bookings[:LIST_LIMIT]:
        lines.append(f"ID: {booking.get('id')}")
        lines.append(f"Клиент: {booking.get('name')}")
        lines.append(f"Услуга: {booking.get('service_title')}")
        lines.append(f"Дата: {format_datetime(booking.get('date_time'))}")
        lines.append("")
    return "\n".join(lines).rstrip()
