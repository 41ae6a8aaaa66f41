import re
from datetime import datetime
from typing import Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

from salonbot.errors import StockExceeded, ValidationError

DATETIME_RE = re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{4})\s+(\d{1,2}):(\d{2})", re.ASCII)
QUANTITY_RE = re.compile(r"\d+", re.ASCII)
NORMALIZED_FORMAT = "%Y-%m-%dT%H:%M"
DISPLAY_FORMAT = "%d.%m.%Y %H:%M"
SKIP_NOTE = "-"


def now_local(tz_name: str) -> datetime:
    return datetime.now(ZoneInfo(tz_name))


def parse_booking_datetime(text: str, now: datetime) -> str:
    """
    Разбирает ДД.ММ.ГГГГ ЧЧ:ММ в часовом поясе now.
    Возвращает YYYY-MM-DDTHH:MM. Несуществующая дата и момент не позже now
    отклоняются как ValidationError с текстом для пользователя.
    """
    match = DATETIME_RE.fullmatch(text.strip())
    if not match:
        raise ValidationError("Неверный формат. Используйте: ДД.ММ.ГГГГ ЧЧ:ММ")
    day, month, year, hour, minute = (int(part) for part in match.groups())
    try:
        moment = datetime(year, month, day, hour, minute, tzinfo=now.tzinfo)
    except ValueError:
        raise ValidationError("Неверная дата или дата в прошлом.") from None
    if moment <= now:
        raise ValidationError("Неверная дата или дата в прошлом.")
    return moment.strftime(NORMALIZED_FORMAT)


def parse_note(text: str) -> Optional[str]:
    return None if text.strip() == SKIP_NOTE else text


def parse_quantity(text: str) -> int:
    # только цифры: int() принял бы "+3", "1_0" и цифры других алфавитов
    if not QUANTITY_RE.fullmatch(text.strip()):
        raise ValidationError("Введите корректное количество.")
    quantity = int(text.strip())
    if quantity <= 0:
        raise ValidationError("Введите корректное количество.")
    return quantity


def parse_stock(value) -> int:
    """Остаток из API: 3, "3" и "3.00" дают 3, мусор считается нулём."""
    try:
        return int(float(value or 0))
    except (TypeError, ValueError, OverflowError):
        return 0


def check_stock(quantity: int, stock: int) -> None:
    if quantity > stock:
        raise StockExceeded(stock)


def derive_categories(services: Iterable[Dict]) -> List[str]:
    seen: Dict[str, None] = {}
    for service in services:
        category = service.get("category")
        if category:
            seen.setdefault(category, None)
    return list(seen)


def format_datetime(value: Optional[str]) -> str:
    if not value:
        return "—"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00").replace(" ", "T"))
    except ValueError:
        return value
    return parsed.strftime(DISPLAY_FORMAT)


def format_price(value) -> str:
    amount = float(value)
    if amount.is_integer():
        return str(int(amount))
    return f"{amount:.2f}"
