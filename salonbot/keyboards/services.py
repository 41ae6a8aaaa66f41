from typing import Dict, List, Optional

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from salonbot.callbacks import CategoryCB, MasterCB, ServiceCB

SERVICES_LIMIT = 10


def categories_keyboard(categories: List[str]) -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(text=name, callback_data=CategoryCB(index=index).pack())]
        for index, name in enumerate(categories)
    ]
    return InlineKeyboardMarkup(inline_keyboard=rows)


def services_keyboard(
    services: List[Dict], with_duration: bool = False, limit: Optional[int] = SERVICES_LIMIT
) -> InlineKeyboardMarkup:
    rows = []
    for service in services[:limit]:
        label = f"{service['title']} - {service['price']} руб."
        if with_duration and service.get("duration_minutes"):
            label += f" ({service['duration_minutes']} мин)"
        rows.append([InlineKeyboardButton(text=label, callback_data=ServiceCB(service_id=service["id"]).pack())])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def masters_keyboard(masters: List[Dict]) -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(text=master["name"], callback_data=MasterCB(master_id=master["id"]).pack())]
        for master in masters
    ]
    rows.append([InlineKeyboardButton(text="Любой мастер", callback_data=MasterCB().pack())])
    return InlineKeyboardMarkup(inline_keyboard=rows)
