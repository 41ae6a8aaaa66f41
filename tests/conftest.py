"""Shared fixtures and in-memory fakes for the bot's collaborators."""

import os
from datetime import datetime
from typing import Dict, List, Optional
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

os.environ.setdefault("ENV_FILE", os.path.join(os.path.dirname(__file__), "missing.env"))
os.environ.setdefault("TG_BOT_TOKEN", "123456:TEST")
os.environ.setdefault("TG_ADMIN_IDS", "111,222")
os.environ.setdefault("API_BASE", "https://salon.test/api")

import pytest  # noqa: E402
from aiogram.exceptions import TelegramForbiddenError  # noqa: E402

from salonbot.errors import GatewayUnavailable, NotFoundError  # noqa: E402
from salonbot.services.orchestrator import SalonFlow  # noqa: E402
from salonbot.storage import SessionStore  # noqa: E402

TZ = ZoneInfo("Europe/Moscow")
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=TZ)


class FakeCatalog:
    def __init__(
        self,
        services: Optional[List[Dict]] = None,
        masters: Optional[List[Dict]] = None,
        products: Optional[List[Dict]] = None,
        bookings: Optional[List[Dict]] = None,
    ) -> None:
        self.services = services or []
        self.masters = masters or []
        self.products = {p["id"]: dict(p) for p in (products or [])}
        self.bookings = bookings or []
        self.failing: set = set()
        self.booking_result = True
        self.order_result = True
        self.created_bookings: List[Dict] = []
        self.created_orders: List[Dict] = []
        self.product_reads = 0

    def _check(self, name: str) -> None:
        if name in self.failing:
            raise GatewayUnavailable(name)

    async def list_services(self, category=None):
        self._check("list_services")
        if category:
            return [s for s in self.services if s.get("category") == category]
        return list(self.services)

    async def get_service(self, service_id):
        self._check("get_service")
        for service in self.services:
            if service["id"] == service_id:
                return service
        raise NotFoundError(f"service {service_id}")

    async def list_masters(self):
        self._check("list_masters")
        return list(self.masters)

    async def get_master(self, master_id):
        self._check("get_master")
        for master in self.masters:
            if master["id"] == master_id:
                return master
        raise NotFoundError(f"master {master_id}")

    async def list_products(self):
        self._check("list_products")
        return list(self.products.values())

    async def get_product(self, product_id):
        self._check("get_product")
        self.product_reads += 1
        if product_id not in self.products:
            raise NotFoundError(f"product {product_id}")
        return dict(self.products[product_id])

    async def list_bookings(self, user_id=None, status=None):
        self._check("list_bookings")
        return [
            b
            for b in self.bookings
            if (user_id is None or b.get("user_id") == user_id) and (status is None or b.get("status") == status)
        ]

    async def create_booking(self, **payload):
        self._check("create_booking")
        self.created_bookings.append(payload)
        return self.booking_result

    async def create_order(self, user_id, product_id, quantity, payment_method):
        self._check("create_order")
        self.created_orders.append(
            {"user_id": user_id, "product_id": product_id, "quantity": quantity, "payment_method": payment_method}
        )
        return self.order_result

    def photo_url(self, photo):
        return f"https://salon.test/uploads/{photo}"


class FakeIdentity:
    def __init__(self, users: Optional[Dict[int, Dict]] = None, admin_chats: Optional[List[int]] = None) -> None:
        self.users = users or {}
        self.admin_chats = list(admin_chats or [])
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise GatewayUnavailable("identity store down")

    async def get_user(self, tg_id):
        self._check()
        return self.users.get(tg_id)

    async def register_user(self, tg_id, name, phone=None):
        self._check()
        created = tg_id not in self.users
        user = self.users.setdefault(tg_id, {"id": len(self.users) + 1, "tg_id": tg_id, "email": None, "phone": None})
        user["name"] = name
        if phone:
            user["phone"] = phone
        return created

    async def update_phone(self, tg_id, phone):
        self._check()
        if tg_id not in self.users:
            return False
        self.users[tg_id]["phone"] = phone
        return True

    async def admin_chat_ids(self):
        self._check()
        return list(self.admin_chats)

    async def is_admin_chat(self, chat_id):
        self._check()
        return chat_id in self.admin_chats

    async def register_admin(self, chat_id, user_id):
        self._check()
        if chat_id in self.admin_chats:
            return False
        self.admin_chats.append(chat_id)
        return True


class FakeBot:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.sent = []

    async def send_message(self, chat_id, text, **kwargs):
        if chat_id in self.failing:
            raise TelegramForbiddenError(method=MagicMock(), message="bot was blocked by the user")
        self.sent.append((chat_id, text))


class FakeNotifier:
    def __init__(self) -> None:
        self.messages: List[str] = []

    async def notify_admins(self, text: str) -> int:
        self.messages.append(text)
        return 1


SERVICES = [
    {"id": 1, "title": "Cut", "price": 500, "category": "Hair", "duration_minutes": 60},
    {"id": 2, "title": "Polish", "price": 300, "category": "Nails", "duration_minutes": 45},
]
MASTERS = [
    {"id": 7, "name": "Анна", "active": True},
    {"id": 8, "name": "Ольга", "active": False},
]
PRODUCTS = [
    {"id": 5, "title": "Шампунь", "price": 450, "stock": 3, "active": True, "description": "Для всех типов волос"},
    {"id": 6, "title": "Маска", "price": 900, "stock": 0, "active": True},
    {"id": 9, "title": "Лак", "price": 250, "stock": 10, "active": False},
]
USER = {"id": 42, "tg_id": 1001, "name": "Мария", "phone": "+79990000000", "email": "m@example.com"}


@pytest.fixture
def catalog():
    return FakeCatalog(services=[dict(s) for s in SERVICES], masters=MASTERS, products=PRODUCTS)


@pytest.fixture
def identity():
    return FakeIdentity(users={USER["tg_id"]: dict(USER)}, admin_chats=[500, 501])


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def sessions():
    return SessionStore(ttl_seconds=30 * 60)


@pytest.fixture
def flow(catalog, identity, sessions, notifier):
    return SalonFlow(catalog, identity, sessions, notifier, now=lambda: NOW)


def button_texts(markup) -> List[str]:
    return [button.text for row in markup.inline_keyboard for button in row]


def button_data(markup) -> List[str]:
    return [button.callback_data for row in markup.inline_keyboard for button in row]
