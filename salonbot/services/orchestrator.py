from dataclasses import replace
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional

from salonbot import texts
from salonbot.errors import GatewayUnavailable, NotFoundError, SalonBotError, StockExceeded, ValidationError
from salonbot.keyboards.main import main_menu_keyboard
from salonbot.keyboards.payment import payment_method_keyboard
from salonbot.keyboards.products import buy_keyboard, catalog_keyboard
from salonbot.keyboards.services import categories_keyboard, masters_keyboard, services_keyboard
from salonbot.logger import get_logger
from salonbot.models import PaymentMethod, Reply, Session, Step
from salonbot.services.booking import (
    check_stock,
    derive_categories,
    parse_booking_datetime,
    parse_note,
    parse_quantity,
    parse_stock,
)
from salonbot.storage import SessionStore

log = get_logger(__name__)

TextStep = Callable[[int, int, Session, str], Awaitable[Optional[Reply]]]


class SalonFlow:
    """Диалоги записи на услугу и заказа товара.

    Методы получают уже разобранное хендлерами событие и возвращают ответ
    пользователю. Сетевые вызовы здесь, разбор ввода в services.booking.
    """

    def __init__(
        self,
        catalog: Any,
        identity: Any,
        sessions: SessionStore,
        notifier: Any,
        now: Callable[[], datetime],
    ) -> None:
        self.catalog = catalog
        self.identity = identity
        self.sessions = sessions
        self.notifier = notifier
        self.now = now
        self._text_steps: Dict[Step, TextStep] = {
            Step.BOOKING_DATETIME: self._on_datetime,
            Step.BOOKING_NOTE: self._on_note,
            Step.PRODUCT_QUANTITY: self._on_quantity,
        }

    def reset(self, chat_id: int) -> None:
        if self.sessions.get(chat_id) is not None:
            log.info("Dropping unfinished flow chat=%s", chat_id)
        self.sessions.delete(chat_id)

    # --- Запись ---
    async def start_booking(self, chat_id: int) -> Reply:
        self.sessions.set(chat_id, Session(step=Step.BOOKING_CATEGORY))
        try:
            services = await self.catalog.list_services()
        except SalonBotError as exc:
            log.error("Loading services failed chat=%s: %s", chat_id, exc)
            self.sessions.delete(chat_id)
            return Reply("Ошибка загрузки услуг. Попробуйте позже.")
        if not services:
            self.sessions.delete(chat_id)
            return Reply("К сожалению, услуги временно недоступны.")
        categories = derive_categories(services)
        if categories:
            return Reply("Выберите категорию услуги:", categories_keyboard(categories))
        self.sessions.set(chat_id, Session(step=Step.BOOKING_SERVICE))
        return Reply("Выберите услугу:", services_keyboard(services))

    async def pick_category(self, chat_id: int, index: int) -> Reply:
        try:
            services = await self.catalog.list_services()
        except SalonBotError as exc:
            log.error("Loading category #%s failed chat=%s: %s", index, chat_id, exc)
            return Reply("Ошибка загрузки услуг.")
        categories = derive_categories(services)
        if not 0 <= index < len(categories):
            # каталог изменился после показа кнопок
            self.sessions.delete(chat_id)
            return Reply("Список категорий изменился. Начните заново через «Записаться».")
        category = categories[index]
        services = [service for service in services if service.get("category") == category]
        self.sessions.set(chat_id, Session(step=Step.BOOKING_SERVICE))
        return Reply(
            f'Услуги категории "{category}":',
            services_keyboard(services, with_duration=True, limit=None),
        )

    async def pick_service(self, chat_id: int, service_id: int) -> Reply:
        self.sessions.set(chat_id, Session(step=Step.BOOKING_MASTER, service_id=service_id))
        try:
            masters = await self.catalog.list_masters()
        except SalonBotError as exc:
            log.error("Loading masters failed chat=%s: %s", chat_id, exc)
            return Reply("Ошибка загрузки мастеров.")
        active = [master for master in masters if master.get("active")]
        return Reply("Выберите мастера (или любого):", masters_keyboard(active))

    async def pick_master(self, chat_id: int, master_id: Optional[int]) -> Reply:
        session = self.sessions.get(chat_id)
        if session is None or session.step is not Step.BOOKING_MASTER or session.service_id is None:
            self.sessions.delete(chat_id)
            return Reply("Запись устарела. Начните заново через «Записаться».")
        self.sessions.set(chat_id, replace(session, step=Step.BOOKING_DATETIME, master_id=master_id))
        return Reply(texts.ask_datetime_text())

    async def _on_datetime(self, chat_id: int, user_id: int, session: Session, text: str) -> Reply:
        try:
            date_time = parse_booking_datetime(text, self.now())
        except ValidationError as exc:
            return Reply(str(exc))
        self.sessions.set(chat_id, replace(session, step=Step.BOOKING_NOTE, date_time=date_time))
        return Reply(texts.ask_note_text())

    async def _on_note(self, chat_id: int, user_id: int, session: Session, text: str) -> Reply:
        session = replace(session, note=parse_note(text))
        # Дальше только одна попытка отправки, сессия больше не нужна
        self.sessions.delete(chat_id)
        try:
            user = await self.identity.get_user(user_id)
        except GatewayUnavailable:
            return Reply("Ошибка создания записи. Попробуйте позже.")
        if user is None:
            return Reply("Ошибка: пользователь не найден. Используйте /start")
        try:
            created = await self.catalog.create_booking(
                name=user.get("name"),
                phone=user.get("phone"),
                email=user.get("email"),
                service_id=session.service_id,
                master_id=session.master_id,
                date_time=session.date_time,
                note=session.note,
                tg_id=user_id,
            )
        except SalonBotError as exc:
            log.error("Booking submit failed user=%s: %s", user_id, exc)
            return Reply("Ошибка создания записи. Попробуйте позже.")
        if not created:
            log.warning("Booking rejected by API user=%s service=%s", user_id, session.service_id)
            return Reply("Не удалось создать запись. Попробуйте позже.")
        log.info(
            "Booking created user=%s service=%s master=%s at=%s",
            user_id,
            session.service_id,
            session.master_id,
            session.date_time,
        )
        await self._notify_booking(user, session)
        return Reply(texts.booking_created_text(), main_menu_keyboard())

    async def _notify_booking(self, user: Dict, session: Session) -> None:
        service_title = f"#{session.service_id}"
        master_name = "Любой"
        try:
            service = await self.catalog.get_service(session.service_id)
            service_title = service.get("title") or service_title
            if session.master_id is not None:
                master = await self.catalog.get_master(session.master_id)
                master_name = master.get("name") or f"#{session.master_id}"
        except SalonBotError as exc:
            log.warning("Booking notification details unavailable: %s", exc)
            if session.master_id is not None and master_name == "Любой":
                master_name = f"#{session.master_id}"
        await self.notifier.notify_admins(
            texts.admin_booking_text(user, service_title, master_name, session.date_time, session.note)
        )

    # --- Продукция ---
    async def show_catalog(self) -> Reply:
        try:
            products = await self.catalog.list_products()
        except SalonBotError as exc:
            log.error("Loading products failed: %s", exc)
            return Reply("Ошибка загрузки продукции.")
        available = [p for p in products if p.get("active") and parse_stock(p.get("stock")) > 0]
        if not available:
            return Reply("Продукция временно недоступна.")
        return Reply("🛍️ Каталог продукции:", catalog_keyboard(available))

    async def show_product(self, product_id: int) -> Reply:
        try:
            product = await self.catalog.get_product(product_id)
        except NotFoundError:
            return Reply("Товар не найден.")
        except GatewayUnavailable:
            return Reply("Ошибка загрузки продукта.")
        photo = self.catalog.photo_url(product["photo"]) if product.get("photo") else None
        return Reply(texts.product_card_text(product), buy_keyboard(product_id), photo=photo)

    async def start_order(self, chat_id: int, user_id: int, product_id: int) -> Reply:
        try:
            user = await self.identity.get_user(user_id)
            if user is None:
                self.sessions.delete(chat_id)
                return Reply(texts.USER_NOT_FOUND)
            product = await self.catalog.get_product(product_id)
        except NotFoundError:
            self.sessions.delete(chat_id)
            return Reply("Товар не найден. Используйте /start")
        except GatewayUnavailable:
            return Reply(texts.GENERIC_ERROR)
        stock = parse_stock(product.get("stock"))
        if stock <= 0:
            return Reply("Товар закончился.")
        self.sessions.set(
            chat_id,
            Session(step=Step.PRODUCT_QUANTITY, product_id=product_id, price=product.get("price")),
        )
        return Reply(f"Введите количество (максимум {stock}):")

    async def _on_quantity(self, chat_id: int, user_id: int, session: Session, text: str) -> Reply:
        try:
            quantity = parse_quantity(text)
        except ValidationError as exc:
            return Reply(str(exc))
        try:
            # Остаток перечитывается сейчас, а не берётся с карточки товара
            product = await self.catalog.get_product(session.product_id)
        except NotFoundError:
            self.sessions.delete(chat_id)
            return Reply("Товар не найден. Используйте /start")
        except GatewayUnavailable:
            return Reply(texts.GENERIC_ERROR)
        try:
            check_stock(quantity, parse_stock(product.get("stock")))
        except StockExceeded as exc:
            return Reply(f"Максимальное количество: {exc.available}")
        price = float(product.get("price", session.price) or 0)
        total = price * quantity
        self.sessions.set(
            chat_id,
            replace(session, step=Step.PRODUCT_PAYMENT, price=price, quantity=quantity, total=total),
        )
        return Reply(
            texts.order_summary_text(product, quantity, total),
            payment_method_keyboard(session.product_id),
        )

    async def pay(self, chat_id: int, user_id: int, product_id: int, method: PaymentMethod) -> Reply:
        session = self.sessions.get(chat_id)
        self.sessions.delete(chat_id)
        if (
            session is None
            or session.step is not Step.PRODUCT_PAYMENT
            or session.product_id != product_id
            or not session.quantity
        ):
            return Reply("Ошибка. Начните заказ заново.")
        try:
            user = await self.identity.get_user(user_id)
        except GatewayUnavailable:
            return Reply("Ошибка создания заказа.")
        if user is None:
            return Reply("Пользователь не найден.")
        try:
            created = await self.catalog.create_order(user["id"], product_id, session.quantity, method)
        except SalonBotError as exc:
            log.error("Order submit failed user=%s product=%s: %s", user_id, product_id, exc)
            return Reply("Ошибка создания заказа.")
        if not created:
            log.warning("Order rejected by API user=%s product=%s", user_id, product_id)
            return Reply("Не удалось создать заказ. Попробуйте позже.")
        log.info("Order created user=%s product=%s qty=%s method=%s", user_id, product_id, session.quantity, method.value)
        product_title = f"#{product_id}"
        try:
            product_title = (await self.catalog.get_product(product_id)).get("title") or product_title
        except SalonBotError as exc:
            log.warning("Order notification details unavailable: %s", exc)
        await self.notifier.notify_admins(
            texts.admin_order_text(user, product_title, session.quantity, session.total or 0, method)
        )
        return Reply(texts.order_created_text(method), main_menu_keyboard())

    # --- Свободный текст ---
    async def handle_text(self, chat_id: int, user_id: int, text: str) -> Optional[Reply]:
        session = self.sessions.get(chat_id)
        if session is None or session.step is None:
            return None
        step_handler = self._text_steps.get(session.step)
        if step_handler is None:
            return None
        return await step_handler(chat_id, user_id, session, text)
