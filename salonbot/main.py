import asyncio
import logging
from functools import partial
from pathlib import Path

from aiogram import Bot, Dispatcher
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application
from aiohttp import web

from salonbot.config import Settings, settings
from salonbot.handlers.admin import admin_router
from salonbot.handlers.booking import booking_router
from salonbot.handlers.contact import contact_router
from salonbot.handlers.errors import handle_error
from salonbot.handlers.products import products_router
from salonbot.handlers.start import start_router
from salonbot.logger import setup_logging
from salonbot.middlewares import ChatLockMiddleware
from salonbot.services.booking import now_local
from salonbot.services.catalog import CatalogGateway
from salonbot.services.identity import IdentityStore, build_engine
from salonbot.services.notify import Notifier
from salonbot.services.orchestrator import SalonFlow
from salonbot.storage import SessionStore

WEBHOOK_PATH = "/webhook"
log = logging.getLogger(__name__)


def build_dispatcher(bot: Bot, config: Settings) -> Dispatcher:
    sessions = SessionStore(ttl_seconds=config.SESSION_TTL_MINUTES * 60)
    catalog = CatalogGateway(config.API_BASE, timeout=config.API_TIMEOUT)
    identity = IdentityStore(build_engine(config.DB_URL, config.DB_CONNECT_TIMEOUT))
    notifier = Notifier(bot, identity, fallback_ids=config.ADMIN_IDS)
    flow = SalonFlow(catalog, identity, sessions, notifier, now=partial(now_local, config.TIMEZONE))

    dp = Dispatcher(flow=flow, catalog=catalog, identity=identity, notifier=notifier)
    chat_lock = ChatLockMiddleware(sessions)
    dp.message.outer_middleware(chat_lock)
    dp.callback_query.outer_middleware(chat_lock)
    dp.errors.register(handle_error)

    # Порядок важен: кнопки меню и команды раньше свободного текста шагов
    dp.include_router(admin_router)
    dp.include_router(contact_router)
    dp.include_router(start_router)
    dp.include_router(products_router)
    dp.include_router(booking_router)

    async def on_shutdown() -> None:
        await catalog.close()
        identity.dispose()

    dp.shutdown.register(on_shutdown)
    return dp


def log_configuration(config: Settings) -> None:
    log.info("Configuration:")
    log.info("  TG_BOT_TOKEN: %s", "set" if config.BOT_TOKEN else "MISSING")
    log.info("  API_BASE: %s", config.API_BASE)
    log.info("  DB_HOST: %s", config.DB_HOST)
    log.info("  TG_ADMIN_IDS: %s", list(config.ADMIN_IDS) or "MISSING")
    log.info("  Mode: %s", f"webhook {config.WEBHOOK_URL}" if config.WEBHOOK_URL else "polling")


async def health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


def build_webhook_app(dp: Dispatcher, bot: Bot, config: Settings) -> web.Application:
    async def on_startup() -> None:
        await bot.set_webhook(f"{config.WEBHOOK_URL.rstrip('/')}{WEBHOOK_PATH}")
        log.info("Webhook set: %s%s", config.WEBHOOK_URL, WEBHOOK_PATH)

    dp.startup.register(on_startup)
    app = web.Application()
    app.router.add_get("/health", health)
    SimpleRequestHandler(dispatcher=dp, bot=bot).register(app, path=WEBHOOK_PATH)
    setup_application(app, dp, bot=bot)
    return app


async def run_webhook(dp: Dispatcher, bot: Bot, config: Settings) -> None:
    runner = web.AppRunner(build_webhook_app(dp, bot, config))
    await runner.setup()
    site = web.TCPSite(runner, host=config.WEBHOOK_HOST, port=config.PORT)
    await site.start()
    log.info("Webhook server running on port %s", config.PORT)
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()


async def main() -> None:
    setup_logging(Path(settings.LOG_DIR))
    log.info("Starting bot")
    log_configuration(settings)
    bot = Bot(token=settings.BOT_TOKEN)
    dp = build_dispatcher(bot, settings)
    if settings.WEBHOOK_URL:
        await run_webhook(dp, bot, settings)
    else:
        await bot.delete_webhook(drop_pending_updates=False)
        await dp.start_polling(bot)
