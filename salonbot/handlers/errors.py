from aiogram.types import ErrorEvent

from salonbot.logger import get_logger


log = get_logger(__name__)


async def handle_error(event: ErrorEvent) -> bool:
    """Последний рубеж: логируем и гасим ошибку, polling продолжает работу."""
    log.error(
        "Unhandled error in update %s: %s",
        event.update.update_id,
        event.exception,
        exc_info=event.exception,
    )
    return True
