class SalonBotError(Exception):
    """Базовая ошибка: бот сообщает о ней пользователю, а не падает."""


class ValidationError(SalonBotError):
    """Ввод не подходит текущему шагу, шаг спрашивается заново."""


class StockExceeded(ValidationError):
    def __init__(self, available: int) -> None:
        super().__init__(f"requested quantity exceeds stock ({available})")
        self.available = available


class NotFoundError(SalonBotError):
    """Нужный диалогу пользователь, товар или услуга не существует."""


class GatewayUnavailable(SalonBotError):
    """API салона или база пользователей не ответили."""


class DeliveryFailure(SalonBotError):
    """Одно исходящее сообщение Telegram не доставлено."""
