from typing import Optional

from aiogram.filters.callback_data import CallbackData

from salonbot.models import PaymentMethod


class CategoryCB(CallbackData, prefix="category"):
    # позиция в списке derive_categories, название может не влезть в 64 байта
    index: int


class ServiceCB(CallbackData, prefix="service"):
    service_id: int


class MasterCB(CallbackData, prefix="master"):
    # None означает «любой мастер»
    master_id: Optional[int] = None


class ProductCB(CallbackData, prefix="product"):
    product_id: int


class BuyCB(CallbackData, prefix="buy"):
    product_id: int


class PaymentCB(CallbackData, prefix="pay"):
    product_id: int
    method: PaymentMethod
