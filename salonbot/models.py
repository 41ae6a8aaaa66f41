import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Step(str, Enum):
    BOOKING_CATEGORY = "booking_category"
    BOOKING_SERVICE = "booking_service"
    BOOKING_MASTER = "booking_master"
    BOOKING_DATETIME = "booking_datetime"
    BOOKING_NOTE = "booking_note"
    PRODUCT_QUANTITY = "product_quantity"
    PRODUCT_PAYMENT = "product_payment"


class PaymentMethod(str, Enum):
    ONLINE = "online"
    CASH = "cash"


@dataclass(frozen=True)
class Session:
    step: Optional[Step] = None
    service_id: Optional[int] = None
    master_id: Optional[int] = None
    date_time: Optional[str] = None  # YYYY-MM-DDTHH:MM
    note: Optional[str] = None
    product_id: Optional[int] = None
    price: Optional[float] = None
    quantity: Optional[int] = None
    total: Optional[float] = None
    touched_at: float = field(default_factory=time.monotonic, compare=False)


@dataclass
class Reply:
    text: str
    markup: Any = None
    photo: Optional[str] = None
